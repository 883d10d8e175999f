"""
Notification data models.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

# MessageCard accent colour for replacement notices
WARNING_COLOR = "FF9900"


@dataclass
class Notification:
    """
    Notification message to be sent via providers.

    Attributes:
        subject: Notification subject/title
        message: Headline shown above the facts
        facts: Ordered (name, value) pairs rendered as a fact table
        theme_color: Card accent colour as a hex string
    """
    subject: str
    message: str
    facts: List[Tuple[str, str]] = field(default_factory=list)
    theme_color: str = WARNING_COLOR

    def to_message_card(self) -> Dict[str, Any]:
        """Render as a Teams connector MessageCard."""
        return {
            "@type": "MessageCard",
            "@context": "http://schema.org/extensions",
            "summary": self.subject,
            "themeColor": self.theme_color,
            "title": self.subject,
            "sections": [
                {
                    "activityTitle": self.message,
                    "facts": [{"name": name, "value": value} for name, value in self.facts],
                    "markdown": True,
                }
            ],
        }
