"""
Notification providers for sending notifications via different channels.
"""

import logging
from abc import ABC, abstractmethod

import requests

from laptop_tracker.notifications.models import Notification

logger = logging.getLogger(__name__)


class NotificationProvider(ABC):
    """Base class for notification providers."""

    @abstractmethod
    def send(self, notification: Notification) -> bool:
        """
        Send a notification.

        Args:
            notification: Notification to send

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    def is_enabled(self) -> bool:
        """Check if provider is properly configured and enabled."""
        pass


class TeamsWebhookProvider(NotificationProvider):
    """
    Microsoft Teams notification provider.

    Posts a MessageCard to a channel's incoming webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize Teams provider.

        Args:
            webhook_url: Incoming webhook URL
            timeout: HTTP request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

        if self.is_enabled():
            logger.info("TeamsWebhookProvider configured")

    def is_enabled(self) -> bool:
        """Check if webhook is properly configured."""
        return bool(self.webhook_url)

    def send(self, notification: Notification) -> bool:
        """
        Send Teams notification.

        Args:
            notification: Notification to send

        Returns:
            True if successful, False otherwise
        """
        if not self.is_enabled():
            logger.warning("Teams provider not properly configured, skipping")
            return False

        try:
            response = requests.post(
                self.webhook_url,
                json=notification.to_message_card(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout
            )
            response.raise_for_status()

            logger.info(f"Sent Teams notification: {notification.subject}")
            return True

        except Exception as e:
            logger.error(f"Failed to send Teams notification: {e}")
            return False
