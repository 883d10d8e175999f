"""
Notifications module.

Sends one-time device replacement notifications to Microsoft Teams.
"""

from laptop_tracker.notifications.models import Notification
from laptop_tracker.notifications.providers import NotificationProvider, TeamsWebhookProvider
from laptop_tracker.notifications.formatters import device_replacement_notification
from laptop_tracker.notifications.gate import NotificationGate

__all__ = [
    "Notification",
    "NotificationProvider",
    "TeamsWebhookProvider",
    "device_replacement_notification",
    "NotificationGate",
]
