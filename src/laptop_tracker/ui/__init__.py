"""
User interface and API module.

Provides the device aggregation REST API and the device tracker dashboard.
"""

__all__ = ["http_server", "devices_api", "dashboard", "view"]
