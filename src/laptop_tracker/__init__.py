"""
Laptop Tracker - MDM device age aggregator

This package collects device inventory from Kandji (macOS) and Microsoft
Intune (Windows), normalizes the records into a common shape, flags devices
that are due for replacement and sends a one-time Teams notification per
aged device.

Main modules:
- core: configuration
- vendors: Kandji and Intune/Graph API clients
- inventory: device models, normalization, age classification, notified store
- notifications: Teams webhook provider and the notification gate
- ui: HTTP API and dashboard
"""

__version__ = "0.3.0"
__author__ = "Laptop Tracker Team"

__all__ = ["__version__", "__author__"]
