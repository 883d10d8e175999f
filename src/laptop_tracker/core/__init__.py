"""
Core module: shared configuration.
"""

from .config import (
    AppConfig,
    IntuneConfig,
    KandjiConfig,
    TeamsConfig,
    get_config,
    reload_config,
)

__all__ = [
    "AppConfig",
    "IntuneConfig",
    "KandjiConfig",
    "TeamsConfig",
    "get_config",
    "reload_config",
]
