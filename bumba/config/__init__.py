"""Configuration module for the BUMBA routing framework.

Usage:
    from bumba.config import get_settings

    settings = get_settings()
    print(settings.routing.low_confidence_threshold)
    print(settings.models.manager_model)
"""

from bumba.config.settings import (
    # Main settings class
    BumbaSettings,
    # Nested settings classes
    RoutingSettings,
    ModelSettings,
    # Singleton functions
    get_settings,
    reload_settings,
    clear_settings_cache,
    # Constants
    DEFAULT_MANAGER_MODEL,
    DEFAULT_REASONING_MODEL,
    DEFAULT_CODING_MODEL,
    DEFAULT_GENERAL_MODEL,
)

__all__ = [
    "BumbaSettings",
    "RoutingSettings",
    "ModelSettings",
    "get_settings",
    "reload_settings",
    "clear_settings_cache",
    "DEFAULT_MANAGER_MODEL",
    "DEFAULT_REASONING_MODEL",
    "DEFAULT_CODING_MODEL",
    "DEFAULT_GENERAL_MODEL",
]
