"""Configuration APIs."""

from ideagpt.config.properties import PropertiesError, load_properties, parse_properties
from ideagpt.config.settings import (
    DEFAULT_CONFIG_PATH,
    ApiSettings,
    AppSettings,
    RuntimeSettings,
    StartupConfigurationError,
    UiSettings,
    load_settings,
    settings_summary,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ApiSettings",
    "AppSettings",
    "PropertiesError",
    "RuntimeSettings",
    "StartupConfigurationError",
    "UiSettings",
    "load_properties",
    "load_settings",
    "parse_properties",
    "settings_summary",
]
