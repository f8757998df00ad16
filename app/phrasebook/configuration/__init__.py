"""Configuration module - public API.

Centralized configuration using Pydantic BaseSettings.

Exports:
    Settings: Main settings class
    I18nSettings: Message resolution settings (for testing/overrides)

Example:
    ```python
    from phrasebook.services import get_settings

    settings = get_settings()
    default_locale = settings.i18n.default_locale
    ```
"""

from phrasebook.configuration.i18n import I18nSettings
from phrasebook.configuration.settings import Settings

__all__ = ["Settings", "I18nSettings"]
