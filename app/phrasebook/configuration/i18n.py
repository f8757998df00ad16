"""Message resolution engine settings."""

from pathlib import Path
from typing import List, Literal

from pydantic import Field, field_validator

from phrasebook.configuration.base import InfrastructureSettings

# This file is at .../app/phrasebook/configuration/i18n.py
DEFAULT_BUNDLE_DIR = Path(__file__).resolve().parents[2] / "locales"


class I18nSettings(InfrastructureSettings):
    """Configuration for bundle loading and message resolution.

    Environment Variables:
        I18N_BUNDLE_DIR: Directory holding bundle resources (default: app/locales)
        I18N_BASENAMES: JSON list of basenames in lookup order
            (default: ["messages", "problems"])
        I18N_DEFAULT_LOCALE: Default locale tag (default: en)
        I18N_MISS_POLICY: 'lenient' returns the key, 'strict' raises (default: lenient)
        I18N_CACHE_SECONDS: Bundle cache lifetime; -1 caches forever,
            0 disables caching (default: -1)
        I18N_RELOADABLE: Allow explicit bundle invalidation (default: True)
        I18N_ENCODING: Resource encoding (default: utf-8)
        I18N_PRELOAD: Load every bundle at startup (default: True)
        I18N_PROBLEM_TYPE_BASE: Base URI for problem detail types
            (default: about:blank)

    Example:
        ```python
        from phrasebook.services import get_settings

        settings = get_settings()
        if settings.i18n.miss_policy == "strict":
            ...
        ```
    """

    bundle_dir: Path = Field(
        default=DEFAULT_BUNDLE_DIR,
        alias="I18N_BUNDLE_DIR",
        description="Directory holding bundle resources",
    )
    basenames: List[str] = Field(
        default_factory=lambda: ["messages", "problems"],
        alias="I18N_BASENAMES",
        description="Basenames searched in registration order",
    )
    default_locale: str = Field(
        default="en",
        alias="I18N_DEFAULT_LOCALE",
        description="Locale used when the requested locale has no text",
    )
    miss_policy: Literal["lenient", "strict"] = Field(
        default="lenient",
        alias="I18N_MISS_POLICY",
        description="Behavior when no bundle defines a key",
    )
    cache_seconds: int = Field(
        default=-1,
        alias="I18N_CACHE_SECONDS",
        description="Bundle cache lifetime in seconds (-1: forever, 0: never)",
    )
    reloadable: bool = Field(
        default=True,
        alias="I18N_RELOADABLE",
        description="Allow explicit bundle invalidation",
    )
    encoding: str = Field(
        default="utf-8",
        alias="I18N_ENCODING",
        description="Bundle resource encoding",
    )
    preload: bool = Field(
        default=True,
        alias="I18N_PRELOAD",
        description="Load every bundle at startup so malformed resources fail fast",
    )
    problem_type_base: str = Field(
        default="about:blank",
        alias="I18N_PROBLEM_TYPE_BASE",
        description="Base URI for problem detail 'type' members",
    )

    @field_validator("basenames")
    @classmethod
    def _require_basenames(cls, value: List[str]) -> List[str]:
        cleaned = [name.strip() for name in value if name and name.strip()]
        if not cleaned:
            raise ValueError("I18N_BASENAMES must name at least one basename")
        return cleaned
