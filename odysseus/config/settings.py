"""
Application settings.

Values come from the environment and an optional ``.env`` file; nested
sections use ``__`` (``BOT__TOKEN``, ``CATALOG__ITEMS_PATH``).
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BUILD_URL_PREFIXES = (
    "https://tools.arcaneodyssey.net/gearBuilder#",
    "https://aotools.woodyloody.com/gearBuilder#",
)


class BotSettings(BaseSettings):
    """Discord client options."""

    name: str = Field(default="Odysseus", description="Name used in startup logs")
    command_prefix: str = Field(default="!", description="Prefix for text commands")
    token: str = Field(default="", description="Discord bot token; required by `run`")
    embed_footer: str = Field(
        default="Odysseus - Made with ❤️", description="Footer text on every embed"
    )
    allowed_channel_ids: list[int] = Field(
        default_factory=list,
        description="Channels the bot answers in; empty means everywhere. "
                    "Example: BOT__ALLOWED_CHANNEL_IDS='[123456,789012]'",
    )
    dev_guild_id: int | None = Field(
        default=None,
        description="Guild to sync slash commands to immediately while developing. "
                    "Unset means a global sync, which Discord can take an hour to roll out.",
    )


class CatalogSettings(BaseSettings):
    """Item catalog and build-code options."""

    items_path: Path = Field(
        default=Path("items.json"),
        description="Item catalog JSON document (a list of items)",
    )
    max_level: int = Field(
        default=140, ge=0, description="Highest item level; used by /item and /sort"
    )
    build_url_prefixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BUILD_URL_PREFIXES),
        description="GearBuilder URL prefixes accepted by /build",
    )
    atlantean_essence_id: str | None = Field(
        default=None,
        description="Catalog id of the Atlantean Essence modifier. "
                    "Unset means the id is found by name when the catalog is indexed.",
    )

    model_config = SettingsConfigDict(env_prefix="CATALOG_")

    @field_validator("build_url_prefixes")
    @classmethod
    def _require_prefixes(cls, value: list[str]) -> list[str]:
        prefixes = [p.strip() for p in value if p.strip()]
        if not prefixes:
            raise ValueError("at least one build URL prefix is required")
        return prefixes


class Settings(BaseSettings):
    """Root settings object."""

    environment: Literal["development", "production"] = Field(
        default="development", description="Deployment environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Level for the odysseus loggers"
    )
    log_file: Path | None = Field(default=None, description="Optional log file")

    bot: BotSettings = Field(default_factory=BotSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, created on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    (Re)load settings, optionally from a specific ``.env`` file.

    The result also becomes the instance returned by get_settings().
    """
    global _settings
    _settings = Settings(_env_file=env_file) if env_file else Settings()
    return _settings
