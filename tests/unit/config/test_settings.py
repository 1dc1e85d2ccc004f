"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from odysseus.config.settings import (
    DEFAULT_BUILD_URL_PREFIXES,
    CatalogSettings,
    Settings,
    load_settings,
)


class TestDefaults:
    def test_catalog_defaults(self):
        settings = CatalogSettings()

        assert settings.items_path == Path("items.json")
        assert settings.max_level == 140
        assert tuple(settings.build_url_prefixes) == DEFAULT_BUILD_URL_PREFIXES
        assert settings.atlantean_essence_id is None

    def test_bot_defaults(self, tmp_path):
        settings = Settings(_env_file=tmp_path / "missing.env")

        assert settings.bot.name == "Odysseus"
        assert settings.bot.allowed_channel_ids == []
        assert settings.bot.embed_footer == "Odysseus - Made with ❤️"


class TestEnvironment:
    def test_nested_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CATALOG__MAX_LEVEL", "120")
        monkeypatch.setenv("CATALOG__ATLANTEAN_ESSENCE_ID", "AQZ")
        monkeypatch.setenv("BOT__ALLOWED_CHANNEL_IDS", "[111,222]")

        settings = Settings(_env_file=tmp_path / "missing.env")

        assert settings.catalog.max_level == 120
        assert settings.catalog.atlantean_essence_id == "AQZ"
        assert settings.bot.allowed_channel_ids == [111, 222]

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LOG_LEVEL=DEBUG\nCATALOG__ITEMS_PATH=data/items.json\n")

        settings = load_settings(env_file)

        assert settings.log_level == "DEBUG"
        assert settings.catalog.items_path == Path("data/items.json")


class TestValidation:
    def test_empty_prefix_list_rejected(self):
        with pytest.raises(ValidationError):
            CatalogSettings(build_url_prefixes=["  "])

    def test_negative_max_level_rejected(self):
        with pytest.raises(ValidationError):
            CatalogSettings(max_level=-1)
