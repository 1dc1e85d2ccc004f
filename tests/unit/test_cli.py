"""
Tests for the odysseus CLI.

These tests verify that:
- The parser accepts each sub-command and its flags
- build / item / sort print results from a catalog file
- Errors map to exit code 1
"""

import json
from argparse import Namespace
from unittest.mock import MagicMock

import pytest

from odysseus.__main__ import _split_build_code, cmd_build, cmd_item, cmd_sort, create_parser
from odysseus.config.settings import CatalogSettings, Settings

CODE = "120,10,20,30,40|5|1|A01,E01,AAE,140|AAA,AAD,AAE,140|AAA,AAD,AAE,140|AAB,AAD,AAE,140|AAC,AAD,AAE,140"


def _settings(tmp_path) -> Settings:
    path = tmp_path / "items.json"
    path.write_text(json.dumps([
        {"id": "A01", "name": "Sun Amulet", "mainType": "Accessory", "rarity": "Rare",
         "gemNo": 1, "validModifiers": ["Armored"],
         "statsPerLevel": [{"level": 140, "power": 10}]},
        {"id": "C01", "name": "Iron Chestplate", "mainType": "Chestplate",
         "statsPerLevel": [{"level": 140, "power": 4, "defense": 30}]},
        {"id": "E01", "name": "Strong", "mainType": "Enchant", "powerIncrement": 0.5},
        {"id": "M01", "name": "Armored", "mainType": "Modifier", "defenseIncrement": 1.0},
        {"id": "G01", "name": "Ruby", "mainType": "Gem", "agility": 2},
        {"id": "G02", "name": "Onyx", "mainType": "Gem", "defense": 3},
    ]))
    settings = MagicMock(spec=Settings)
    settings.catalog = CatalogSettings(items_path=path)
    return settings


def _item_args(name, level=None, enchant=None, modifier=None, gems=None) -> Namespace:
    return Namespace(name=name, level=level, enchant=enchant, modifier=modifier, gems=gems)


class TestParser:
    def test_build_takes_code(self):
        args = create_parser().parse_args(["build", CODE])
        assert args.command == "build"
        assert args.code == CODE

    def test_item_level_defaults_to_none(self):
        args = create_parser().parse_args(["item", "Sun Amulet"])
        assert args.name == "Sun Amulet"
        assert args.level is None

    def test_item_level_flag(self):
        args = create_parser().parse_args(["item", "Sun Amulet", "--level", "90"])
        assert args.level == 90

    def test_item_part_flags(self):
        args = create_parser().parse_args([
            "item", "Sun Amulet", "--enchant", "Strong", "--modifier", "Armored",
            "--gem", "Ruby", "--gem", "Onyx",
        ])
        assert args.enchant == "Strong"
        assert args.modifier == "Armored"
        assert args.gems == ["Ruby", "Onyx"]

    def test_item_part_flags_default_to_none(self):
        args = create_parser().parse_args(["item", "Sun Amulet"])
        assert (args.enchant, args.modifier, args.gems) == (None, None, None)

    def test_sort_flags(self):
        args = create_parser().parse_args(["sort", "defense", "--type", "Chestplate", "--limit", "3"])
        assert args.stat == "defense"
        assert args.item_type == "Chestplate"
        assert args.limit == 3

    def test_sort_invalid_stat_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["sort", "luck"])

    def test_global_flags(self):
        args = create_parser().parse_args(["--log-level", "DEBUG", "config"])
        assert args.log_level == "DEBUG"
        assert args.command == "config"

    def test_split_build_code(self):
        assert _split_build_code("https://tools.arcaneodyssey.net/gearBuilder#" + CODE) == CODE
        assert _split_build_code(CODE) == CODE


class TestCommands:
    @pytest.mark.asyncio
    async def test_build_prints_totals(self, tmp_path, capsys):
        code = await cmd_build(Namespace(code=CODE), _settings(tmp_path))

        out = capsys.readouterr().out
        assert code == 0
        assert "Level: 120" in out
        assert "Magic/Fighting Styles: Boxing, Fire" in out
        assert "Sun Amulet\nEnchant: Strong" in out
        assert "Power: 17" in out

    @pytest.mark.asyncio
    async def test_build_decode_error(self, tmp_path, capsys):
        code = await cmd_build(Namespace(code="abc|..."), _settings(tmp_path))

        assert code == 1
        assert "Failed to parse build" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_build_missing_catalog(self, tmp_path):
        settings = MagicMock(spec=Settings)
        settings.catalog = CatalogSettings(items_path=tmp_path / "missing.json")

        assert await cmd_build(Namespace(code=CODE), settings) == 1

    @pytest.mark.asyncio
    async def test_item(self, tmp_path, capsys):
        code = await cmd_item(_item_args("sun amulet"), _settings(tmp_path))

        out = capsys.readouterr().out
        assert code == 0
        assert "=== Sun Amulet ===" in out
        assert "Gem Slots: 1" in out
        assert "Power: 10" in out

    @pytest.mark.asyncio
    async def test_item_not_found(self, tmp_path, capsys):
        code = await cmd_item(_item_args("Moon Amulet"), _settings(tmp_path))

        assert code == 1
        assert "Item not found" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_item_negative_level(self, tmp_path):
        assert await cmd_item(_item_args("Sun Amulet", level=-5), _settings(tmp_path)) == 1

    @pytest.mark.asyncio
    async def test_item_with_parts(self, tmp_path, capsys):
        args = _item_args(
            "Sun Amulet", enchant="strong", modifier="Armored", gems=["Ruby", "Onyx"]
        )

        code = await cmd_item(args, _settings(tmp_path))

        out = capsys.readouterr().out
        assert code == 0
        assert "Enchant: Strong" in out
        assert "Modifier: Armored" in out
        # One socket: Onyx is dropped
        assert "Gems: Ruby\n" in out
        assert "Power: 17" in out
        assert "Defense: 14" in out
        assert "Agility: 2" in out

    @pytest.mark.asyncio
    async def test_item_rejects_modifier_not_valid_for_item(self, tmp_path, capsys):
        args = _item_args("Iron Chestplate", modifier="Armored")

        assert await cmd_item(args, _settings(tmp_path)) == 1
        assert "Iron Chestplate cannot take the Armored modifier" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_item_unknown_enchant(self, tmp_path, capsys):
        args = _item_args("Sun Amulet", enchant="Mighty")

        assert await cmd_item(args, _settings(tmp_path)) == 1
        assert "Unknown enchant: Mighty" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_sort(self, tmp_path, capsys):
        args = Namespace(stat="power", item_type=None, limit=10)

        code = await cmd_sort(args, _settings(tmp_path))

        lines = [line for line in capsys.readouterr().out.splitlines() if ". " in line]
        assert code == 0
        assert lines[0].strip().startswith("1. Sun Amulet")
        assert lines[1].strip().startswith("2. Iron Chestplate")

    @pytest.mark.asyncio
    async def test_sort_no_results(self, tmp_path, capsys):
        args = Namespace(stat="regeneration", item_type=None, limit=10)

        assert await cmd_sort(args, _settings(tmp_path)) == 0
        assert "No items found" in capsys.readouterr().out
