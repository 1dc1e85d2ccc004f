"""
Tests for composing a single slot from display names.

Covers:
- Enchant, modifier and gem name resolution
- Modifiers limited to the item's valid modifiers
- Gems truncated to the item's sockets
- Level clamped to the item's minimum level and the max level
"""

import pytest

from odysseus.gear.aggregator import aggregate_slot
from odysseus.gear.base import EMPTY_ENCHANTMENT_ID, EMPTY_MODIFIER_ID, Item, LevelStats
from odysseus.gear.catalog import Catalog
from odysseus.gear.composer import (
    SlotCompositionError,
    allowed_modifier_names,
    clamp_level,
    compose_slot,
    level_bounds,
)


def _amulet(**overrides) -> Item:
    values = dict(
        id="A01",
        name="Sun Amulet",
        main_type="Accessory",
        gem_no=2,
        valid_modifiers=("Armored", "atlantean essence"),
        stats_per_level=(LevelStats(level=140, power=10),),
    )
    values.update(overrides)
    return Item(**values)


def _catalog(*extra: Item) -> Catalog:
    return Catalog([
        Item(id="AAD", name="None", main_type="Enchant"),
        Item(id="AAE", name="None", main_type="Modifier"),
        Item(id="AAF", name="None", main_type="Gem"),
        Item(id="E01", name="Strong", main_type="Enchant", power_increment=0.5),
        Item(id="M01", name="Armored", main_type="Modifier", defense_increment=1.0),
        Item(id="M02", name="Hasty", main_type="Modifier", agility_increment=1.0),
        Item(id="M03", name="Atlantean Essence", main_type="Modifier"),
        Item(id="G01", name="Ruby", main_type="Gem", power=2),
        Item(id="G02", name="Onyx", main_type="Gem", defense=3),
        Item(id="G03", name="Topaz", main_type="Gem", agility=4),
        Item(id="G99", name="Old Gem", main_type="Gem", deleted=True),
        _amulet(),
        *extra,
    ])


class TestLevel:
    def test_none_means_max(self):
        assert clamp_level(_amulet(), None) == 140

    def test_clamped_to_max(self):
        assert clamp_level(_amulet(), 900, max_level=120) == 120

    def test_clamped_to_item_minimum(self):
        item = _amulet(min_level=60)

        assert level_bounds(item) == (60, 140)
        assert clamp_level(item, 10) == 60

    def test_no_minimum_floors_at_zero(self):
        assert clamp_level(_amulet(), -5) == 0


class TestModifiers:
    def test_allowed_names_use_catalog_spelling(self):
        assert allowed_modifier_names(_amulet(), _catalog()) == ["Armored", "Atlantean Essence"]

    def test_unlisted_names_are_skipped(self):
        item = _amulet(valid_modifiers=("Armored", "Vanished"))

        assert allowed_modifier_names(item, _catalog()) == ["Armored"]

    def test_valid_modifier_applied(self):
        slot = compose_slot(_catalog(), _amulet(), modifier="armored")

        assert slot.modifier == "M01"

    def test_invalid_modifier_rejected(self):
        with pytest.raises(SlotCompositionError) as exc_info:
            compose_slot(_catalog(), _amulet(), modifier="Hasty")

        assert str(exc_info.value) == "Sun Amulet cannot take the Hasty modifier"

    def test_item_without_valid_modifiers_rejects_any(self):
        with pytest.raises(SlotCompositionError):
            compose_slot(_catalog(), _amulet(valid_modifiers=None), modifier="Armored")

    def test_none_means_no_modifier(self):
        slot = compose_slot(_catalog(), _amulet(valid_modifiers=None), modifier="None")

        assert slot.modifier == EMPTY_MODIFIER_ID


class TestNameResolution:
    def test_enchant_resolved(self):
        slot = compose_slot(_catalog(), _amulet(), enchant="strong")

        assert slot.enchant == "E01"

    def test_blank_enchant_is_empty(self):
        assert compose_slot(_catalog(), _amulet(), enchant="  ").enchant == EMPTY_ENCHANTMENT_ID

    def test_unknown_enchant(self):
        with pytest.raises(SlotCompositionError, match="Unknown enchant: Mighty"):
            compose_slot(_catalog(), _amulet(), enchant="Mighty")

    def test_wrong_type_is_unknown(self):
        with pytest.raises(SlotCompositionError, match="Unknown gem: Strong"):
            compose_slot(_catalog(), _amulet(), gems=["Strong"])

    def test_deleted_gem_is_unknown(self):
        with pytest.raises(SlotCompositionError):
            compose_slot(_catalog(), _amulet(), gems=["Old Gem"])

    def test_composition_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            compose_slot(_catalog(), _amulet(), enchant="Mighty")


class TestGems:
    def test_gems_truncated_to_sockets(self):
        slot = compose_slot(_catalog(), _amulet(), gems=["Ruby", "Onyx", "Topaz"])

        assert slot.gems == ("G01", "G02")

    def test_blank_gems_skipped(self):
        slot = compose_slot(_catalog(), _amulet(), gems=["", "Onyx", "None"])

        assert slot.gems == ("G02",)

    def test_socketless_item_takes_no_gems(self):
        slot = compose_slot(_catalog(), _amulet(gem_no=None), gems=["Ruby"])

        assert slot.gems == ()


class TestComposedStats:
    def test_full_slot_aggregates(self):
        catalog = _catalog()

        slot = compose_slot(
            catalog, _amulet(), level=140, enchant="Strong", modifier="Armored",
            gems=["Ruby", "Onyx"],
        )
        stats = aggregate_slot(slot, catalog)

        assert stats.power == 10 + 7 + 2
        assert stats.defense == 14 + 3
