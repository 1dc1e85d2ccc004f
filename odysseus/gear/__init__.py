"""
Gear Engine Layer.

Decodes GearBuilder build codes and computes total stats for a build from
the item catalog. Everything here is synchronous and free of Discord types.
"""

from odysseus.gear.aggregator import aggregate, aggregate_slot
from odysseus.gear.base import (
    EMPTY_ACCESSORY_ID,
    EMPTY_BOOTS_ID,
    EMPTY_CHESTPLATE_ID,
    EMPTY_ENCHANTMENT_ID,
    EMPTY_GEM_ID,
    EMPTY_MODIFIER_ID,
    MAX_LEVEL,
    FightingStyle,
    Item,
    LevelStats,
    Loadout,
    Magic,
    Slot,
    TotalStats,
)
from odysseus.gear.catalog import (
    Catalog,
    CatalogLoadError,
    CatalogSnapshot,
    ModifierKind,
    load_catalog,
    read_items,
)
from odysseus.gear.decoder import (
    DecodeError,
    IndexOutOfRangeError,
    InvalidIntegerError,
    SectionCountError,
    TokenCountError,
    decode_build_code,
)

__all__ = [
    "EMPTY_ACCESSORY_ID",
    "EMPTY_BOOTS_ID",
    "EMPTY_CHESTPLATE_ID",
    "EMPTY_ENCHANTMENT_ID",
    "EMPTY_GEM_ID",
    "EMPTY_MODIFIER_ID",
    "MAX_LEVEL",
    "Catalog",
    "CatalogLoadError",
    "CatalogSnapshot",
    "DecodeError",
    "FightingStyle",
    "IndexOutOfRangeError",
    "InvalidIntegerError",
    "Item",
    "LevelStats",
    "Loadout",
    "Magic",
    "ModifierKind",
    "SectionCountError",
    "Slot",
    "TokenCountError",
    "TotalStats",
    "aggregate",
    "aggregate_slot",
    "decode_build_code",
    "load_catalog",
    "read_items",
]
