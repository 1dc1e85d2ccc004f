"""
Stat aggregation for decoded builds.

Each slot is evaluated at its own item level ``L``:

- ``multiplier = L // 10`` scales enchant and modifier increments
- ``L // 10 * 10`` selects the row of the item's per-level table

A build's total is the field-wise sum of its five slots. Unknown ids
contribute nothing, so aggregation always completes.
"""

from __future__ import annotations

import math

from odysseus.gear.base import (
    EMPTY_GEM_ID,
    FIXED_STATS,
    GEM_STATS,
    INCREMENTABLE_STATS,
    LEVEL_STATS,
    Item,
    LevelStats,
    Loadout,
    Slot,
    TotalStats,
)
from odysseus.gear.catalog import Catalog, CatalogSnapshot, ModifierKind

# Atlantean Essence: the first of these stats still at zero receives
# floor(factor * multiplier)
ATLANTEAN_ESSENCE_PRIORITY = (
    ("power", 3.0),
    ("defense", 9.07),
    ("attack_size", 3.0),
    ("attack_speed", 3.0),
    ("agility", 3.0),
    ("intensity", 3.0),
)


def aggregate(loadout: Loadout, catalog: Catalog | CatalogSnapshot) -> TotalStats:
    """
    Total stats of every equipped slot in ``loadout``.

    Reads a single catalog snapshot, so a concurrent ``Catalog.replace()``
    cannot mix two catalogs into one result.
    """
    view = _view(catalog)
    total = TotalStats()
    for slot in loadout.slots:
        total += aggregate_slot(slot, view)
    return total


def aggregate_slot(slot: Slot, catalog: Catalog | CatalogSnapshot) -> TotalStats:
    """
    Stats contributed by one slot.

    Args:
        slot: The equipped slot
        catalog: Catalog (or snapshot) to resolve ids against

    Returns:
        The slot's TotalStats; zero for an empty-equipment sentinel
    """
    if slot.is_empty:
        return TotalStats()

    view = _view(catalog)
    item = view.find_by_id(slot.item)
    multiplier = slot.level // 10
    stats = dict.fromkeys(FIXED_STATS, 0)

    row = item.stats_at(multiplier * 10)
    if row is not None:
        _add_fields(stats, row, LEVEL_STATS)

    _add_fields(stats, item, FIXED_STATS)

    if slot.has_enchant:
        enchant = view.find_by_id(slot.enchant)
        _add_increments(stats, enchant, multiplier)
        stats["warding"] += enchant.warding or 0

    for gem_id in slot.gems[: item.socket_count]:
        if gem_id and gem_id != EMPTY_GEM_ID:
            _add_fields(stats, view.find_by_id(gem_id), GEM_STATS)

    if slot.has_modifier:
        kind = view.modifier_kind(slot.modifier)
        if kind is ModifierKind.ATLANTEAN_ESSENCE:
            _apply_atlantean_essence(stats, multiplier)
        else:
            _add_increments(stats, view.find_by_id(slot.modifier), multiplier)

    return TotalStats(**stats)


def _view(catalog: Catalog | CatalogSnapshot) -> CatalogSnapshot:
    if isinstance(catalog, Catalog):
        return catalog.snapshot()
    return catalog


def _add_fields(stats: dict[str, int], source: Item | LevelStats, fields: tuple[str, ...]) -> None:
    for name in fields:
        stats[name] += getattr(source, name) or 0


def _add_increments(stats: dict[str, int], source: Item, multiplier: int) -> None:
    for name in INCREMENTABLE_STATS:
        increment = getattr(source, f"{name}_increment")
        if increment:
            stats[name] += math.floor(increment * multiplier)


def _apply_atlantean_essence(stats: dict[str, int], multiplier: int) -> None:
    stats["insanity"] += 1
    for name, factor in ATLANTEAN_ESSENCE_PRIORITY:
        if stats[name] == 0:
            stats[name] += math.floor(factor * multiplier)
            return
    stats["power"] += 3 * multiplier
