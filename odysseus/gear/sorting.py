"""
Rank catalog items by a single stat.

Values are read from each item's per-level table at the max item level.
"""

from __future__ import annotations

from dataclasses import dataclass

from odysseus.gear.base import MAX_LEVEL, Item
from odysseus.gear.catalog import PLACEHOLDER_NAME, Catalog

# Command key -> (LevelStats field, display name)
SORTABLE_STATS = {
    "power": ("power", "Power"),
    "agility": ("agility", "Agility"),
    "attackspeed": ("attack_speed", "Attack Speed"),
    "defense": ("defense", "Defense"),
    "attacksize": ("attack_size", "Attack Size"),
    "intensity": ("intensity", "Intensity"),
    "regeneration": ("regeneration", "Regeneration"),
    "resistance": ("resistance", "Resistance"),
    "armorpiercing": ("piercing", "Armor Piercing"),
}


@dataclass(frozen=True, slots=True)
class RankedItem:
    item: Item
    value: int


def stat_display_name(stat: str) -> str:
    entry = SORTABLE_STATS.get(stat)
    return entry[1] if entry else stat


def stat_value_at(item: Item, stat: str, level: int = MAX_LEVEL) -> int | None:
    """
    Value of ``stat`` in the row for exactly ``level``.

    Returns None when the stat key is unknown, the item has no table,
    or the table has no row for ``level``.
    """
    entry = SORTABLE_STATS.get(stat)
    if entry is None or not item.stats_per_level:
        return None
    for row in item.stats_per_level:
        if row.level == level:
            return getattr(row, entry[0])
    return None


def rank_items(
    catalog: Catalog,
    stat: str,
    main_type: str | None = None,
    level: int = MAX_LEVEL,
) -> list[RankedItem]:
    """
    Items with a positive ``stat`` at ``level``, highest first.

    Deleted items, the ``None`` placeholder and items without a per-level
    table are skipped. Ties keep catalog order.

    Raises:
        ValueError: If ``stat`` is not one of SORTABLE_STATS
    """
    if stat not in SORTABLE_STATS:
        raise ValueError(
            f"Invalid stat type {stat!r}. Valid stats are: {', '.join(SORTABLE_STATS)}"
        )

    ranked = []
    for item in catalog.items():
        if item.deleted or item.name == PLACEHOLDER_NAME or not item.stats_per_level:
            continue
        if main_type and item.main_type != main_type:
            continue
        value = stat_value_at(item, stat, level)
        if value is not None and value > 0:
            ranked.append(RankedItem(item=item, value=value))

    ranked.sort(key=lambda r: r.value, reverse=True)
    return ranked


def paginate(ranked: list[RankedItem], page: int, per_page: int = 10) -> tuple[list[RankedItem], int, int]:
    """
    Slice one page out of ``ranked``.

    Returns:
        (page items, clamped 1-based page number, total pages)
    """
    total_pages = max(1, -(-len(ranked) // per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return ranked[start:start + per_page], page, total_pages
