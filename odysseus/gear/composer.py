"""
Put together a single equipped slot from display names.

Used by ``/item`` and ``odysseus item`` to show an item with an enchant,
a modifier and gems applied. Names are resolved case-insensitively against
the catalog; the item's own constraints decide what is accepted:

- the modifier must be listed in the item's ``valid_modifiers``
- gems beyond the item's socket count are dropped
- the level is clamped to ``min_level..max_level``
"""

from __future__ import annotations

from collections.abc import Iterable

from odysseus.gear.base import (
    EMPTY_ENCHANTMENT_ID,
    EMPTY_MODIFIER_ID,
    MAX_GEMS,
    MAX_LEVEL,
    Item,
    Slot,
)
from odysseus.gear.catalog import PLACEHOLDER_NAME, Catalog, CatalogSnapshot


class SlotCompositionError(ValueError):
    """A name does not resolve, or the item does not accept the part."""


def level_bounds(item: Item, max_level: int = MAX_LEVEL) -> tuple[int, int]:
    """Lowest and highest level ``item`` can be shown at."""
    low = item.min_level if item.min_level is not None else 0
    return min(max(low, 0), max_level), max_level


def clamp_level(item: Item, level: int | None, max_level: int = MAX_LEVEL) -> int:
    low, high = level_bounds(item, max_level)
    if level is None:
        return high
    return min(max(level, low), high)


def allowed_modifier_names(item: Item, catalog: Catalog | CatalogSnapshot) -> list[str]:
    """Display names of the catalog modifiers ``item`` accepts, in listed order."""
    names = []
    for name in item.valid_modifiers or ():
        modifier = catalog.find_by_name(name)
        if modifier is not None and modifier.main_type == "Modifier":
            names.append(modifier.name)
    return names


def _is_blank(name: str | None) -> bool:
    return not name or not name.strip() or name.strip().lower() == PLACEHOLDER_NAME.lower()


def _resolve(
    catalog: Catalog | CatalogSnapshot, name: str, main_type: str, label: str
) -> Item:
    found = catalog.find_by_name(name.strip())
    if found is None or found.main_type != main_type or found.deleted:
        raise SlotCompositionError(f"Unknown {label}: {name}")
    return found


def compose_slot(
    catalog: Catalog | CatalogSnapshot,
    item: Item,
    level: int | None = None,
    enchant: str | None = None,
    modifier: str | None = None,
    gems: Iterable[str] = (),
    max_level: int = MAX_LEVEL,
) -> Slot:
    """
    Build the Slot for ``item`` with the named parts applied.

    Args:
        catalog: Catalog (or snapshot) to resolve names against
        item: The equipped item
        level: Requested level; None means ``max_level``
        enchant: Enchant name; None, blank or "None" for no enchant
        modifier: Modifier name; None, blank or "None" for no modifier
        gems: Gem names in socket order; blanks are skipped
        max_level: Highest allowed level

    Returns:
        A Slot ready for aggregate_slot()

    Raises:
        SlotCompositionError: If a name is unknown, names the wrong kind of
            item, or the modifier is not valid for ``item``
    """
    enchant_id = EMPTY_ENCHANTMENT_ID
    if not _is_blank(enchant):
        enchant_id = _resolve(catalog, enchant, "Enchant", "enchant").id

    modifier_id = EMPTY_MODIFIER_ID
    if not _is_blank(modifier):
        found = _resolve(catalog, modifier, "Modifier", "modifier")
        allowed = {name.lower() for name in item.valid_modifiers or ()}
        if found.name.lower() not in allowed:
            raise SlotCompositionError(f"{item.name} cannot take the {found.name} modifier")
        modifier_id = found.id

    gem_ids = [_resolve(catalog, gem, "Gem", "gem").id for gem in gems if not _is_blank(gem)]

    return Slot(
        item=item.id,
        enchant=enchant_id,
        modifier=modifier_id,
        gems=tuple(gem_ids[: min(item.socket_count, MAX_GEMS)]),
        level=clamp_level(item, level, max_level),
    )
