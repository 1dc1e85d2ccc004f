"""
Plain-text rendering of builds and stats.

Used for embed field values and CLI output.
"""

from __future__ import annotations

from odysseus.gear.base import EMPTY_GEM_ID, Loadout, Slot, TotalStats
from odysseus.gear.catalog import Catalog, CatalogSnapshot

NO_STATS = "No stats"

# Display order of the Total Stats field
STAT_LABELS = (
    ("power", "Power"),
    ("defense", "Defense"),
    ("agility", "Agility"),
    ("attack_speed", "Attack Speed"),
    ("attack_size", "Attack Size"),
    ("intensity", "Intensity"),
    ("regeneration", "Regeneration"),
    ("piercing", "Piercing"),
    ("resistance", "Resistance"),
    ("drawback", "Drawback"),
    ("warding", "Warding"),
    ("insanity", "Insanity"),
)


def format_total_stats(stats: TotalStats) -> str:
    """One ``Label: value`` line per non-zero stat, or ``No stats``."""
    lines = [
        f"{label}: {getattr(stats, name)}"
        for name, label in STAT_LABELS
        if getattr(stats, name) != 0
    ]
    return "\n".join(lines) if lines else NO_STATS


def slot_parts(slot: Slot, catalog: Catalog | CatalogSnapshot) -> list[tuple[str, str]]:
    """``(label, names)`` for the enchant, modifier and socketed gems that are set."""
    item = catalog.find_by_id(slot.item)
    parts = []

    if slot.has_enchant:
        parts.append(("Enchant", catalog.find_by_id(slot.enchant).name))
    if slot.has_modifier:
        parts.append(("Modifier", catalog.find_by_id(slot.modifier).name))

    gems = [
        catalog.find_by_id(gem_id).name
        for gem_id in slot.gems[: item.socket_count]
        if gem_id and gem_id != EMPTY_GEM_ID
    ]
    if gems:
        parts.append(("Gems", ", ".join(gems)))
    return parts


def format_slot(slot: Slot, catalog: Catalog | CatalogSnapshot) -> str:
    """Item name, enchant, modifier, socketed gems and level of a slot."""
    lines = [catalog.find_by_id(slot.item).name]
    lines.extend(f"{label}: {names}" for label, names in slot_parts(slot, catalog))
    lines.append(f"**Level:** {slot.level}")
    return "\n".join(lines)


def format_allocation(loadout: Loadout) -> str:
    return (
        f"Vitality {loadout.vitality_points} | Magic {loadout.magic_points}\n"
        f"Strength {loadout.strength_points} | Weapon {loadout.weapon_points}"
    )


def format_styles(loadout: Loadout) -> str:
    """Comma-separated fighting styles then magics; ``None`` if neither."""
    names = [style.display_name for style in loadout.fighting_styles]
    names.extend(magic.display_name for magic in loadout.magics)
    return ", ".join(names) if names else "None"
