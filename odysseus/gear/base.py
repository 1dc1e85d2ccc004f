"""
Core data structures for gear builds.

- LevelStats: one row of an item's per-level stat table
- Item: a catalog record (gear, gem, enchant or modifier)
- Magic / FightingStyle: the fixed, index-ordered selections of a build code
- Slot: one equipped position (item + enchant + modifier + gems + level)
- Loadout: a fully decoded build code
- TotalStats: the twelve additive stats produced by aggregation

Every model is frozen and stores sequences as tuples, so nothing built from
a catalog or a build code can be mutated afterwards.
"""

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Catalog-reserved "nothing equipped" ids
EMPTY_ACCESSORY_ID = "AAA"
EMPTY_CHESTPLATE_ID = "AAB"
EMPTY_BOOTS_ID = "AAC"
EMPTY_ENCHANTMENT_ID = "AAD"
EMPTY_MODIFIER_ID = "AAE"
EMPTY_GEM_ID = "AAF"

EMPTY_EQUIPMENT_IDS = frozenset({EMPTY_ACCESSORY_ID, EMPTY_CHESTPLATE_ID, EMPTY_BOOTS_ID})

MAX_LEVEL = 140
MAX_GEMS = 3

# Stats that enchantments and modifiers scale by level
INCREMENTABLE_STATS = (
    "power",
    "defense",
    "agility",
    "attack_speed",
    "attack_size",
    "intensity",
    "regeneration",
    "piercing",
    "resistance",
)

# Columns of a per-level stat table
LEVEL_STATS = INCREMENTABLE_STATS + ("warding", "drawback")

# Level-independent fields an item may carry
FIXED_STATS = INCREMENTABLE_STATS + ("insanity", "warding", "drawback")

# What a socketed gem contributes
GEM_STATS = INCREMENTABLE_STATS + ("drawback",)

# Field order of TotalStats
TOTAL_STATS = INCREMENTABLE_STATS + ("insanity", "warding", "drawback")


class _CatalogModel(BaseModel):
    """Frozen model that reads the catalog's camelCase JSON keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class LevelStats(_CatalogModel):
    """Stats of an item at one level bucket (a multiple of 10)."""

    level: int
    power: int | None = None
    defense: int | None = None
    agility: int | None = None
    attack_speed: int | None = None
    attack_size: int | None = None
    intensity: int | None = None
    regeneration: int | None = None
    piercing: int | None = None
    resistance: int | None = None
    warding: int | None = None
    drawback: int | None = None


class Item(_CatalogModel):
    """
    A catalog record.

    Gear carries a per-level table, gems carry fixed stats, and enchants and
    modifiers carry ``*_increment`` values applied once per 10 item levels.

    Example:
        >>> item = Item.model_validate({
        ...     "id": "ABC", "name": "Sun Amulet", "mainType": "Accessory",
        ...     "statsPerLevel": [{"level": 140, "power": 12}],
        ... })
        >>> item.stats_per_level[0].power
        12
    """

    id: str
    name: str
    legend: str = ""
    main_type: str = ""
    sub_type: str | None = None
    rarity: str = ""
    image_id: str = ""
    deleted: bool = False
    gem_no: int | None = Field(None, ge=0)
    min_level: int | None = None
    max_level: int | None = None
    stat_type: str | None = None
    stats_per_level: tuple[LevelStats, ...] | None = None
    valid_modifiers: tuple[str, ...] | None = None

    power_increment: float | None = None
    defense_increment: float | None = None
    agility_increment: float | None = None
    attack_speed_increment: float | None = None
    attack_size_increment: float | None = None
    intensity_increment: float | None = None
    regeneration_increment: float | None = None
    piercing_increment: float | None = None
    resistance_increment: float | None = None

    power: int | None = None
    defense: int | None = None
    agility: int | None = None
    attack_speed: int | None = None
    attack_size: int | None = None
    intensity: int | None = None
    regeneration: int | None = None
    piercing: int | None = None
    resistance: int | None = None
    insanity: int | None = None
    warding: int | None = None
    drawback: int | None = None

    @classmethod
    def unknown(cls, item_id: str) -> "Item":
        """Zero-stat placeholder returned for ids missing from the catalog."""
        return cls(id=item_id, name="Unknown")

    def stats_at(self, level_bucket: int) -> LevelStats | None:
        """
        Row of the per-level table for ``level_bucket``.

        Falls back to the last (highest-level) row when no row matches;
        returns None when the item has no table.
        """
        if not self.stats_per_level:
            return None
        for row in self.stats_per_level:
            if row.level == level_bucket:
                return row
        return self.stats_per_level[-1]

    @property
    def socket_count(self) -> int:
        return self.gem_no or 0


class _DisplayEnum(IntEnum):
    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


class Magic(_DisplayEnum):
    """Magics in build-code index order."""

    ACID = 0
    ASH = 1
    CRYSTAL = 2
    EARTH = 3
    EXPLOSION = 4
    FIRE = 5
    GLASS = 6
    ICE = 7
    LIGHT = 8
    LIGHTNING = 9
    MAGMA = 10
    METAL = 11
    PLASMA = 12
    POISON = 13
    SAND = 14
    SHADOW = 15
    SNOW = 16
    WATER = 17
    WIND = 18
    WOOD = 19


class FightingStyle(_DisplayEnum):
    """Fighting styles in build-code index order."""

    BASIC_COMBAT = 0
    BOXING = 1
    IRON_LEG = 2
    CANNON_FIST = 3
    SAILOR_STYLE = 4
    THERMO_FIST = 5


class Slot(BaseModel):
    """
    One equipped position.

    ``gems`` holds the ids exactly as supplied by the build code; the
    aggregator only reads as many of them as the item has sockets.
    """

    item: str = Field(description="Item id")
    enchant: str = Field(default=EMPTY_ENCHANTMENT_ID, description="Enchantment id")
    modifier: str = Field(default=EMPTY_MODIFIER_ID, description="Modifier id")
    gems: tuple[str, ...] = Field(default=(), max_length=MAX_GEMS, description="Gem ids in socket order")
    level: int = Field(default=MAX_LEVEL, ge=0, description="Level the slot is evaluated at")

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return self.item in EMPTY_EQUIPMENT_IDS

    @property
    def has_enchant(self) -> bool:
        return bool(self.enchant) and self.enchant != EMPTY_ENCHANTMENT_ID

    @property
    def has_modifier(self) -> bool:
        return bool(self.modifier) and self.modifier != EMPTY_MODIFIER_ID


class Loadout(BaseModel):
    """A decoded build code: stat allocation, selections and five slots."""

    level: int
    vitality_points: int
    magic_points: int
    strength_points: int
    weapon_points: int
    magics: tuple[Magic, ...] = ()
    fighting_styles: tuple[FightingStyle, ...] = ()
    accessories: tuple[Slot, Slot, Slot]
    chestplate: Slot
    boots: Slot

    model_config = ConfigDict(frozen=True)

    @property
    def slots(self) -> tuple[Slot, ...]:
        """The five equipped slots in aggregation order."""
        return (*self.accessories, self.chestplate, self.boots)


class TotalStats(BaseModel):
    """Additive stat totals; ``a + b`` sums field-wise."""

    power: int = 0
    defense: int = 0
    agility: int = 0
    attack_speed: int = 0
    attack_size: int = 0
    intensity: int = 0
    regeneration: int = 0
    piercing: int = 0
    resistance: int = 0
    insanity: int = 0
    warding: int = 0
    drawback: int = 0

    model_config = ConfigDict(frozen=True)

    def __add__(self, other: "TotalStats") -> "TotalStats":
        if not isinstance(other, TotalStats):
            return NotImplemented
        return TotalStats(
            **{name: getattr(self, name) + getattr(other, name) for name in TOTAL_STATS}
        )

    def is_empty(self) -> bool:
        return all(getattr(self, name) == 0 for name in TOTAL_STATS)
