"""
GearBuilder build-code decoder.

A build code is eight ``|``-separated sections, each a ``,``-separated list::

    level,vit,magic,str,weapon | magics | fighting styles |
    accessory | accessory | accessory | chestplate | boots

Each slot section is ``item,enchant,modifier[,gem1[,gem2[,gem3]]],itemLevel``;
the number of gems follows from the token count.

Decoding fails fast with a DecodeError subclass naming the section. A Loadout
is only built once every section has parsed.
"""

from __future__ import annotations

import re
from enum import IntEnum
from typing import TypeVar

from odysseus.gear.base import FightingStyle, Loadout, Magic, Slot

SECTION_COUNT = 8
STATS_FIELDS = ("level", "vitality points", "magic points", "strength points", "weapon points")
MIN_SLOT_TOKENS = 4
MAX_SLOT_TOKENS = 7

SECTION_NAMES = (
    "stats",
    "magics",
    "fighting styles",
    "accessory 1",
    "accessory 2",
    "accessory 3",
    "chestplate",
    "boots",
)

_SIGNED_INT_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT_RE = re.compile(r"\+?[0-9]+")

# Every integer in a build code is a signed 32-bit value
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
_MAX_DIGITS = len(str(INT_MAX))
_SHOWN_VALUE_CHARS = 24

E = TypeVar("E", bound=IntEnum)


class DecodeError(ValueError):
    """
    Base class for build-code decoding failures.

    Attributes:
        section: 1-based section number, or None when the code as a whole
            is malformed
        section_name: Human-readable section name ("stats", "boots", ...)
    """

    def __init__(self, message: str, section: int | None = None):
        self.section = section
        self.section_name = SECTION_NAMES[section - 1] if section else None
        if self.section_name:
            message = f"Invalid {self.section_name} section: {message}"
        super().__init__(message)


class SectionCountError(DecodeError):
    """The code does not have exactly eight sections."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"Invalid build code format: expected {SECTION_COUNT} sections, got {count}"
        )


class TokenCountError(DecodeError):
    """A section has the wrong number of comma-separated values."""

    def __init__(self, section: int, count: int, expected: str):
        self.count = count
        super().__init__(f"expected {expected} values, got {count}", section)


class InvalidIntegerError(DecodeError):
    """A value that must be an integer is not one."""

    def __init__(self, section: int, field: str, value: str, reason: str = "not an integer"):
        self.field = field
        self.value = value
        self.reason = reason
        shown = value
        if len(shown) > _SHOWN_VALUE_CHARS:
            shown = shown[: _SHOWN_VALUE_CHARS - 3] + "..."
        super().__init__(f"could not parse {field} from {shown!r} ({reason})", section)


class IndexOutOfRangeError(DecodeError):
    """A magic or fighting-style index is outside its fixed list."""

    def __init__(self, section: int, value: int, limit: int):
        self.value = value
        self.limit = limit
        super().__init__(f"index {value} is out of range (0-{limit - 1})", section)


def decode_build_code(code: str) -> Loadout:
    """
    Decode a GearBuilder build code.

    Args:
        code: The URL fragment after ``/gearBuilder#``

    Returns:
        Fully populated Loadout

    Raises:
        DecodeError: On any structural problem; the subclass tells which

    Example:
        >>> loadout = decode_build_code(
        ...     "100,20,20,20,20|5|1|AAA,AAD,AAE,140|AAA,AAD,AAE,140|"
        ...     "AAA,AAD,AAE,140|AAB,AAD,AAE,140|AAC,AAD,AAE,140"
        ... )
        >>> loadout.level, loadout.magics
        (100, (<Magic.FIRE: 5>,))
    """
    sections = [section.split(",") for section in code.split("|")]
    if len(sections) != SECTION_COUNT:
        raise SectionCountError(len(sections))

    stats = _parse_stats(sections[0])
    magics = _parse_indices(sections[1], 2, Magic, "magic index")
    fighting_styles = _parse_indices(sections[2], 3, FightingStyle, "fighting style index")
    accessories = tuple(_parse_slot(sections[i], i + 1) for i in (3, 4, 5))
    chestplate = _parse_slot(sections[6], 7)
    boots = _parse_slot(sections[7], 8)

    return Loadout(
        level=stats[0],
        vitality_points=stats[1],
        magic_points=stats[2],
        strength_points=stats[3],
        weapon_points=stats[4],
        magics=magics,
        fighting_styles=fighting_styles,
        accessories=accessories,
        chestplate=chestplate,
        boots=boots,
    )


def _parse_int(token: str, section: int, field: str, signed: bool = True) -> int:
    pattern = _SIGNED_INT_RE if signed else _UNSIGNED_INT_RE
    if not pattern.fullmatch(token):
        raise InvalidIntegerError(section, field, token)
    # Length check first: int() refuses very long digit strings with a plain ValueError
    if len(token.lstrip("+-").lstrip("0")) > _MAX_DIGITS:
        raise InvalidIntegerError(section, field, token, "out of range")
    value = int(token)
    if not INT_MIN <= value <= INT_MAX:
        raise InvalidIntegerError(section, field, token, "out of range")
    return value


def _parse_stats(tokens: list[str]) -> tuple[int, ...]:
    if len(tokens) != len(STATS_FIELDS):
        raise TokenCountError(1, len(tokens), str(len(STATS_FIELDS)))
    return tuple(
        _parse_int(token, 1, field) for token, field in zip(tokens, STATS_FIELDS)
    )


def _parse_indices(tokens: list[str], section: int, enum: type[E], field: str) -> tuple[E, ...]:
    selected: list[E] = []
    for token in tokens:
        # "" is an empty section or a trailing comma
        if not token:
            continue
        index = _parse_int(token, section, field, signed=False)
        if index >= len(enum):
            raise IndexOutOfRangeError(section, index, len(enum))
        value = enum(index)
        if value not in selected:
            selected.append(value)
    return tuple(selected)


def _parse_slot(tokens: list[str], section: int) -> Slot:
    if not MIN_SLOT_TOKENS <= len(tokens) <= MAX_SLOT_TOKENS:
        raise TokenCountError(section, len(tokens), f"{MIN_SLOT_TOKENS}-{MAX_SLOT_TOKENS}")

    item, enchant, modifier, *gems, level = tokens
    return Slot(
        item=item,
        enchant=enchant,
        modifier=modifier,
        gems=tuple(gems),
        level=_parse_int(level, section, "item level", signed=False),
    )
