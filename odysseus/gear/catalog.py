"""
In-memory item catalog.

Items are indexed once by id and by lower-cased name. Lookups go through an
immutable snapshot, so any number of readers can run while a writer swaps in
a freshly built index with ``replace()``.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import aiofiles
from pydantic import TypeAdapter, ValidationError

from odysseus.config.logging import get_logger
from odysseus.config.settings import CatalogSettings
from odysseus.gear.base import (
    EMPTY_ENCHANTMENT_ID,
    EMPTY_GEM_ID,
    EMPTY_MODIFIER_ID,
    Item,
)

logger = get_logger(__name__)

_ITEM_LIST = TypeAdapter(list[Item])

# Placeholder rows the catalog uses for "nothing selected"
PLACEHOLDER_NAME = "None"


class CatalogLoadError(RuntimeError):
    """Raised when the catalog document cannot be read or validated."""


class ModifierKind(Enum):
    """How the aggregator applies a modifier."""

    GENERAL = "general"
    ATLANTEAN_ESSENCE = "atlantean_essence"


# Display names consulted once, while indexing, to tag special modifiers by id
SPECIAL_MODIFIER_NAMES: Mapping[str, ModifierKind] = MappingProxyType({
    "atlantean essence": ModifierKind.ATLANTEAN_ESSENCE,
})


@dataclass(frozen=True)
class CatalogSnapshot:
    """One consistent, read-only view of the catalog."""

    items: tuple[Item, ...] = ()
    by_id: Mapping[str, Item] = field(default_factory=lambda: MappingProxyType({}))
    by_name: Mapping[str, Item] = field(default_factory=lambda: MappingProxyType({}))
    modifier_kinds: Mapping[str, ModifierKind] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def build(
        cls,
        items: Iterable[Item],
        special_modifier_ids: Mapping[str, ModifierKind] | None = None,
    ) -> CatalogSnapshot:
        items = tuple(items)
        by_id: dict[str, Item] = {}
        by_name: dict[str, Item] = {}
        kinds: dict[str, ModifierKind] = {}

        for item in items:
            by_id[item.id] = item
            by_name[item.name.lower()] = item
            if item.main_type == "Modifier":
                kind = SPECIAL_MODIFIER_NAMES.get(item.name.lower())
                if kind is not None:
                    kinds[item.id] = kind

        # Explicitly configured ids win over name-derived tags
        if special_modifier_ids:
            for kind in set(special_modifier_ids.values()):
                for item_id in [i for i, k in kinds.items() if k is kind]:
                    del kinds[item_id]
            kinds.update(special_modifier_ids)

        return cls(
            items=items,
            by_id=MappingProxyType(by_id),
            by_name=MappingProxyType(by_name),
            modifier_kinds=MappingProxyType(kinds),
        )

    def get(self, item_id: str) -> Item | None:
        return self.by_id.get(item_id)

    def find_by_id(self, item_id: str) -> Item:
        """Item for ``item_id``, or an ``Unknown`` zero-stat placeholder."""
        item = self.by_id.get(item_id)
        if item is None:
            return Item.unknown(item_id)
        return item

    def find_by_name(self, name: str) -> Item | None:
        return self.by_name.get(name.lower())

    def modifier_kind(self, modifier_id: str) -> ModifierKind:
        return self.modifier_kinds.get(modifier_id, ModifierKind.GENERAL)

    def ids_of_type(self, main_type: str, sentinel: str) -> list[str]:
        return [i.id for i in self.items if i.main_type == main_type and i.id != sentinel]


class Catalog:
    """
    Thread-safe item catalog.

    Populated once (and optionally replaced wholesale later). Readers never
    block: every lookup dereferences the current snapshot exactly once.
    Writers are serialized by a lock and publish a new snapshot atomically.

    Example::

        catalog = Catalog(items)
        amulet = catalog.find_by_name("sun amulet")
        missing = catalog.find_by_id("ZZZ")   # Item named "Unknown"
    """

    def __init__(
        self,
        items: Iterable[Item] = (),
        special_modifier_ids: Mapping[str, ModifierKind] | None = None,
    ):
        self._write_lock = threading.Lock()
        self._special_modifier_ids = dict(special_modifier_ids or {})
        self._snapshot = CatalogSnapshot.build(items, self._special_modifier_ids)

    def replace(self, items: Iterable[Item]) -> None:
        """Rebuild the index from ``items`` and publish it."""
        with self._write_lock:
            snapshot = CatalogSnapshot.build(items, self._special_modifier_ids)
            self._snapshot = snapshot

        if not snapshot.items:
            logger.warning("Catalog replaced with an empty item list")
        else:
            logger.info(f"Catalog indexed {len(snapshot.by_id)} items")

    def snapshot(self) -> CatalogSnapshot:
        """Current read-only view; stays consistent across a replace()."""
        return self._snapshot

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, item_id: str) -> Item | None:
        return self._snapshot.get(item_id)

    def find_by_id(self, item_id: str) -> Item:
        """Item for ``item_id``; missing ids yield a zero-stat ``Unknown`` item."""
        return self._snapshot.find_by_id(item_id)

    def find_by_name(self, name: str) -> Item | None:
        """Case-insensitive lookup by display name."""
        return self._snapshot.find_by_name(name)

    def modifier_kind(self, modifier_id: str) -> ModifierKind:
        return self._snapshot.modifier_kind(modifier_id)

    def items(self) -> tuple[Item, ...]:
        return self._snapshot.items

    def gems(self) -> list[str]:
        return self._snapshot.ids_of_type("Gem", EMPTY_GEM_ID)

    def enchants(self) -> list[str]:
        return self._snapshot.ids_of_type("Enchant", EMPTY_ENCHANTMENT_ID)

    def modifiers(self) -> list[str]:
        return self._snapshot.ids_of_type("Modifier", EMPTY_MODIFIER_ID)

    def item_types(self) -> list[str]:
        """Sorted main types of live, non-placeholder items."""
        return sorted({
            item.main_type
            for item in self._snapshot.items
            if not item.deleted and item.name != PLACEHOLDER_NAME and item.main_type
        })

    def search_names(self, partial: str, limit: int = 25) -> list[str]:
        """Item names containing ``partial`` (case-insensitive), for autocomplete."""
        needle = partial.lower()
        matches = []
        for item in self._snapshot.items:
            if item.name == PLACEHOLDER_NAME or needle not in item.name.lower():
                continue
            matches.append(item.name)
            if len(matches) >= limit:
                break
        return matches

    def __len__(self) -> int:
        return len(self._snapshot.by_id)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._snapshot.by_id


def parse_items(raw: str | bytes, source: str = "<string>") -> list[Item]:
    """
    Validate a JSON catalog document (a list of item objects).

    Raises:
        CatalogLoadError: If the document is not JSON or fails validation
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Catalog '{source}' is not valid JSON: {e}") from e

    try:
        return _ITEM_LIST.validate_python(data)
    except ValidationError as e:
        raise CatalogLoadError(
            f"Catalog '{source}' failed validation ({e.error_count()} errors): {e}"
        ) from e


async def read_items(path: Path) -> list[Item]:
    """
    Read and validate the catalog JSON document at ``path``.

    Args:
        path: Location of the items JSON file

    Returns:
        Items in document order

    Raises:
        CatalogLoadError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.is_file():
        raise CatalogLoadError(f"Catalog file not found: {path}")

    logger.info(f"Loading item catalog: {path}")

    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            raw = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read catalog file: {e}")
        raise CatalogLoadError(f"Could not read catalog '{path}': {e}") from e

    items = parse_items(raw, source=str(path))
    logger.info(f"Decoded {len(items)} items from {path.name}")
    return items


async def load_catalog(
    path: Path,
    special_modifier_ids: Mapping[str, ModifierKind] | None = None,
) -> Catalog:
    """Read ``path`` and return a Catalog indexed from it."""
    return Catalog(await read_items(path), special_modifier_ids)


def configured_modifier_kinds(settings: CatalogSettings) -> dict[str, ModifierKind]:
    """Explicit modifier id tags from settings (empty when none are set)."""
    if settings.atlantean_essence_id:
        return {settings.atlantean_essence_id: ModifierKind.ATLANTEAN_ESSENCE}
    return {}
