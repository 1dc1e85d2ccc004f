"""
Odysseus CLI entry point.

Provides command-line interface for running the bot and utility commands.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from odysseus import __version__
from odysseus.config.logging import get_logger, setup_logging
from odysseus.config.settings import Settings, load_settings
from odysseus.gear.aggregator import aggregate, aggregate_slot
from odysseus.gear.catalog import (
    Catalog,
    CatalogLoadError,
    configured_modifier_kinds,
    load_catalog,
)
from odysseus.gear.composer import SlotCompositionError, compose_slot
from odysseus.gear.decoder import DecodeError, decode_build_code
from odysseus.gear.formatting import (
    format_allocation,
    format_slot,
    format_styles,
    format_total_stats,
    slot_parts,
)
from odysseus.gear.sorting import SORTABLE_STATS, rank_items, stat_display_name


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="odysseus",
        description="Discord bot and CLI for Arcane Odyssey GearBuilder builds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Odysseus {__version__}",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: .env in current directory)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level from config",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("run", help="Run the Discord bot")
    subparsers.add_parser("config", help="Show current configuration")

    # Build command
    build_parser = subparsers.add_parser(
        "build",
        help="Decode a build code (or GearBuilder URL) and print its total stats",
    )
    build_parser.add_argument(
        "code",
        help="Build code, or a full https://.../gearBuilder#<code> URL",
    )

    # Item command
    item_parser = subparsers.add_parser(
        "item",
        help="Show an item's stats at a given level",
    )
    item_parser.add_argument("name", help="Item name (case-insensitive)")
    item_parser.add_argument(
        "--level",
        type=int,
        default=None,
        help="Item level (default: CATALOG__MAX_LEVEL)",
    )
    item_parser.add_argument("--enchant", default=None, help="Enchant to apply")
    item_parser.add_argument(
        "--modifier",
        default=None,
        help="Modifier to apply; must be one of the item's valid modifiers",
    )
    item_parser.add_argument(
        "--gem",
        dest="gems",
        action="append",
        default=None,
        help="Gem to socket (repeat for each socket)",
    )

    # Sort command
    sort_parser = subparsers.add_parser(
        "sort",
        help="Rank items by a stat at the max item level",
    )
    sort_parser.add_argument("stat", choices=list(SORTABLE_STATS), help="Stat to sort by")
    sort_parser.add_argument(
        "--type",
        dest="item_type",
        default=None,
        help="Only include items of this main type, e.g. Accessory",
    )
    sort_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of items to show (default: 10)",
    )

    return parser


def _split_build_code(value: str) -> str:
    """Accept either a bare build code or a URL carrying it as the fragment."""
    if "#" in value:
        return value.split("#", 1)[1]
    return value


async def _load_catalog(settings: Settings) -> Catalog:
    return await load_catalog(
        settings.catalog.items_path, configured_modifier_kinds(settings.catalog)
    )


def cmd_config(settings) -> int:
    """Show current configuration."""
    logger = get_logger(__name__)

    logger.info("\n=== Odysseus Configuration ===\n")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Log File: {settings.log_file or 'None (console only)'}")
    logger.info(f"\nBot Name: {settings.bot.name}")
    logger.info(f"Bot Token: {'Set' if settings.bot.token else 'Not set'}")
    logger.info(f"Allowed Channels: {settings.bot.allowed_channel_ids or 'All'}")
    logger.info(f"Dev Guild: {settings.bot.dev_guild_id or 'None (global sync)'}")
    logger.info(f"\nCatalog Path: {settings.catalog.items_path}")
    logger.info(f"Max Item Level: {settings.catalog.max_level}")
    logger.info(f"Build URL Prefixes: {', '.join(settings.catalog.build_url_prefixes)}")
    logger.info(
        f"Atlantean Essence Id: {settings.catalog.atlantean_essence_id or 'resolved from catalog'}"
    )

    return 0


def cmd_run(settings) -> int:
    """Start the Discord bot."""
    logger = get_logger(__name__)

    if not settings.bot.token:
        logger.error(
            "Discord bot token not set. Add BOT__TOKEN=<your-token> to your .env file."
        )
        return 1

    from odysseus.bot import OdysseusBot

    bot = OdysseusBot(settings)
    logger.info(f"Starting {settings.bot.name} {__version__}...")
    # log_handler=None: disable discord.py's default logging setup and use ours
    bot.run(settings.bot.token, log_handler=None)
    return 0


async def cmd_build(args, settings: Settings) -> int:
    """
    Decode a build code and print the loadout with its total stats.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    logger = get_logger(__name__)

    code = _split_build_code(args.code.strip())
    try:
        loadout = decode_build_code(code)
    except DecodeError as e:
        print(f"Failed to parse build: {e}", file=sys.stderr)
        return 1

    try:
        catalog = await _load_catalog(settings)
    except CatalogLoadError as e:
        logger.error(str(e))
        return 1

    view = catalog.snapshot()
    print("\n=== Build ===")
    print(f"Level: {loadout.level}")
    print(format_allocation(loadout))
    print(f"Magic/Fighting Styles: {format_styles(loadout)}")

    labels = ["Accessory 1", "Accessory 2", "Accessory 3", "Chestplate", "Boots"]
    for label, slot in zip(labels, loadout.slots):
        print(f"\n--- {label} ---")
        print(format_slot(slot, view).replace("**", ""))

    print("\n--- Total Stats ---")
    print(format_total_stats(aggregate(loadout, view)))
    return 0


async def cmd_item(args, settings: Settings) -> int:
    """Print one item's stats at ``--level`` with any enchant, modifier and gems."""
    logger = get_logger(__name__)

    if args.level is not None and args.level < 0:
        print("Level must be non-negative", file=sys.stderr)
        return 1

    try:
        catalog = await _load_catalog(settings)
    except CatalogLoadError as e:
        logger.error(str(e))
        return 1

    view = catalog.snapshot()
    item = view.find_by_name(args.name)
    if item is None:
        print(f"Item not found: {args.name}", file=sys.stderr)
        return 1

    try:
        slot = compose_slot(
            view,
            item,
            level=args.level,
            enchant=args.enchant,
            modifier=args.modifier,
            gems=args.gems or (),
            max_level=settings.catalog.max_level,
        )
    except SlotCompositionError as e:
        print(str(e), file=sys.stderr)
        return 1

    stats = aggregate_slot(slot, view)
    print(f"\n=== {item.name} ===")
    if item.legend:
        print(item.legend)
    print(f"Type: {item.main_type}  Rarity: {item.rarity}  Level: {slot.level}")
    if item.socket_count:
        print(f"Gem Slots: {item.socket_count}")
    for label, names in slot_parts(slot, view):
        print(f"{label}: {names}")
    print(f"\n{format_total_stats(stats)}")
    return 0


async def cmd_sort(args, settings: Settings) -> int:
    """Print the top ``--limit`` items for a stat."""
    logger = get_logger(__name__)

    try:
        catalog = await _load_catalog(settings)
    except CatalogLoadError as e:
        logger.error(str(e))
        return 1

    level = settings.catalog.max_level
    ranked = rank_items(catalog, args.stat, args.item_type, level=level)
    if not ranked:
        print(f"No items found with {args.stat} stats.")
        return 0

    stat_display = stat_display_name(args.stat)
    print(f"\n=== Top Items by {stat_display} (level {level}) ===")
    for rank, entry in enumerate(ranked[: args.limit], start=1):
        print(f"{rank:>3}. {entry.item.name}  {stat_display}: {entry.value}  ({entry.item.rarity})")
    return 0


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    # Load settings
    try:
        settings = load_settings(env_file=args.env_file)
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Override log level if specified
    if args.log_level:
        settings.log_level = args.log_level

    setup_logging(settings)

    # Execute command
    if args.command == "config":
        return cmd_config(settings)
    elif args.command == "run":
        return cmd_run(settings)
    elif args.command == "build":
        return asyncio.run(cmd_build(args, settings))
    elif args.command == "item":
        return asyncio.run(cmd_item(args, settings))
    elif args.command == "sort":
        return asyncio.run(cmd_sort(args, settings))
    else:
        # Default: show help
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
