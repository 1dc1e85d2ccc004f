"""
ItemsCog — /item and /sort slash commands.

/item shows a single catalog item at a chosen level, optionally with an
enchant, a modifier and gems applied.
/sort ranks items by one stat at the max item level, ten per page.
"""

from __future__ import annotations

from collections.abc import Iterable

import discord
from discord import app_commands
from discord.ext import commands

from odysseus.config.logging import get_logger
from odysseus.gear.aggregator import aggregate_slot
from odysseus.gear.base import Item
from odysseus.gear.composer import SlotCompositionError, allowed_modifier_names, compose_slot
from odysseus.gear.formatting import format_total_stats, slot_parts
from odysseus.gear.sorting import (
    SORTABLE_STATS,
    RankedItem,
    paginate,
    rank_items,
    stat_display_name,
)

logger = get_logger(__name__)

# Discord caps autocomplete at 25 choices
MAX_CHOICES = 25
ITEMS_PER_PAGE = 10

RARITY_COLORS = {
    "Common": discord.Color(0xFFFFFF),
    "Uncommon": discord.Color(0x7F734C),
    "Rare": discord.Color(0x6765E4),
    "Exotic": discord.Color(0xEA3323),
}
DEFAULT_COLOR = discord.Color(0x93B1E3)


def rarity_color(rarity: str) -> discord.Color:
    return RARITY_COLORS.get(rarity, DEFAULT_COLOR)


def item_embed(
    item: Item,
    level: int,
    stats_text: str,
    footer: str,
    parts: Iterable[tuple[str, str]] = (),
) -> discord.Embed:
    embed = discord.Embed(
        title=item.name,
        description=item.legend[:4096] or None,
        color=rarity_color(item.rarity),
    )
    embed.add_field(name="Type", value=item.main_type or "Unknown", inline=True)
    embed.add_field(name="Rarity", value=item.rarity or "Unknown", inline=True)
    embed.add_field(name="Level", value=str(level), inline=True)
    if item.socket_count:
        embed.add_field(name="Gem Slots", value=str(item.socket_count), inline=True)
    for label, names in parts:
        embed.add_field(name=label, value=names, inline=True)
    embed.add_field(name="Total Stats", value=stats_text, inline=False)
    embed.set_footer(text=footer)
    return embed


def sort_embed(
    page_items: list[RankedItem],
    stat: str,
    item_type: str | None,
    page: int,
    total_pages: int,
    level: int,
    footer: str,
) -> discord.Embed:
    stat_display = stat_display_name(stat)
    type_filter = f" for {item_type.lower()} items" if item_type else ""
    start_rank = (page - 1) * ITEMS_PER_PAGE + 1

    lines = [f"Items sorted by {stat_display} at level {level}{type_filter}", ""]
    for rank, ranked in enumerate(page_items, start=start_rank):
        item = ranked.item
        detail = f"   {stat_display}: **{ranked.value}** | {item.rarity}"
        if item.sub_type:
            detail += f" | {item.sub_type}"
        lines.append(f"**{rank}.** {item.name}")
        lines.append(detail)

    embed = discord.Embed(
        title=f"Top Items by {stat_display}",
        description="\n".join(lines)[:4096],
        color=DEFAULT_COLOR,
    )
    embed.set_footer(text=f"Page {page}/{total_pages} • {footer}")
    return embed


class ItemsCog(commands.Cog):
    """Provides /item and /sort."""

    def __init__(self, bot) -> None:
        self.bot = bot

    async def _reject_channel(self, interaction: discord.Interaction) -> bool:
        if self.bot.is_allowed_channel(interaction.channel_id):
            return False
        await interaction.response.send_message(
            "I'm not configured to respond in this channel.", ephemeral=True
        )
        return True

    # ------------------------------------------------------------------
    # /item
    # ------------------------------------------------------------------

    @app_commands.command(name="item", description="Get information about an item")
    @app_commands.describe(
        name="Name of the item",
        level="Item level (defaults to max)",
        enchant="Enchantment to apply",
        modifier="Modifier to apply (must be valid for the item)",
        gem1="Gem for the first socket",
        gem2="Gem for the second socket",
        gem3="Gem for the third socket",
    )
    async def item(
        self,
        interaction: discord.Interaction,
        name: str,
        level: int | None = None,
        enchant: str | None = None,
        modifier: str | None = None,
        gem1: str | None = None,
        gem2: str | None = None,
        gem3: str | None = None,
    ) -> None:
        """
        /item name:<item name> [level] [enchant] [modifier] [gem1..gem3]

        Shows the item's details and its stats at ``level``. Gems past the
        item's socket count are ignored; the level is clamped to the item's
        minimum level and the max item level.
        """
        if await self._reject_channel(interaction):
            return

        view = self.bot.catalog.snapshot()
        found = view.find_by_name(name)
        if found is None:
            logger.debug(f"No item named {name!r}")
            await interaction.response.send_message("Item not found!", ephemeral=True)
            return

        try:
            slot = compose_slot(
                view,
                found,
                level=level,
                enchant=enchant,
                modifier=modifier,
                gems=[gem for gem in (gem1, gem2, gem3) if gem],
                max_level=self.bot.settings.catalog.max_level,
            )
        except SlotCompositionError as e:
            await interaction.response.send_message(str(e), ephemeral=True)
            return

        stats = aggregate_slot(slot, view)
        await interaction.response.send_message(
            embed=item_embed(
                found,
                slot.level,
                format_total_stats(stats),
                self.bot.settings.bot.embed_footer,
                slot_parts(slot, view),
            )
        )

    @item.autocomplete("name")
    async def item_name_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        return [
            app_commands.Choice(name=name, value=name)
            for name in self.bot.catalog.search_names(current, limit=MAX_CHOICES)
        ]

    def _name_choices(self, ids: list[str], current: str) -> list[app_commands.Choice[str]]:
        needle = current.lower()
        choices = []
        for item_id in ids:
            part = self.bot.catalog.get(item_id)
            if part is None or part.deleted or needle not in part.name.lower():
                continue
            choices.append(app_commands.Choice(name=part.name, value=part.name))
            if len(choices) >= MAX_CHOICES:
                break
        return choices

    @item.autocomplete("enchant")
    async def enchant_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        return self._name_choices(self.bot.catalog.enchants(), current)

    @item.autocomplete("modifier")
    async def modifier_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        """Only the chosen item's valid modifiers, once the item is known."""
        typed = getattr(interaction.namespace, "name", None)
        target = self.bot.catalog.find_by_name(typed) if typed else None
        if target is None:
            return self._name_choices(self.bot.catalog.modifiers(), current)

        needle = current.lower()
        return [
            app_commands.Choice(name=name, value=name)
            for name in allowed_modifier_names(target, self.bot.catalog)
            if needle in name.lower()
        ][:MAX_CHOICES]

    @item.autocomplete("gem1")
    @item.autocomplete("gem2")
    @item.autocomplete("gem3")
    async def gem_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        return self._name_choices(self.bot.catalog.gems(), current)

    # ------------------------------------------------------------------
    # /sort
    # ------------------------------------------------------------------

    @app_commands.command(name="sort", description="Sort and display items by a specific stat")
    @app_commands.describe(
        stat="The stat to sort by",
        item_type="Filter by item type (optional)",
        page="Page of results to show",
    )
    async def sort(
        self,
        interaction: discord.Interaction,
        stat: str,
        item_type: str | None = None,
        page: int = 1,
    ) -> None:
        """/sort stat:<stat> [item_type:<type>] [page:<n>]"""
        if await self._reject_channel(interaction):
            return

        stat = stat.lower()
        if stat not in SORTABLE_STATS:
            await interaction.response.send_message(
                f"Invalid stat type! Valid stats are: {', '.join(SORTABLE_STATS)}",
                ephemeral=True,
            )
            return

        level = self.bot.settings.catalog.max_level
        ranked = rank_items(self.bot.catalog, stat, item_type, level=level)
        if not ranked:
            type_filter = f" for {item_type.lower()} items" if item_type else ""
            await interaction.response.send_message(
                f"No items found with {stat} stats{type_filter}.", ephemeral=True
            )
            return

        page_items, page, total_pages = paginate(ranked, page, ITEMS_PER_PAGE)
        await interaction.response.send_message(
            embed=sort_embed(
                page_items,
                stat,
                item_type,
                page,
                total_pages,
                level,
                self.bot.settings.bot.embed_footer,
            )
        )

    @sort.autocomplete("stat")
    async def stat_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        needle = current.lower()
        return [
            app_commands.Choice(name=display, value=key)
            for key, (_, display) in SORTABLE_STATS.items()
            if needle in key or needle in display.lower()
        ]

    @sort.autocomplete("item_type")
    async def item_type_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        needle = current.lower()
        return [
            app_commands.Choice(name=t, value=t)
            for t in self.bot.catalog.item_types()
            if needle in t.lower()
        ][:MAX_CHOICES]
