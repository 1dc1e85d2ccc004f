"""
BuildCog — /build slash command.

Takes a GearBuilder URL, decodes the build code in its fragment and replies
with the loadout and its total stats.
"""

from __future__ import annotations

from collections.abc import Iterable

import discord
from discord import app_commands
from discord.ext import commands

from odysseus.config.logging import get_logger
from odysseus.gear.aggregator import aggregate
from odysseus.gear.base import Loadout
from odysseus.gear.catalog import Catalog
from odysseus.gear.decoder import DecodeError, decode_build_code
from odysseus.gear.formatting import (
    format_allocation,
    format_slot,
    format_styles,
    format_total_stats,
)

logger = get_logger(__name__)

BUILD_URL_MARKER = "/gearBuilder#"
DEFAULT_COLOR = discord.Color(0x93B1E3)


class BuildURLError(ValueError):
    """The URL is not a GearBuilder build link or carries no code."""


def extract_build_code(url: str, prefixes: Iterable[str]) -> str:
    """
    Return the build code from a GearBuilder URL.

    Raises:
        BuildURLError: If ``url`` matches none of ``prefixes`` or the
            fragment is empty
    """
    url = url.strip()
    if not any(url.startswith(prefix) for prefix in prefixes):
        raise BuildURLError("Invalid URL! Please provide a valid GearBuilder build URL.")

    code = url.split(BUILD_URL_MARKER, 1)[1] if BUILD_URL_MARKER in url else ""
    if not code:
        raise BuildURLError("Build URL appears to be empty or invalid.")
    return code


def _error_embed(title: str, description: str) -> discord.Embed:
    return discord.Embed(
        title=title,
        description=description,
        color=discord.Color.red(),
    )


def build_embed(loadout: Loadout, catalog: Catalog, title: str, footer: str) -> discord.Embed:
    """Embed with allocation, selections, every slot and the total stats."""
    view = catalog.snapshot()
    total = aggregate(loadout, view)

    embed = discord.Embed(title=title, color=DEFAULT_COLOR)
    embed.add_field(name="Level", value=str(loadout.level), inline=True)
    embed.add_field(name="Stat Allocation", value=format_allocation(loadout), inline=True)
    embed.add_field(name="Magic/Fighting Styles", value=format_styles(loadout), inline=True)
    for slot in loadout.accessories:
        embed.add_field(name="Accessory", value=format_slot(slot, view), inline=True)
    embed.add_field(name="Chestplate", value=format_slot(loadout.chestplate, view), inline=True)
    embed.add_field(name="Boots", value=format_slot(loadout.boots, view), inline=True)
    embed.add_field(name="Total Stats", value=format_total_stats(total), inline=True)
    embed.set_footer(text=footer)
    return embed


class BuildCog(commands.Cog):
    """Provides the /build slash command."""

    def __init__(self, bot) -> None:
        self.bot = bot

    @app_commands.command(name="build", description="Load a GearBuilder build from its URL")
    @app_commands.describe(url="URL of the build")
    async def build(self, interaction: discord.Interaction, url: str) -> None:
        """
        /build url:<GearBuilder URL>

        Decodes the build and shows each slot plus the summed stats.
        """
        if not self.bot.is_allowed_channel(interaction.channel_id):
            await interaction.response.send_message(
                "I'm not configured to respond in this channel.", ephemeral=True
            )
            return

        try:
            code = extract_build_code(url, self.bot.settings.catalog.build_url_prefixes)
        except BuildURLError as e:
            await interaction.response.send_message(str(e), ephemeral=True)
            return

        await interaction.response.defer()

        try:
            loadout = decode_build_code(code)
        except DecodeError as e:
            logger.warning(f"Failed to decode build code {code!r}: {e}")
            await interaction.followup.send(
                embed=_error_embed(
                    "Failed to parse build",
                    f"{e}\n\n"
                    "• Make sure the URL is complete\n"
                    "• Check that the build was saved properly\n"
                    "• Try generating a new build URL",
                )
            )
            return

        try:
            embed = build_embed(
                loadout,
                self.bot.catalog,
                title=f"{interaction.user.display_name}'s build",
                footer=self.bot.settings.bot.embed_footer,
            )
        except Exception as e:
            logger.exception(f"Unexpected error rendering build {code!r}: {e}")
            embed = _error_embed("Error", "Something went wrong. Please try again.")

        await interaction.followup.send(embed=embed)
