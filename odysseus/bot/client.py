"""
OdysseusBot — discord.py bot client.

Startup order in setup_hook:
1. Index the item catalog (unless one was injected)
2. Register BuildCog and ItemsCog
3. Push slash commands to Discord
"""

from __future__ import annotations

import discord
from discord.ext import commands

from odysseus.config.logging import get_logger
from odysseus.config.settings import Settings
from odysseus.gear.catalog import Catalog, configured_modifier_kinds, read_items

logger = get_logger(__name__)


class OdysseusBot(commands.Bot):
    """
    Discord bot for GearBuilder builds and item lookups.

    Cogs reach the shared catalog and settings through ``bot.catalog`` and
    ``bot.settings``.

    Args:
        settings: Application settings
        catalog: Pre-built catalog; when omitted, an empty one is created and
            filled from ``settings.catalog.items_path`` during setup_hook
    """

    def __init__(self, settings: Settings, catalog: Catalog | None = None) -> None:
        super().__init__(
            command_prefix=settings.bot.command_prefix,
            intents=discord.Intents.default(),
        )
        self.settings = settings
        if catalog is None:
            catalog = Catalog(special_modifier_ids=configured_modifier_kinds(settings.catalog))
        self.catalog = catalog

    async def setup_hook(self) -> None:
        """Runs once after login and before the gateway connection opens."""
        if not len(self.catalog):
            await self.reload_catalog()

        from odysseus.bot.cogs.build import BuildCog
        from odysseus.bot.cogs.items import ItemsCog
        await self.add_cog(BuildCog(self))
        await self.add_cog(ItemsCog(self))
        logger.info(f"Cogs loaded: {', '.join(self.cogs)}")

        await self._sync_commands()

    async def _sync_commands(self) -> None:
        guild_id = self.settings.bot.dev_guild_id
        try:
            if guild_id:
                guild = discord.Object(id=guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                logger.info(f"Synced {len(synced)} slash commands to dev guild {guild_id}")
            else:
                synced = await self.tree.sync()
                logger.info(f"Synced {len(synced)} slash commands globally (propagation can take up to an hour)")
        except discord.errors.Forbidden:
            logger.warning(
                "Slash command sync was refused (403). Invite the bot with both the "
                "'bot' and 'applications.commands' OAuth2 scopes."
            )
        except discord.HTTPException as e:
            # Commands registered by an earlier run keep working
            logger.warning(f"Slash command sync failed: {e}")

    async def reload_catalog(self) -> int:
        """
        Re-read the catalog file and publish it.

        Commands already running keep the snapshot they started with.

        Returns:
            Number of items now indexed

        Raises:
            CatalogLoadError: If the file cannot be read; the current
                catalog stays in place
        """
        items = await read_items(self.settings.catalog.items_path)
        self.catalog.replace(items)
        return len(self.catalog)

    async def on_ready(self) -> None:
        logger.info(f"{self.settings.bot.name} ready as {self.user} (id: {self.user.id}) in {len(self.guilds)} guild(s)")

    def is_allowed_channel(self, channel_id: int) -> bool:
        """True when no allow-list is configured or ``channel_id`` is on it."""
        allowed = self.settings.bot.allowed_channel_ids
        return not allowed or channel_id in allowed
