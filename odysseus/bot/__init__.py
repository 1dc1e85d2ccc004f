"""
Discord Bot Layer.

Handles slash commands, URL validation and embed formatting on top of the
gear engine.
"""

from odysseus.bot.client import OdysseusBot

__all__ = ["OdysseusBot"]
