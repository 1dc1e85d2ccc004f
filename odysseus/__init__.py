"""
Odysseus - Discord bot for Arcane Odyssey GearBuilder builds.

This package decodes GearBuilder build codes, computes the total stats of a
build from the item catalog, and serves both through Discord slash commands.
"""

__version__ = "1.0.1"
