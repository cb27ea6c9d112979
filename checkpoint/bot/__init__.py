"""
Discord Bot Layer.

Turns slash commands and select-menu submissions into roster checks and
guild registry updates, and applies the resulting role changes.
"""

from checkpoint.bot.client import CheckpointBot

__all__ = ["CheckpointBot"]
