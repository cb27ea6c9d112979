"""
CheckpointBot — discord.py bot client.

Manages the bot lifecycle:
- Loads the roster and guild registry once at startup
- Loads command cogs (VerificationCog, PronounCog) with those passed in
- Syncs slash commands (guild-local for dev, global for production)
"""

from __future__ import annotations

import discord
from discord.ext import commands

from checkpoint.config.logging import get_logger
from checkpoint.config.settings import Settings
from checkpoint.guilds import GuildRegistry
from checkpoint.roster import RosterIndex, load_roster

logger = get_logger(__name__)


class CheckpointBot(commands.Bot):
    """
    Discord bot that verifies students and hands out roles.

    The roster and guild registry are loaded in setup_hook() and given to the
    cogs directly; nothing is kept in module globals.

    Args:
        settings: Full application settings (bot token, data file paths, etc.)
    """

    def __init__(self, settings: Settings) -> None:
        intents = discord.Intents.default()
        super().__init__(
            command_prefix=settings.bot.command_prefix,
            intents=intents,
            activity=discord.Activity(
                type=discord.ActivityType.listening,
                name=settings.bot.status_text,
            ),
        )
        self.settings = settings
        self.roster: RosterIndex | None = None
        self.registry: GuildRegistry | None = None

    async def setup_hook(self) -> None:
        """
        Called after login, before connecting to the Gateway.

        Loads data files, loads cogs, and syncs slash commands. A missing or
        malformed roster aborts startup.
        """
        # --- 1. Data files ---
        try:
            self.roster = await load_roster(self.settings.data.roster_path)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Could not load roster: {e}")
            raise
        self.registry = await GuildRegistry.load(self.settings.data.guilds_path)

        # --- 2. Load cogs ---
        from checkpoint.bot.cogs.pronouns import PronounCog
        from checkpoint.bot.cogs.verification import VerificationCog
        await self.add_cog(VerificationCog(self, self.roster, self.registry))
        await self.add_cog(
            PronounCog(self, self.registry, max_values=self.settings.bot.pronoun_max_values)
        )
        logger.info("Cogs loaded")

        # --- 3. Sync slash commands ---
        try:
            if self.settings.bot.dev_guild_id:
                guild = discord.Object(id=self.settings.bot.dev_guild_id)
                self.tree.copy_global_to(guild=guild)
                await self.tree.sync(guild=guild)
                logger.info(f"Slash commands synced to dev guild {self.settings.bot.dev_guild_id} (instant)")
            else:
                await self.tree.sync()
                logger.info("Slash commands synced globally (may take up to 1 hour to propagate)")
        except discord.errors.Forbidden:
            logger.warning(
                "Could not sync slash commands (403 Forbidden). "
                "Re-invite the bot using an OAuth2 URL that includes both 'bot' "
                "and 'applications.commands' scopes."
            )
        except discord.HTTPException as e:
            logger.warning(f"Slash command sync failed: {e}. The bot will still start.")

    async def on_ready(self) -> None:
        """Called when the bot successfully connects to Discord."""
        logger.info(f"Logged in as {self.user} (id: {self.user.id})")
        logger.info(f"Connected to {len(self.guilds)} guild(s)")

    async def close(self) -> None:
        logger.info("Shutting down Woodlands Checkpoint...")
        await super().close()
