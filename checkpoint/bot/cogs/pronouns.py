"""
PronounCog — /select_pronouns and /add_pronoun.

/select_pronouns shows a select menu of the server's pronoun roles with the
member's current ones pre-selected. Submitting the menu adds the chosen roles
and removes the rest.

/add_pronoun (administrators only) registers a pronoun role for the menu.
"""

from __future__ import annotations

from collections.abc import Sequence

import discord
from discord import app_commands
from discord.ext import commands

from checkpoint.bot import messages
from checkpoint.bot.members import add_role, remove_role
from checkpoint.bot.messages import reply
from checkpoint.config.logging import get_logger
from checkpoint.guilds import (
    GuildConfig,
    GuildNotInitializedError,
    GuildRegistry,
    PronounOption,
    PronounRole,
    RegistryPersistError,
    plan_pronoun_roles,
    pronoun_options,
)

logger = get_logger(__name__)

# Discord's limit on options in one select menu
MAX_SELECT_OPTIONS = 25
MENU_TIMEOUT_SECONDS = 300


def _menu_roles(config: GuildConfig) -> tuple[PronounRole, ...]:
    """Pronoun roles that fit in one select menu; later ones are left untouched."""
    return config.pronoun_roles[:MAX_SELECT_OPTIONS]


class PronounSelect(discord.ui.Select):
    """The pronoun menu itself; submissions are handed back to the cog."""

    def __init__(self, cog: PronounCog, options: Sequence[PronounOption], max_values: int) -> None:
        super().__init__(
            placeholder="Select your pronouns",
            min_values=1,
            max_values=min(max_values, len(options)),
            options=[
                discord.SelectOption(label=option.label, value=option.value, default=option.default)
                for option in options
            ],
        )
        self.cog = cog

    async def callback(self, interaction: discord.Interaction) -> None:
        await self.cog.apply_pronouns(interaction, self.values)


class PronounSelectView(discord.ui.View):
    def __init__(self, cog: PronounCog, options: Sequence[PronounOption], max_values: int) -> None:
        super().__init__(timeout=MENU_TIMEOUT_SECONDS)
        self.add_item(PronounSelect(cog, options, max_values))

    async def on_error(
        self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item
    ) -> None:
        logger.error("Unexpected error in pronoun menu", exc_info=error)
        await reply(interaction, messages.UNEXPECTED_ERROR)


class PronounCog(commands.Cog):
    """Self-service pronoun roles."""

    def __init__(self, bot, registry: GuildRegistry, max_values: int = 3) -> None:
        self.bot = bot
        self.registry = registry
        self.max_values = max_values

    @app_commands.command(name="select_pronouns", description="Select your pronouns.")
    @app_commands.guild_only()
    async def select_pronouns(self, interaction: discord.Interaction) -> None:
        if interaction.guild_id is None:
            await reply(interaction, messages.GUILD_ONLY)
            return

        config = self.registry.find(interaction.guild_id)
        if config is None:
            await reply(interaction, messages.NOT_INITIALIZED)
            return
        if not config.pronoun_roles:
            await reply(interaction, messages.NO_PRONOUN_ROLES)
            return

        member_role_ids = [str(role.id) for role in interaction.user.roles]
        options = pronoun_options(_menu_roles(config), member_role_ids)
        view = PronounSelectView(self, options, self.max_values)
        await reply(interaction, messages.SELECT_PRONOUNS, view=view)

    async def apply_pronouns(self, interaction: discord.Interaction, selected: Sequence[str]) -> None:
        """Handle a submitted pronoun menu."""
        config = self.registry.find(interaction.guild_id) if interaction.guild_id else None
        if config is None or not config.pronoun_roles:
            await reply(interaction, messages.NO_PRONOUN_ROLES)
            return

        changes = plan_pronoun_roles(_menu_roles(config), selected)
        await interaction.response.defer(ephemeral=True, thinking=True)

        member = interaction.user
        reason = "Selected with /select_pronouns"
        for role_id in changes.add:
            await add_role(member, role_id, reason=reason)
        for role_id in changes.remove:
            await remove_role(member, role_id, reason=reason)

        logger.info(
            f"User {member.id} in guild {config.guild_id} set pronouns {list(selected)!r} "
            f"(+{len(changes.add)} / -{len(changes.remove)} roles)"
        )
        await reply(interaction, messages.PRONOUNS_SET)

    @app_commands.command(name="add_pronoun", description="Add a pronoun role to the /select_pronouns menu.")
    @app_commands.describe(
        label="Text shown in the menu, e.g. She/Her",
        role="The role members get when they pick it.",
        value="Menu value (defaults to the label in lower case).",
    )
    @app_commands.guild_only()
    @app_commands.default_permissions(administrator=True)
    async def add_pronoun(
        self,
        interaction: discord.Interaction,
        label: app_commands.Range[str, 1, 100],
        role: discord.Role,
        value: str | None = None,
    ) -> None:
        if interaction.guild_id is None:
            await reply(interaction, messages.GUILD_ONLY)
            return

        if not interaction.permissions.administrator:
            await reply(interaction, messages.NOT_ADMIN)
            return

        label = label.strip()
        value = (value.strip() if value is not None else label.lower())[:100]
        if not label:
            await reply(interaction, "Error: label is empty")
            return
        if not value:
            await reply(interaction, "Error: value is empty")
            return

        config = self.registry.find(interaction.guild_id)
        if config is not None and len(config.pronoun_roles) >= MAX_SELECT_OPTIONS and all(
            existing.value != value for existing in config.pronoun_roles
        ):
            await reply(interaction, f"Error: a menu can hold at most {MAX_SELECT_OPTIONS} pronoun roles.")
            return

        pronoun_role = PronounRole(label=label, value=value, role_id=str(role.id))
        try:
            await self.registry.add_pronoun_role(interaction.guild_id, pronoun_role)
        except GuildNotInitializedError:
            await reply(interaction, messages.NOT_INITIALIZED)
            return
        except RegistryPersistError as e:
            await reply(interaction, messages.save_failed(e))
            return

        await reply(interaction, f"Added {messages.role_mention(role.id)} to the pronoun menu as '{label}'.")

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        logger.error(f"Unexpected error in /{interaction.command.name if interaction.command else '?'}", exc_info=error)
        await reply(interaction, messages.UNEXPECTED_ERROR)
