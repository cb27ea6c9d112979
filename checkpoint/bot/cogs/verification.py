"""
VerificationCog — /verify and /initialize.

/verify checks a member's claim against the roster and, on a match, gives
them the verified role and their grade role and renames them "First L.".

/initialize (administrators only) records which roles this server uses and
saves the guild registry.
"""

from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands

from checkpoint.bot import messages
from checkpoint.bot.messages import reply
from checkpoint.bot.members import add_role, remove_role, set_nickname, verified_nickname
from checkpoint.config.logging import get_logger
from checkpoint.guilds import GuildConfig, GuildRegistry, RegistryPersistError
from checkpoint.roster import IdentityClaim, InvalidClaimError, RosterIndex

logger = get_logger(__name__)


class VerificationCog(commands.Cog):
    """Roster verification and per-server role setup."""

    def __init__(self, bot, roster: RosterIndex, registry: GuildRegistry) -> None:
        self.bot = bot
        self.roster = roster
        self.registry = registry

    # ------------------------------------------------------------------
    # /verify
    # ------------------------------------------------------------------

    @app_commands.command(name="verify", description="Verify yourself for access to the server.")
    @app_commands.describe(
        first_name="Your first name.",
        last_name="Your last name.",
        grade="Your grade.",
        teacher_name="The last name of your homeroom teacher (Week 1, Period 1)",
        student_number="Your student number (6 digits).",
    )
    @app_commands.guild_only()
    async def verify(
        self,
        interaction: discord.Interaction,
        first_name: str,
        last_name: str,
        grade: int,
        teacher_name: str,
        student_number: int,
    ) -> None:
        """
        /verify first_name last_name grade teacher_name student_number

        Only the initials, grade and teacher initial are checked against the
        roster; the student number is collected but not compared.
        """
        if interaction.guild_id is None:
            await reply(interaction, messages.GUILD_ONLY)
            return

        try:
            claim = IdentityClaim.from_names(
                first_name, last_name, grade, teacher_name, student_number
            )
            matched = self.roster.verify(claim)
        except InvalidClaimError as e:
            logger.info(f"Rejected /verify input from user {interaction.user.id}: {e}")
            await reply(interaction, messages.invalid_claim(str(e)))
            return

        if not matched:
            logger.info(f"No roster match for user {interaction.user.id} in guild {interaction.guild_id}")
            await reply(interaction, messages.INVALID_INFORMATION)
            return

        config = self.registry.find(interaction.guild_id)
        if config is None:
            await reply(interaction, messages.NOT_INITIALIZED)
            return

        grade_role = config.grade_role(claim.grade)
        if grade_role is None:
            logger.warning(f"Roster match with unsupported grade {claim.grade} for user {interaction.user.id}")
            await reply(interaction, messages.INVALID_INFORMATION)
            return

        # Several role API calls follow; don't let the interaction token expire
        await interaction.response.defer(ephemeral=True, thinking=True)

        member = interaction.user
        reason = "Verified with /verify"
        for role_id in config.grade_roles:
            await remove_role(member, role_id, reason=reason)
        await add_role(member, config.verified_role, reason=reason)
        await add_role(member, grade_role, reason=reason)
        await set_nickname(member, verified_nickname(first_name, last_name), reason=reason)

        logger.info(f"Verified user {member.id} in guild {config.guild_id} (grade {claim.grade})")
        await reply(interaction, messages.VERIFIED)

    # ------------------------------------------------------------------
    # /initialize
    # ------------------------------------------------------------------

    @app_commands.command(name="initialize", description="Initialize the server with Woodlands Checkpoint.")
    @app_commands.describe(
        verified_role="The role to give to verified users.",
        grade_7_role="The role to give to 7th graders.",
        grade_8_role="The role to give to 8th graders.",
        grade_9_role="The role to give to 9th graders.",
        grade_10_role="The role to give to 10th graders.",
        grade_11_role="The role to give to 11th graders.",
        grade_12_role="The role to give to 12th graders.",
    )
    @app_commands.guild_only()
    @app_commands.default_permissions(administrator=True)
    async def initialize(
        self,
        interaction: discord.Interaction,
        verified_role: discord.Role,
        grade_7_role: discord.Role,
        grade_8_role: discord.Role,
        grade_9_role: discord.Role,
        grade_10_role: discord.Role,
        grade_11_role: discord.Role,
        grade_12_role: discord.Role,
    ) -> None:
        """
        Replace this server's configuration. Pronoun roles are cleared and
        have to be added again with /add_pronoun.
        """
        if interaction.guild_id is None:
            await reply(interaction, messages.GUILD_ONLY)
            return

        if not interaction.permissions.administrator:
            await reply(interaction, messages.NOT_ADMIN)
            return

        grade_roles = (grade_7_role, grade_8_role, grade_9_role, grade_10_role, grade_11_role, grade_12_role)
        config = GuildConfig(
            guild_id=str(interaction.guild_id),
            verified_role=str(verified_role.id),
            grade_roles=tuple(str(role.id) for role in grade_roles),
            pronoun_roles=(),
        )

        try:
            await self.registry.upsert(config)
        except RegistryPersistError as e:
            await reply(interaction, messages.save_failed(e))
            return

        await reply(interaction, f"Set role to {messages.role_mention(verified_role.id)}")

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        logger.error(f"Unexpected error in /{interaction.command.name if interaction.command else '?'}", exc_info=error)
        await reply(interaction, messages.UNEXPECTED_ERROR)
