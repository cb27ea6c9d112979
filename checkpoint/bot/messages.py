"""User-facing reply texts shared by the cogs. Every reply is sent ephemerally."""

from __future__ import annotations

import discord

VERIFIED = "You are verified! Welcome!"
INVALID_INFORMATION = "Sorry, your information is invalid."
NOT_INITIALIZED = "Please ask an admin to use `/initialize`."
NOT_ADMIN = "You do not have sufficient permissions. You must be an administrator."
NO_PRONOUN_ROLES = (
    "No pronoun roles are set up here. Please ask an admin to use `/add_pronoun`."
)
SELECT_PRONOUNS = "Select your pronouns."
PRONOUNS_SET = "Success! Set your pronouns."
GUILD_ONLY = "This command can only be used in a server."
UNEXPECTED_ERROR = "Something went wrong. Please try again."


def invalid_claim(reason: str) -> str:
    return f"Error: {reason}"


def save_failed(error: Exception) -> str:
    return f"Error while saving guilds file: {error}"


def role_mention(role_id: int | str) -> str:
    return f"<@&{role_id}>"


async def reply(interaction: discord.Interaction, content: str, **kwargs) -> None:
    """Send an ephemeral reply, as a followup if the interaction was already answered."""
    if interaction.response.is_done():
        await interaction.followup.send(content, ephemeral=True, **kwargs)
    else:
        await interaction.response.send_message(content, ephemeral=True, **kwargs)
