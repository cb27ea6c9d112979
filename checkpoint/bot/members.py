"""
Member role and nickname updates.

Each call is attempted independently: a failure (missing permission, deleted
role, role above the bot's own) is logged and reported as False instead of
aborting the remaining updates.
"""

from __future__ import annotations

import discord

from checkpoint.config.logging import get_logger

logger = get_logger(__name__)

# Discord rejects nicknames longer than this
MAX_NICKNAME_LENGTH = 32


def _role(role_id: str) -> discord.Object:
    return discord.Object(id=int(role_id))


async def add_role(member: discord.Member, role_id: str, *, reason: str | None = None) -> bool:
    try:
        await member.add_roles(_role(role_id), reason=reason)
    except discord.Forbidden:
        logger.warning(f"Missing permission to add role {role_id} to member {member.id}")
        return False
    except discord.HTTPException as e:
        logger.warning(f"Failed to add role {role_id} to member {member.id}: {e}")
        return False
    return True


async def remove_role(member: discord.Member, role_id: str, *, reason: str | None = None) -> bool:
    try:
        await member.remove_roles(_role(role_id), reason=reason)
    except discord.Forbidden:
        logger.warning(f"Missing permission to remove role {role_id} from member {member.id}")
        return False
    except discord.HTTPException as e:
        logger.warning(f"Failed to remove role {role_id} from member {member.id}: {e}")
        return False
    return True


def _capitalize_words(name: str) -> str:
    # Only the first letter of each word changes, so "DeShawn" stays "DeShawn"
    return " ".join(word[:1].upper() + word[1:] for word in name.split())


def verified_nickname(first_name: str, last_name: str) -> str:
    """
    Nickname for a verified student: "John S." for John Smith.

    Both names must already be non-blank.
    """
    first = _capitalize_words(first_name)
    last = _capitalize_words(last_name)
    suffix = f" {last[0]}."
    return first[: MAX_NICKNAME_LENGTH - len(suffix)] + suffix


async def set_nickname(member: discord.Member, nickname: str, *, reason: str | None = None) -> bool:
    try:
        await member.edit(nick=nickname, reason=reason)
    except discord.Forbidden:
        # Includes the guild owner, whose nickname bots can never change
        logger.warning(f"Missing permission to change nickname of member {member.id}")
        return False
    except discord.HTTPException as e:
        logger.warning(f"Failed to change nickname of member {member.id}: {e}")
        return False
    return True
