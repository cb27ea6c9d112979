"""
Guild Configuration Layer.

Holds each server's verified role, grade roles (7-12) and pronoun roles, and
works out which pronoun roles a member's menu selection adds or removes.
"""

from checkpoint.guilds.models import GuildConfig, PronounRole
from checkpoint.guilds.pronouns import (
    PronounOption,
    PronounRoleChanges,
    plan_pronoun_roles,
    pronoun_options,
)
from checkpoint.guilds.registry import (
    GuildNotInitializedError,
    GuildRegistry,
    RegistryFormatError,
    RegistryPersistError,
)

__all__ = [
    "GuildConfig",
    "GuildNotInitializedError",
    "GuildRegistry",
    "PronounOption",
    "PronounRole",
    "PronounRoleChanges",
    "RegistryFormatError",
    "RegistryPersistError",
    "plan_pronoun_roles",
    "pronoun_options",
]
