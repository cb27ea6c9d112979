"""Pronoun role selection: which roles to add and remove after a menu submission."""

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field

from checkpoint.guilds.models import PronounRole


@dataclass
class PronounRoleChanges:
    add: list[str] = field(default_factory=list)
    remove: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PronounOption:
    label: str
    value: str
    default: bool


def plan_pronoun_roles(
    pronoun_roles: Iterable[PronounRole], selected_values: Collection[str]
) -> PronounRoleChanges:
    """
    Split the configured pronoun roles into roles to add and roles to remove.

    Every configured role ends up in exactly one of the two lists: `add` if its
    value was selected, `remove` otherwise. Configured order is preserved.
    """
    selected = set(selected_values)
    changes = PronounRoleChanges()
    for role in pronoun_roles:
        if role.value in selected:
            changes.add.append(role.role_id)
        else:
            changes.remove.append(role.role_id)
    return changes


def pronoun_options(
    pronoun_roles: Iterable[PronounRole], member_role_ids: Collection[str]
) -> list[PronounOption]:
    """Menu options for a member, pre-selecting the pronoun roles they already hold."""
    held = set(member_role_ids)
    return [
        PronounOption(label=role.label, value=role.value, default=role.role_id in held)
        for role in pronoun_roles
    ]
