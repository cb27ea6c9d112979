"""
Tests for VerificationCog.

Covers:
- /verify: success path role and nickname calls, no match, bad input,
  uninitialized guild, unsupported grade, API failures mid-way
- /initialize: admin gate, registry upsert, save failure
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from checkpoint.bot import messages
from checkpoint.bot.cogs.verification import VerificationCog
from checkpoint.guilds import GuildConfig, GuildRegistry, PronounRole, RegistryPersistError
from checkpoint.roster import RosterIndex, StudentRecord

GRADE_ROLES = ("107", "108", "109", "110", "111", "112")


def _make_interaction(guild_id: int | None = 1, admin: bool = False):
    """Interaction double whose response.is_done() flips once it is answered or deferred."""
    interaction = MagicMock(spec=discord.Interaction)
    interaction.guild_id = guild_id
    interaction.permissions = MagicMock()
    interaction.permissions.administrator = admin

    member = MagicMock()
    member.id = 555
    member.add_roles = AsyncMock()
    member.remove_roles = AsyncMock()
    member.edit = AsyncMock()
    interaction.user = member

    state = {"done": False}

    async def _answer(*args, **kwargs):
        state["done"] = True

    interaction.response = MagicMock()
    interaction.response.is_done = MagicMock(side_effect=lambda: state["done"])
    interaction.response.send_message = AsyncMock(side_effect=_answer)
    interaction.response.defer = AsyncMock(side_effect=_answer)
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    return interaction


def _sent_text(interaction) -> str:
    """The single ephemeral reply, whichever channel it went out on."""
    if interaction.followup.send.called:
        call = interaction.followup.send.call_args
    else:
        call = interaction.response.send_message.call_args
    assert call.kwargs.get("ephemeral") is True
    return call.args[0]


def _roster(*records: StudentRecord) -> RosterIndex:
    return RosterIndex.from_records(
        records or [StudentRecord(initials=("J", "S"), grade=9, teacher_initial="M", student_number=123456)]
    )


def _config(**overrides) -> GuildConfig:
    fields = dict(guild_id="1", verified_role="100", grade_roles=GRADE_ROLES)
    fields.update(overrides)
    return GuildConfig(**fields)


def _role(role_id: int):
    role = MagicMock(spec=discord.Role)
    role.id = role_id
    return role


@pytest.fixture
def registry(tmp_path) -> GuildRegistry:
    return GuildRegistry(tmp_path / "guilds.json", [_config()])


class TestVerify:
    @pytest.mark.asyncio
    async def test_verified_member_gets_roles_and_nickname(self, registry):
        cog = VerificationCog(MagicMock(), _roster(), registry)
        interaction = _make_interaction()
        member = interaction.user

        await cog.verify.callback(cog, interaction, "john", "smith", 9, "Miller", 999)

        interaction.response.defer.assert_awaited_once()
        removed = [c.args[0].id for c in member.remove_roles.call_args_list]
        assert removed == [107, 108, 109, 110, 111, 112]
        added = [c.args[0].id for c in member.add_roles.call_args_list]
        assert added == [100, 109]
        member.edit.assert_awaited_once()
        assert member.edit.call_args.kwargs["nick"] == "John S."
        assert _sent_text(interaction) == messages.VERIFIED

    @pytest.mark.asyncio
    async def test_no_roster_match(self, registry):
        cog = VerificationCog(MagicMock(), _roster(), registry)
        interaction = _make_interaction()

        await cog.verify.callback(cog, interaction, "John", "Smith", 10, "Miller", 123456)

        assert _sent_text(interaction) == messages.INVALID_INFORMATION
        interaction.user.add_roles.assert_not_called()
        interaction.user.edit.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_letter_initial_is_reported_as_error(self, registry):
        cog = VerificationCog(MagicMock(), _roster(), registry)
        interaction = _make_interaction()

        await cog.verify.callback(cog, interaction, "1john", "Smith", 9, "Miller", 1)

        assert _sent_text(interaction) == "Error: first initial not an uppercase character"
        interaction.user.add_roles.assert_not_called()

    @pytest.mark.asyncio
    async def test_blank_teacher_name_is_reported_as_error(self, registry):
        cog = VerificationCog(MagicMock(), _roster(), registry)
        interaction = _make_interaction()

        await cog.verify.callback(cog, interaction, "John", "Smith", 9, "  ", 1)

        assert _sent_text(interaction) == "Error: teacher name is empty"

    @pytest.mark.asyncio
    async def test_uninitialized_guild(self, tmp_path):
        cog = VerificationCog(MagicMock(), _roster(), GuildRegistry(tmp_path / "guilds.json"))
        interaction = _make_interaction()

        await cog.verify.callback(cog, interaction, "John", "Smith", 9, "Miller", 1)

        assert _sent_text(interaction) == messages.NOT_INITIALIZED
        interaction.user.add_roles.assert_not_called()

    @pytest.mark.asyncio
    async def test_grade_without_a_role_is_rejected(self, registry):
        """A roster match for a grade outside 7-12 has no grade role to give."""
        roster = _roster(
            StudentRecord(initials=("J", "S"), grade=13, teacher_initial="M", student_number=1)
        )
        cog = VerificationCog(MagicMock(), roster, registry)
        interaction = _make_interaction()

        await cog.verify.callback(cog, interaction, "John", "Smith", 13, "Miller", 1)

        assert _sent_text(interaction) == messages.INVALID_INFORMATION
        interaction.user.add_roles.assert_not_called()

    @pytest.mark.asyncio
    async def test_api_failures_do_not_stop_verification(self, registry):
        """A refused nickname change (e.g. the guild owner) still verifies the member."""
        cog = VerificationCog(MagicMock(), _roster(), registry)
        interaction = _make_interaction()
        forbidden = discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Missing Permissions")
        interaction.user.remove_roles.side_effect = forbidden
        interaction.user.edit.side_effect = forbidden

        await cog.verify.callback(cog, interaction, "John", "Smith", 9, "Miller", 1)

        assert interaction.user.remove_roles.await_count == 6
        assert interaction.user.add_roles.await_count == 2
        assert _sent_text(interaction) == messages.VERIFIED

    @pytest.mark.asyncio
    async def test_outside_a_guild(self, registry):
        cog = VerificationCog(MagicMock(), _roster(), registry)
        interaction = _make_interaction(guild_id=None)

        await cog.verify.callback(cog, interaction, "John", "Smith", 9, "Miller", 1)

        assert _sent_text(interaction) == messages.GUILD_ONLY


class TestInitialize:
    ROLE_IDS = (100, 107, 108, 109, 110, 111, 112)

    @pytest.mark.asyncio
    async def test_non_admin_is_refused(self, tmp_path):
        registry = GuildRegistry(tmp_path / "guilds.json")
        cog = VerificationCog(MagicMock(), _roster(), registry)
        interaction = _make_interaction(admin=False)

        await cog.initialize.callback(cog, interaction, *[_role(i) for i in self.ROLE_IDS])

        assert _sent_text(interaction) == messages.NOT_ADMIN
        assert registry.find(1) is None
        assert not (tmp_path / "guilds.json").exists()

    @pytest.mark.asyncio
    async def test_admin_initializes_guild(self, tmp_path):
        path = tmp_path / "guilds.json"
        registry = GuildRegistry(path)
        cog = VerificationCog(MagicMock(), _roster(), registry)
        interaction = _make_interaction(guild_id=42, admin=True)

        await cog.initialize.callback(cog, interaction, *[_role(i) for i in self.ROLE_IDS])

        config = registry.find(42)
        assert config.verified_role == "100"
        assert config.grade_roles == GRADE_ROLES
        assert config.pronoun_roles == ()
        assert json.loads(path.read_text())["guilds"][0]["id"] == "42"
        assert _sent_text(interaction) == "Set role to <@&100>"

    @pytest.mark.asyncio
    async def test_reinitialize_replaces_config_and_clears_pronouns(self, tmp_path):
        pronoun = PronounRole(label="She/Her", value="she/her", role_id="201")
        registry = GuildRegistry(tmp_path / "guilds.json", [_config(pronoun_roles=(pronoun,))])
        cog = VerificationCog(MagicMock(), _roster(), registry)
        interaction = _make_interaction(guild_id=1, admin=True)

        await cog.initialize.callback(cog, interaction, *[_role(i) for i in (900, *self.ROLE_IDS[1:])])

        assert len(registry) == 1
        assert registry.find(1).verified_role == "900"
        assert registry.find(1).pronoun_roles == ()

    @pytest.mark.asyncio
    async def test_save_failure_is_reported(self, tmp_path):
        registry = GuildRegistry(tmp_path / "guilds.json")
        registry.upsert = AsyncMock(side_effect=RegistryPersistError("disk full"))
        cog = VerificationCog(MagicMock(), _roster(), registry)
        interaction = _make_interaction(admin=True)

        await cog.initialize.callback(cog, interaction, *[_role(i) for i in self.ROLE_IDS])

        assert _sent_text(interaction) == "Error while saving guilds file: disk full"
