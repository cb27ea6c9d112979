"""
GuildRegistry — per-guild role configuration backed by a JSON file.

The whole registry is held in memory and the file is rewritten in full on
every change. Writes go to a temp file in the same directory which then
replaces the real file, so a crash mid-write leaves the previous version
intact.

Changes are serialized through an asyncio.Lock. If the file write fails the
in-memory change is kept and RegistryPersistError is raised, so memory and
disk can disagree until the next successful write.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from checkpoint.config.logging import get_logger
from checkpoint.guilds.models import GuildConfig, PronounRole

logger = get_logger(__name__)


class RegistryFormatError(ValueError):
    """Raised when the guild file cannot be parsed."""


class RegistryPersistError(OSError):
    """Raised when the guild file cannot be written."""


class GuildNotInitializedError(LookupError):
    """Raised when a guild has no configuration yet."""


class GuildRegistry:
    """
    In-memory list of GuildConfig entries, keyed by guild ID.

    Args:
        file_path: Where the registry is persisted
        guilds: Initial entries (later entries win on duplicate IDs)

    Example:
        >>> registry = await GuildRegistry.load(Path("guilds.json"))
        >>> await registry.upsert(config)
        >>> registry.find(config.guild_id)
    """

    def __init__(self, file_path: Path | str, guilds: Iterable[GuildConfig] = ()) -> None:
        self.file_path = Path(file_path)
        self._guilds: list[GuildConfig] = []
        for guild in guilds:
            self._replace(guild)
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Loading / serialization
    # ------------------------------------------------------------------

    @classmethod
    async def load(cls, file_path: Path | str) -> GuildRegistry:
        """
        Load the registry from disk.

        A missing file gives an empty registry; the file is created on the
        first upsert.

        Raises:
            RegistryFormatError: If the file exists but is not a valid guild document
        """
        file_path = Path(file_path)
        if not file_path.exists():
            logger.warning(f"Guild file not found, starting with no guilds: {file_path}")
            return cls(file_path)

        async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
            text = await f.read()

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise RegistryFormatError(f"Guild file is not valid JSON: {e}") from e

        registry = cls.from_dict(data, file_path)
        logger.info(f"Loaded {len(registry)} guild configuration(s) from {file_path}")
        return registry

    @classmethod
    def from_dict(cls, data: dict[str, Any], file_path: Path | str) -> GuildRegistry:
        """
        Build a registry from a {"guilds": [...]} document.

        A null or missing "guilds" list is treated as empty.
        """
        if not isinstance(data, dict):
            raise RegistryFormatError("Guild document must be a JSON object")

        raw_guilds = data.get("guilds") or []
        if not isinstance(raw_guilds, list):
            raise RegistryFormatError("'guilds' must be a list")

        try:
            guilds = [GuildConfig.model_validate(raw) for raw in raw_guilds]
        except ValidationError as e:
            raise RegistryFormatError(f"Invalid guild entry: {e}") from e

        return cls(file_path, guilds)

    def to_dict(self) -> dict[str, Any]:
        return {"guilds": [guild.to_dict() for guild in self._guilds]}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find(self, guild_id: str | int) -> GuildConfig | None:
        """Return the config for a guild, or None if it hasn't been initialized."""
        guild_id = str(guild_id)
        for guild in self._guilds:
            if guild.guild_id == guild_id:
                return guild
        return None

    def __len__(self) -> int:
        return len(self._guilds)

    def __iter__(self) -> Iterator[GuildConfig]:
        return iter(list(self._guilds))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def upsert(self, config: GuildConfig) -> None:
        """
        Replace any config for the same guild with this one and save.

        Raises:
            RegistryPersistError: If the file write fails (the in-memory
                change is kept)
        """
        async with self._lock:
            self._replace(config)
            logger.info(f"Guild {config.guild_id} configured (verified role {config.verified_role})")
            await self._save()

    async def add_pronoun_role(self, guild_id: str | int, role: PronounRole) -> GuildConfig:
        """
        Add a pronoun role to a guild's config and save.

        A pronoun role with the same value is replaced in place.

        Raises:
            GuildNotInitializedError: If the guild has no config
            RegistryPersistError: If the file write fails
        """
        async with self._lock:
            current = self.find(guild_id)
            if current is None:
                raise GuildNotInitializedError(f"Guild {guild_id} has not been initialized")

            pronoun_roles = list(current.pronoun_roles)
            for i, existing in enumerate(pronoun_roles):
                if existing.value == role.value:
                    pronoun_roles[i] = role
                    break
            else:
                pronoun_roles.append(role)

            updated = current.model_copy(update={"pronoun_roles": tuple(pronoun_roles)})
            self._replace(updated)
            logger.info(f"Guild {updated.guild_id} pronoun role {role.value!r} -> {role.role_id}")
            await self._save()
            return updated

    def _replace(self, config: GuildConfig) -> None:
        self._guilds = [g for g in self._guilds if g.guild_id != config.guild_id]
        self._guilds.append(config)

    async def _save(self) -> None:
        content = json.dumps(self.to_dict(), indent=2) + "\n"
        temp_path = self.file_path.with_name(f".{self.file_path.name}.tmp")

        try:
            await aiofiles.os.makedirs(self.file_path.parent, exist_ok=True)
            async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
                await f.write(content)
            await aiofiles.os.replace(temp_path, self.file_path)
        except OSError as e:
            with contextlib.suppress(OSError):
                await aiofiles.os.remove(temp_path)
            logger.error(f"Failed to save guild file {self.file_path}: {e}")
            raise RegistryPersistError(str(e)) from e

        logger.debug(f"Guild file saved: {self.file_path}")
