"""
Roster file loader.

Reads the roster JSON document once at startup and builds a RosterIndex.
"""

import json
from pathlib import Path

import aiofiles

from checkpoint.config.logging import get_logger
from checkpoint.roster.base import RosterFormatError
from checkpoint.roster.index import RosterIndex

logger = get_logger(__name__)


async def load_roster(file_path: Path) -> RosterIndex:
    """
    Load the roster file into an index.

    Args:
        file_path: Path to the roster JSON file

    Returns:
        RosterIndex containing every student in the file

    Raises:
        FileNotFoundError: If the file doesn't exist
        RosterFormatError: If the file is not valid JSON or has the wrong shape
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Roster file not found: {file_path}")

    logger.info(f"Loading roster: {file_path}")

    async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
        text = await f.read()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RosterFormatError(f"Roster file is not valid JSON: {e}") from e

    index = RosterIndex.from_dict(data)
    logger.info(f"Roster loaded: {len(index)} students")
    return index
