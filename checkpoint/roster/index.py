"""
RosterIndex — the in-memory roster lookup grid.

Students are bucketed by (first initial, last initial) into a 26x26 grid, so
verifying a claim only scans the handful of students sharing its initials.

The grid is built once at startup and never mutated afterwards; buckets are
tuples, so concurrent readers need no locking.
"""

from __future__ import annotations

import string
from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import ValidationError

from checkpoint.roster.base import (
    IdentityClaim,
    InvalidInitialError,
    RosterFormatError,
    StudentRecord,
)

GRID_SIZE = len(string.ascii_uppercase)

Bucket = tuple[StudentRecord, ...]


def initial_position(initial: str) -> int | None:
    """Return the 0-25 grid position of an uppercase Latin letter, or None."""
    if len(initial) != 1 or not ("A" <= initial <= "Z"):
        return None
    return ord(initial) - ord("A")


class RosterIndex:
    """
    Read-only roster grouped by initials.

    Build it with from_records() or from_dict(); both guarantee that every
    record sits in the bucket matching its two initials.

    Example:
        >>> index = RosterIndex.from_records([record])
        >>> index.verify(IdentityClaim.from_names("John", "Smith", 9, "Miller", 0))
        True
    """

    def __init__(self, grid: tuple[tuple[Bucket, ...], ...]) -> None:
        self._grid = grid
        self._size = sum(len(bucket) for row in grid for bucket in row)

    @classmethod
    def from_records(cls, records: Iterable[StudentRecord]) -> RosterIndex:
        """
        Place each record into the bucket for its initials.

        Raises:
            RosterFormatError: If a record's initials are not uppercase A-Z
        """
        grid: list[list[list[StudentRecord]]] = [
            [[] for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)
        ]
        for record in records:
            row = initial_position(record.first_initial)
            col = initial_position(record.last_initial)
            if row is None or col is None:
                raise RosterFormatError(
                    f"Roster record has non A-Z initials: {list(record.initials)!r}"
                )
            grid[row][col].append(record)
        return cls(_freeze(grid))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RosterIndex:
        """
        Build the index from a roster document.

        Expected shape: {"students": [[[record, ...] x 26] x 26]}, where the
        record list at [i][j] holds students with initials (chr(65+i), chr(65+j)).
        Empty buckets may be null.

        Raises:
            RosterFormatError: On a wrong grid shape, an invalid record, or a
                record stored in the wrong bucket
        """
        if not isinstance(data, dict) or "students" not in data:
            raise RosterFormatError("Roster document must be an object with a 'students' key")

        rows = data["students"]
        if not isinstance(rows, list) or len(rows) != GRID_SIZE:
            raise RosterFormatError(f"Roster grid must have {GRID_SIZE} rows")

        grid: list[list[list[StudentRecord]]] = []
        for i, row in enumerate(rows):
            if not isinstance(row, list) or len(row) != GRID_SIZE:
                raise RosterFormatError(f"Roster row {i} must have {GRID_SIZE} buckets")
            grid_row: list[list[StudentRecord]] = []
            for j, bucket in enumerate(row):
                grid_row.append(_parse_bucket(bucket, i, j))
            grid.append(grid_row)

        return cls(_freeze(grid))

    def bucket(self, first_initial: str, last_initial: str) -> Bucket:
        """
        Return every student with the given initials.

        Raises:
            InvalidInitialError: If either initial is not an uppercase Latin letter
        """
        row = initial_position(first_initial)
        if row is None:
            raise InvalidInitialError("first initial not an uppercase character")
        col = initial_position(last_initial)
        if col is None:
            raise InvalidInitialError("last initial not an uppercase character")
        return self._grid[row][col]

    def verify(self, claim: IdentityClaim) -> bool:
        """
        Check a claim against the roster.

        A record matches when both initials, the grade and the teacher initial
        are equal. The claim's student number is not checked.

        Returns:
            True on the first matching record, False if none match

        Raises:
            InvalidInitialError: If the claim's initials are not uppercase A-Z
        """
        candidates = self.bucket(claim.first_initial, claim.last_initial)
        return any(claim.matches(record) for record in candidates)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[StudentRecord]:
        for row in self._grid:
            for bucket in row:
                yield from bucket


def verify(claim: IdentityClaim, roster: RosterIndex) -> bool:
    """Module-level shorthand for roster.verify(claim)."""
    return roster.verify(claim)


def _parse_bucket(bucket: Any, row: int, col: int) -> list[StudentRecord]:
    if bucket is None:
        return []
    if not isinstance(bucket, list):
        raise RosterFormatError(f"Roster bucket [{row}][{col}] must be a list")

    expected = (chr(ord("A") + row), chr(ord("A") + col))
    records = []
    for raw in bucket:
        try:
            record = StudentRecord.model_validate(raw)
        except ValidationError as e:
            raise RosterFormatError(f"Invalid student in bucket [{row}][{col}]: {e}") from e
        if record.initials != expected:
            raise RosterFormatError(
                f"Student with initials {list(record.initials)!r} stored in bucket "
                f"for {list(expected)!r}"
            )
        records.append(record)
    return records


def _freeze(grid: list[list[list[StudentRecord]]]) -> tuple[tuple[Bucket, ...], ...]:
    return tuple(tuple(tuple(bucket) for bucket in row) for row in grid)
