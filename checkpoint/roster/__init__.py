"""
Roster Verification Layer.

Matches a member's identity claim (initials, grade, homeroom teacher) against
the school roster:

    /verify fields  →  IdentityClaim.from_names()
                              ↓
                     RosterIndex.verify(claim)  →  bool

The index is loaded once from the roster file and is read-only afterwards.
"""

from checkpoint.roster.base import (
    IdentityClaim,
    InvalidClaimError,
    InvalidInitialError,
    RosterFormatError,
    StudentRecord,
)
from checkpoint.roster.index import RosterIndex, verify
from checkpoint.roster.loader import load_roster

__all__ = [
    "IdentityClaim",
    "InvalidClaimError",
    "InvalidInitialError",
    "RosterFormatError",
    "RosterIndex",
    "StudentRecord",
    "load_roster",
    "verify",
]
