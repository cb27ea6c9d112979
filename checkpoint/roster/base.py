"""
Data structures for roster verification.

- StudentRecord: one roster entry, loaded from the roster file
- IdentityClaim: what a member submits through /verify, reduced to initials
- InvalidClaimError / InvalidInitialError: rejected input, distinct from "no match"
- RosterFormatError: the roster document does not have the expected shape
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InvalidClaimError(ValueError):
    """Raised when a verification request cannot be turned into a usable claim."""


class InvalidInitialError(InvalidClaimError):
    """Raised when a claim's initial is not an uppercase Latin letter."""


class RosterFormatError(ValueError):
    """Raised when roster data is malformed."""


class StudentRecord(BaseModel):
    """
    A single student in the roster.

    Stored in the roster file as:
        {"initials": ["J", "S"], "grade": 9, "teacher_initial": "M", "student_number": 123456}
    """

    initials: tuple[str, str] = Field(description="First and last initial")
    grade: int = Field(description="School grade")
    teacher_initial: str = Field(
        min_length=1, max_length=1, description="Initial of the homeroom teacher's last name"
    )
    student_number: int = Field(description="School-issued student number")

    model_config = ConfigDict(frozen=True)

    @field_validator("initials")
    @classmethod
    def _single_characters(cls, value: tuple[str, str]) -> tuple[str, str]:
        if any(len(initial) != 1 for initial in value):
            raise ValueError(f"initials must be single characters, got {list(value)!r}")
        return value

    @property
    def first_initial(self) -> str:
        return self.initials[0]

    @property
    def last_initial(self) -> str:
        return self.initials[1]


class IdentityClaim(BaseModel):
    """
    A member's claim to be a particular student.

    Initials are NOT validated here; the verifier rejects bad initials with
    InvalidInitialError so the caller can tell bad input from a failed match.
    """

    first_initial: str
    last_initial: str
    grade: int
    teacher_initial: str
    student_number: int

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_names(
        cls,
        first_name: str,
        last_name: str,
        grade: int,
        teacher_name: str,
        student_number: int,
    ) -> IdentityClaim:
        """
        Build a claim from the free-text fields of a /verify request.

        Names are title-cased and reduced to their first letter; the teacher
        initial comes from the last word of the teacher name, so "Mr. Miller"
        and "Miller" both give "M".

        Raises:
            InvalidClaimError: If a name (or every word of the teacher name) is blank
        """
        first = first_name.strip().title()
        last = last_name.strip().title()
        teacher_words = teacher_name.title().split()

        if not first:
            raise InvalidClaimError("first name is empty")
        if not last:
            raise InvalidClaimError("last name is empty")
        if not teacher_words:
            raise InvalidClaimError("teacher name is empty")

        return cls(
            first_initial=first[0],
            last_initial=last[0],
            grade=grade,
            teacher_initial=teacher_words[-1][0],
            student_number=student_number,
        )

    def matches(self, record: StudentRecord) -> bool:
        """
        Return True if this claim identifies the given roster record.

        Student number is collected but not compared.
        """
        return (
            self.first_initial == record.first_initial
            and self.last_initial == record.last_initial
            and self.grade == record.grade
            and self.teacher_initial == record.teacher_initial
        )
