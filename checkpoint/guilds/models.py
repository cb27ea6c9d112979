"""
Per-guild configuration models.

Serialized form (one entry of guilds.json):

    {
        "id": "583464194331115566",
        "verified_role": "1001",
        "grade_roles": ["1007", "1008", "1009", "1010", "1011", "1012"],
        "pronoun_roles": [{"label": "She/Her", "value": "she/her", "id": "2001"}]
    }
"""

from pydantic import BaseModel, ConfigDict, Field

FIRST_GRADE = 7
LAST_GRADE = 12
GRADE_COUNT = LAST_GRADE - FIRST_GRADE + 1


class PronounRole(BaseModel):
    """A self-assignable pronoun role offered in the /select_pronouns menu."""

    label: str = Field(min_length=1, max_length=100, description="Text shown in the menu")
    value: str = Field(min_length=1, max_length=100, description="Menu option value")
    role_id: str = Field(alias="id", description="Discord role ID")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class GuildConfig(BaseModel):
    """Role setup for one Discord server, written by /initialize."""

    guild_id: str = Field(alias="id", description="Discord guild ID")
    verified_role: str = Field(description="Role granted to every verified student")
    grade_roles: tuple[str, ...] = Field(
        min_length=GRADE_COUNT,
        max_length=GRADE_COUNT,
        description="Grade role IDs, grade 7 first and grade 12 last",
    )
    pronoun_roles: tuple[PronounRole, ...] = Field(default=())

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def grade_role(self, grade: int) -> str | None:
        """Return the role for a grade, or None if the grade is outside 7-12."""
        if FIRST_GRADE <= grade <= LAST_GRADE:
            return self.grade_roles[grade - FIRST_GRADE]
        return None

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
