"""Course assignment and session context models.

Provides:
- CourseAssignment: Pydantic model for one (course, division) assignment
  as returned at login
- SessionContext: Frozen dataclass identifying the active (course, division)
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, field_validator


class CourseAssignment(BaseModel):
    """A course/division pair a faculty member teaches."""

    course_id: str
    course_name: str = ""
    division: str

    @field_validator("course_id", "division", mode="before")
    @classmethod
    def _coerce_str(cls, value: object) -> object:
        # Backends sometimes send numeric ids and divisions.
        if isinstance(value, int):
            return str(value)
        return value


@dataclass(frozen=True)
class SessionContext:
    """The (course_id, division) pair scoping all materials and derived artifacts.

    Either field empty means the context is unset. Equality is value
    equality on both fields.
    """

    course_id: str = ""
    division: str = ""

    @property
    def is_set(self) -> bool:
        return bool(self.course_id and self.division)

    def as_params(self) -> dict[str, str]:
        return {"course_id": self.course_id, "division": self.division}

    def __str__(self) -> str:
        if not self.is_set:
            return "<unset>"
        return f"{self.course_id}/{self.division}"
