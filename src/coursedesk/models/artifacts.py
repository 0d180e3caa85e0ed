"""Derived artifact models.

Artifacts are computed by the backend from a context's materials:
- SummaryArtifact: AI summary with key concepts and discussion prompts
- SessionPlan: timed activity blocks, editable locally after generation
- ChatTurn: one entry of the chat transcript
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel

PlanField = Literal["duration", "type", "title", "activity"]


class KeyConcept(BaseModel):
    concept: str
    explanation: str = ""


class SummaryArtifact(BaseModel):
    """AI-generated summary of the current materials.

    ``summary`` is either a list of points or a single text blob,
    depending on what the backend returns.
    """

    summary: Union[list[str], str] = []
    key_concepts: list[KeyConcept] = []
    discussion_prompts: list[str] = []

    @property
    def points(self) -> list[str]:
        if isinstance(self.summary, str):
            return [self.summary] if self.summary else []
        return list(self.summary)


class PlanBlock(BaseModel):
    """One timed block of a session plan."""

    duration: Union[str, int] = ""
    type: str = ""
    title: str = ""
    activity: str = ""
    questions: list[str] = []


class SessionPlan(BaseModel):
    """AI-generated session plan.

    Edits are local only and produce new instances, so a plan held
    elsewhere (e.g. a rendered export) is never mutated underneath.
    """

    session_title: str = ""
    blocks: list[PlanBlock] = []

    def with_title(self, title: str) -> SessionPlan:
        return self.model_copy(update={"session_title": title})

    def with_block_field(self, index: int, field: PlanField, value: str) -> SessionPlan:
        """Return a copy with one field of block *index* replaced."""
        blocks = list(self.blocks)
        blocks[index] = blocks[index].model_copy(update={field: value})
        return self.model_copy(update={"blocks": blocks})

    def with_question(self, block_index: int, question_index: int, value: str) -> SessionPlan:
        """Return a copy with one discussion question of a block replaced."""
        blocks = list(self.blocks)
        questions = list(blocks[block_index].questions)
        questions[question_index] = value
        blocks[block_index] = blocks[block_index].model_copy(update={"questions": questions})
        return self.model_copy(update={"blocks": blocks})


class ChatTurn(BaseModel):
    """A single chat transcript entry.

    ``error`` turns are local markers for failed replies and are never
    sent back to the backend as history.
    """

    role: Literal["faculty", "ai", "error"]
    content: str
