"""Context selection and transition detection.

Provides:
- ContextSelector: resolves (course, division) pairs from the assignment list
- classify_transition(): pure classification of a context change
- ContextTracker: owns the last fully-set context and the switch epoch
- activate_context(): applies a selection to a workspace, including the
  clear-previous-then-sync path on a switch
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Iterable

from coursedesk.api.errors import APIClientError
from coursedesk.exceptions import ContextError
from coursedesk.models.context import CourseAssignment, SessionContext

if TYPE_CHECKING:
    from coursedesk.workspace import Workspace

logger = logging.getLogger(__name__)


class ContextSelector:
    """Derives selectable courses and divisions from assignments. No side effects."""

    def __init__(self, assignments: Iterable[CourseAssignment]) -> None:
        self._assignments = list(assignments)

    @property
    def assignments(self) -> list[CourseAssignment]:
        return list(self._assignments)

    def courses(self) -> list[tuple[str, str]]:
        """Unique (course_id, course_name) pairs in first-seen order."""
        names: dict[str, str] = {}
        for assignment in self._assignments:
            names[assignment.course_id] = assignment.course_name
        return list(names.items())

    def course_name(self, course_id: str) -> str:
        return dict(self.courses()).get(course_id, "")

    def divisions_for(self, course_id: str) -> list[str]:
        if not course_id:
            return []
        return [a.division for a in self._assignments if a.course_id == course_id]

    def default_context(self) -> SessionContext:
        """First course and its first division, or the unset context."""
        courses = self.courses()
        if not courses:
            return SessionContext()
        return self.resolve(courses[0][0])

    def resolve(self, course_id: str, division: str | None = None) -> SessionContext:
        """Validate a selection and return its context.

        When *division* is None the course's first division is used.

        Raises:
            ContextError: If the course or division is not assigned.
        """
        divisions = self.divisions_for(course_id)
        if not divisions:
            raise ContextError(course_id)
        if division is None:
            division = divisions[0]
        elif division not in divisions:
            raise ContextError(course_id, division)
        return SessionContext(course_id=course_id, division=division)


class TransitionKind(str, enum.Enum):
    """How the active context changed between two observations."""

    NONE = "none"  # current context unset
    FIRST_ACTIVATION = "first_activation"
    UNCHANGED = "unchanged"
    SWITCH = "switch"


def classify_transition(
    previous: SessionContext, current: SessionContext
) -> TransitionKind:
    """Classify a context change. Pure function of its arguments."""
    if not current.is_set:
        return TransitionKind.NONE
    if not previous.is_set:
        return TransitionKind.FIRST_ACTIVATION
    if previous == current:
        return TransitionKind.UNCHANGED
    return TransitionKind.SWITCH


class ContextTracker:
    """Records the last fully-set context and counts switches.

    The epoch increases on every SWITCH. Requests remember the epoch they
    were issued under; a response arriving under a newer epoch belongs
    to an abandoned context.
    """

    def __init__(self) -> None:
        self.previous = SessionContext()
        self.epoch = 0

    def observe(self, current: SessionContext) -> TransitionKind:
        kind = classify_transition(self.previous, current)
        if kind is TransitionKind.SWITCH:
            self.epoch += 1
        if current.is_set:
            self.previous = current
        return kind


async def activate_context(ws: Workspace, current: SessionContext) -> TransitionKind:
    """Make *current* the active context of *ws* and reconcile its state.

    On a switch, all local materials and derived artifacts are reset
    before anything is awaited, the previous context is cleared
    server-side (best effort), then the new context's materials are
    fetched. First activation and re-activation only fetch.
    """
    previous = ws.tracker.previous
    kind = ws.tracker.observe(current)
    ws.context = current

    if kind is TransitionKind.SWITCH:
        ticket = ws.ticket()
        ws.reset_local_state()
        logger.info("Switched context %s -> %s", previous, current)
        await _clear_previous(ws, previous)
        if not ws.is_current(ticket):
            logger.debug("Skipping sync for abandoned context %s", current)
            return kind
        await ws.sync_materials()
    elif kind is not TransitionKind.NONE:
        await ws.sync_materials()
    return kind


async def _clear_previous(ws: Workspace, previous: SessionContext) -> None:
    try:
        await ws.client.clear_material(previous)
    except APIClientError as exc:
        logger.warning("Failed to clear previous context %s: %s", previous, exc)
