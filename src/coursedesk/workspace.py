"""Workspace -- the session material entry point for CourseDesk.

A Workspace owns everything scoped to the active (course, division)
context: its materials, the AI summary, the session plan, the chat
transcript, and the mail form. Switching context resets all of it and
clears the previous context server-side before the new context's
materials are fetched.

Usage::

    async with Workspace.open(ClientConfig.from_env(), assignments) as ws:
        await ws.select("CS101", "A")
        await ws.upload(["slides.pdf"])
        summary = await ws.generate_summary()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

import httpx

from coursedesk.api.client import CourseDeskClient
from coursedesk.api.errors import APIAuthError, APIClientError
from coursedesk.models.artifacts import ChatTurn, PlanField, SessionPlan, SummaryArtifact
from coursedesk.models.context import CourseAssignment, SessionContext
from coursedesk.models.mail import MailComposer, MailRequest
from coursedesk.models.materials import MaterialSet
from coursedesk.operations import context as context_ops
from coursedesk.operations import generation as generation_ops
from coursedesk.operations import mail as mail_ops
from coursedesk.operations import materials as material_ops
from coursedesk.operations.context import ContextSelector, ContextTracker, TransitionKind
from coursedesk.protocols import LoggingNotifier, NoticeLevel, Notifier

if TYPE_CHECKING:
    from coursedesk.api.client import UploadSource
    from coursedesk.models.config import ClientConfig
    from coursedesk.operations.mail import StatusCallback

logger = logging.getLogger(__name__)


@dataclass
class BusyFlags:
    """Per-operation in-flight flags."""

    uploading: bool = False
    generating_summary: bool = False
    generating_plan: bool = False
    sending_chat: bool = False

    @property
    def any(self) -> bool:
        return (
            self.uploading
            or self.generating_summary
            or self.generating_plan
            or self.sending_chat
        )


class Workspace:
    """Session material state machine for one faculty member.

    Not thread-safe: all methods are coroutines meant to run on a single
    event loop. Operations may overlap; each reconciles independently.
    """

    def __init__(
        self,
        client: CourseDeskClient,
        assignments: Iterable[CourseAssignment] = (),
        *,
        notifier: Notifier | None = None,
        mail_dismiss_delay: float | None = None,
    ) -> None:
        self._client = client
        self._notifier = notifier or LoggingNotifier()
        self._closed = False
        self.selector = ContextSelector(assignments)
        self.tracker = ContextTracker()
        self.mail_dismiss_delay = (
            mail_dismiss_delay
            if mail_dismiss_delay is not None
            else client.config.mail_dismiss_delay
        )
        self.dismiss_handle: asyncio.TimerHandle | None = None

        self.context = SessionContext()
        self.materials = MaterialSet()
        self.summary: SummaryArtifact | None = None
        self.plan: SessionPlan | None = None
        self.editing_plan = False
        self.chat: list[ChatTurn] = []
        self.url_input = ""
        self.chat_input = ""
        self.busy = BusyFlags()
        self.errors: dict[str, str] = {}
        self.mail = MailComposer()

    @classmethod
    def open(
        cls,
        config: ClientConfig,
        assignments: Iterable[CourseAssignment] = (),
        *,
        notifier: Notifier | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Workspace:
        """Create a Workspace with its own backend client.

        Args:
            config: Backend connection settings.
            assignments: The faculty member's (course, division) assignments.
            notifier: Where user-facing notices go. Defaults to logging.
            transport: Optional httpx transport, e.g. for tests.
        """
        client = CourseDeskClient(config, transport=transport)
        return cls(client, assignments, notifier=notifier)

    @property
    def client(self) -> CourseDeskClient:
        return self._client

    # ------------------------------------------------------------------
    # State helpers used by the operations
    # ------------------------------------------------------------------

    def ticket(self) -> int:
        """Identity of the current context for tagging in-flight requests."""
        return self.tracker.epoch

    def is_current(self, ticket: int) -> bool:
        return ticket == self.tracker.epoch

    def reset_local_state(self) -> None:
        """Empty the materials and every derived artifact."""
        self.materials = MaterialSet()
        self.summary = None
        self.plan = None
        self.editing_plan = False
        self.chat = []
        self.errors.clear()

    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        self._notifier.notify(message, level)

    def fail(self, operation: str, message: str, exc: APIClientError) -> None:
        """Record and surface a user-initiated operation's failure."""
        logger.warning("%s failed for %s: %s", operation, self.context, exc)
        self.errors[operation] = message
        self.notify(message, "error")

    # ------------------------------------------------------------------
    # Context selection
    # ------------------------------------------------------------------

    async def select(self, course_id: str, division: str | None = None) -> TransitionKind:
        """Select a course (and division; defaults to the course's first).

        Raises:
            ContextError: If the pair is not one of the assignments.
        """
        context = self.selector.resolve(course_id, division)
        if course_id != self.context.course_id:
            self.mail.follow_course(self.selector.course_name(course_id))
        return await context_ops.activate_context(self, context)

    async def select_course(self, course_id: str) -> TransitionKind:
        """Switch course; the division falls back to the course's first."""
        return await self.select(course_id)

    async def select_division(self, division: str) -> TransitionKind:
        return await self.select(self.context.course_id, division)

    async def select_default(self) -> TransitionKind:
        """Select the first assigned course and division, if any."""
        context = self.selector.default_context()
        if not context.is_set:
            return TransitionKind.NONE
        return await self.select(context.course_id, context.division)

    async def refresh(self) -> TransitionKind:
        """Re-enter the current context: fetch materials without clearing."""
        return await context_ops.activate_context(self, self.context)

    @property
    def course_name(self) -> str:
        return self.selector.course_name(self.context.course_id)

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------

    async def sync_materials(self) -> bool:
        return await material_ops.sync_materials(self)

    async def upload(self, sources: Iterable[UploadSource]) -> bool:
        return await material_ops.upload(self, sources)

    async def add_url(self, url: str | None = None) -> bool:
        return await material_ops.add_url(self, url)

    async def remove_file(self, index: int) -> bool:
        return await material_ops.remove_file(self, index)

    async def remove_url(self, index: int) -> bool:
        return await material_ops.remove_url(self, index)

    async def clear_all(self) -> bool:
        return await material_ops.clear_all(self)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate_summary(self) -> SummaryArtifact | None:
        return await generation_ops.generate_summary(self)

    async def generate_plan(self) -> SessionPlan | None:
        return await generation_ops.generate_plan(self)

    async def send_chat(self, text: str | None = None) -> str | None:
        return await generation_ops.send_chat(self, text)

    # Local-only plan edits. The edit toggle only changes mode; there is
    # no persistence call behind "save".

    def toggle_plan_editing(self) -> bool:
        if self.plan is not None:
            self.editing_plan = not self.editing_plan
        return self.editing_plan

    def set_plan_title(self, title: str) -> None:
        self.plan = self._require_plan().with_title(title)

    def update_plan_block(self, index: int, field: PlanField, value: str) -> None:
        self.plan = self._require_plan().with_block_field(index, field, value)

    def update_plan_question(self, block_index: int, question_index: int, value: str) -> None:
        self.plan = self._require_plan().with_question(block_index, question_index, value)

    def _require_plan(self) -> SessionPlan:
        if self.plan is None:
            raise ValueError("No session plan to edit. Generate one first.")
        return self.plan

    # ------------------------------------------------------------------
    # Mail
    # ------------------------------------------------------------------

    async def send_mail(
        self,
        request: MailRequest | None = None,
        *,
        on_status: StatusCallback | None = None,
    ) -> int | None:
        return await mail_ops.send_mail(self, request, on_status=on_status)

    # ------------------------------------------------------------------
    # Account and lifecycle
    # ------------------------------------------------------------------

    async def verify(self) -> bool:
        """Check the token. Returns False only when the backend rejects it."""
        try:
            return await self._client.verify_token()
        except APIAuthError:
            return False
        except APIClientError as exc:
            logger.warning("Token verification failed: %s", exc)
            return True

    async def logout(self) -> None:
        """Clear every context server-side (best effort), then close."""
        try:
            await self._client.clear_all()
        except APIClientError as exc:
            logger.warning("Failed to clear materials on logout: %s", exc)
        self.reset_local_state()
        self.context = SessionContext()
        # Anything still in flight belongs to the old login.
        self.tracker.epoch += 1
        self.tracker.previous = SessionContext()
        await self.close()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self.dismiss_handle is not None:
            self.dismiss_handle.cancel()
            self.dismiss_handle = None
        await self._client.aclose()

    async def __aenter__(self) -> Workspace:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    def __repr__(self) -> str:
        return (
            f"Workspace(context={self.context}, "
            f"files={len(self.materials.files)}, urls={len(self.materials.urls)})"
        )
