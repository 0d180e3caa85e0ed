"""Data models for CourseDesk."""

from coursedesk.models.artifacts import (
    ChatTurn,
    KeyConcept,
    PlanBlock,
    SessionPlan,
    SummaryArtifact,
)
from coursedesk.models.config import ClientConfig
from coursedesk.models.context import CourseAssignment, SessionContext
from coursedesk.models.mail import MailComposer, MailRequest, MailStatus
from coursedesk.models.materials import MaterialSet

__all__ = [
    "ChatTurn",
    "ClientConfig",
    "CourseAssignment",
    "KeyConcept",
    "MailComposer",
    "MailRequest",
    "MailStatus",
    "MaterialSet",
    "PlanBlock",
    "SessionContext",
    "SessionPlan",
    "SummaryArtifact",
]
