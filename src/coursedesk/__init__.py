"""CourseDesk: faculty session material workspace client.

Tracks the active (course, division) context, keeps its materials in sync
with the backend, and drives AI summary, session plan, chat, and mail
generation on top of them.
"""

from coursedesk._version import __version__

# Core entry point
from coursedesk.workspace import BusyFlags, Workspace

# Backend client
from coursedesk.api import (
    APIAuthError,
    APIClientError,
    APIConnectionError,
    APIResponseError,
    CourseDeskClient,
)

# Models
from coursedesk.models import (
    ChatTurn,
    ClientConfig,
    CourseAssignment,
    KeyConcept,
    MailComposer,
    MailRequest,
    MailStatus,
    MaterialSet,
    PlanBlock,
    SessionContext,
    SessionPlan,
    SummaryArtifact,
)

# Context state machine
from coursedesk.operations.context import (
    ContextSelector,
    ContextTracker,
    TransitionKind,
    classify_transition,
)

# Protocols
from coursedesk.protocols import LoggingNotifier, Notifier

# Rendering
from coursedesk.formatting import render_plan_markdown, render_summary_markdown

# Exceptions
from coursedesk.exceptions import (
    ConfigError,
    ContextError,
    CourseDeskError,
    MailValidationError,
    NoActiveContextError,
)

__all__ = [
    "__version__",
    "Workspace",
    "BusyFlags",
    "CourseDeskClient",
    "APIClientError",
    "APIResponseError",
    "APIAuthError",
    "APIConnectionError",
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
    "ContextSelector",
    "ContextTracker",
    "TransitionKind",
    "classify_transition",
    "Notifier",
    "LoggingNotifier",
    "render_plan_markdown",
    "render_summary_markdown",
    "CourseDeskError",
    "ConfigError",
    "ContextError",
    "MailValidationError",
    "NoActiveContextError",
]
