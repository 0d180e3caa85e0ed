"""State machine operations for the session material workspace.

Each operation is a plain coroutine over a Workspace; the Workspace class
exposes them as methods.
"""

from coursedesk.operations.context import (
    ContextSelector,
    ContextTracker,
    TransitionKind,
    activate_context,
    classify_transition,
)
from coursedesk.operations.generation import generate_plan, generate_summary, send_chat
from coursedesk.operations.mail import build_payload, send_mail
from coursedesk.operations.materials import (
    add_url,
    clear_all,
    remove_file,
    remove_url,
    sync_materials,
    upload,
)

__all__ = [
    "ContextSelector",
    "ContextTracker",
    "TransitionKind",
    "activate_context",
    "classify_transition",
    "sync_materials",
    "upload",
    "add_url",
    "remove_file",
    "remove_url",
    "clear_all",
    "generate_summary",
    "generate_plan",
    "send_chat",
    "build_payload",
    "send_mail",
]
