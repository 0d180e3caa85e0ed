"""Generation pipeline: AI summary, session plan, and chat.

The three generators are independent; each has its own busy flag and
error slot on the workspace. A successful call replaces its artifact
wholesale; a failed call leaves the previous artifact in place.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from coursedesk.api.errors import APIClientError
from coursedesk.models.artifacts import ChatTurn, SessionPlan, SummaryArtifact
from coursedesk.operations.materials import require_context, failure_message

if TYPE_CHECKING:
    from coursedesk.workspace import Workspace

logger = logging.getLogger(__name__)

CHAT_FAILURE_TEXT = "No reply received. Check your connection and ask again."


async def generate_summary(ws: Workspace) -> SummaryArtifact | None:
    """Generate the AI summary for the active context.

    Returns the artifact directly as well as storing it, so callers such
    as mail dispatch can use it without reading workspace state back.

    Returns:
        The new SummaryArtifact, or None on failure or if the context was
        switched while the request was in flight.
    """
    require_context(ws)
    context, ticket = ws.context, ws.ticket()
    ws.busy.generating_summary = True
    try:
        summary = await ws.client.generate_summary(context)
    except APIClientError as exc:
        ws.fail(
            "summary",
            failure_message(
                exc,
                "Summary generation failed",
                "Connection error during summary generation",
            ),
            exc,
        )
        return None
    finally:
        ws.busy.generating_summary = False

    if not ws.is_current(ticket):
        logger.debug("Discarding summary for abandoned context %s", context)
        return None
    ws.summary = summary
    ws.errors.pop("summary", None)
    ws.notify("Summary generated!", "success")
    return summary


async def generate_plan(ws: Workspace) -> SessionPlan | None:
    """Generate a session plan, discarding any local edits to the previous one."""
    require_context(ws)
    ws.editing_plan = False
    context, ticket = ws.context, ws.ticket()
    ws.busy.generating_plan = True
    try:
        plan = await ws.client.generate_session_plan(context)
    except APIClientError as exc:
        ws.fail(
            "plan",
            failure_message(
                exc,
                "Plan generation failed",
                "Connection error during plan generation",
            ),
            exc,
        )
        return None
    finally:
        ws.busy.generating_plan = False

    if not ws.is_current(ticket):
        logger.debug("Discarding session plan for abandoned context %s", context)
        return None
    ws.plan = plan
    ws.errors.pop("plan", None)
    ws.notify("Session plan ready!", "success")
    return plan


async def send_chat(ws: Workspace, text: str | None = None) -> str | None:
    """Ask a question about the current materials.

    The faculty turn is appended before the request. On success one ``ai``
    turn follows it; on failure an ``error`` turn does, so every question
    gets a visible outcome.

    Args:
        text: Question to ask. Defaults to the workspace's ``chat_input``.

    Returns:
        The answer text, or None if nothing was asked or the call failed.
    """
    require_context(ws)
    text = (text if text is not None else ws.chat_input).strip()
    if not text:
        return None

    context, ticket = ws.context, ws.ticket()
    history = [
        turn.model_dump() for turn in ws.chat if turn.role != "error"
    ]
    ws.chat.append(ChatTurn(role="faculty", content=text))
    ws.chat_input = ""
    ws.busy.sending_chat = True
    try:
        answer = await ws.client.chat(context, text, history)
    except APIClientError as exc:
        logger.warning("Chat failed for %s: %s", context, exc)
        if ws.is_current(ticket):
            message = failure_message(exc, CHAT_FAILURE_TEXT, CHAT_FAILURE_TEXT)
            ws.chat.append(ChatTurn(role="error", content=message))
            ws.errors["chat"] = message
        return None
    finally:
        ws.busy.sending_chat = False

    if not ws.is_current(ticket):
        logger.debug("Discarding chat answer for abandoned context %s", context)
        return None
    ws.chat.append(ChatTurn(role="ai", content=answer))
    ws.errors.pop("chat", None)
    return answer
