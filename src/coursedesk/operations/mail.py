"""Mail dispatch orchestration.

Sending with ``include_summary`` and no summary on hand generates one
first and blocks on it: the mail call never goes out with
``include_summary`` set and a null summary.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable

from coursedesk.api.errors import APIClientError, APIConnectionError
from coursedesk.exceptions import MailValidationError
from coursedesk.models.mail import MailRequest, MailStatus
from coursedesk.operations.generation import generate_summary
from coursedesk.operations.materials import require_context

if TYPE_CHECKING:
    from coursedesk.models.artifacts import SummaryArtifact
    from coursedesk.workspace import Workspace

logger = logging.getLogger(__name__)

StatusCallback = Callable[[MailStatus], None]


def build_payload(
    ws: Workspace, request: MailRequest, summary: SummaryArtifact | None
) -> dict[str, Any]:
    """Assemble the email-material request body from the current workspace."""
    return {
        "course_id": ws.context.course_id,
        "divisions": sorted(request.divisions),
        "subject": request.subject,
        "message": request.message,
        "summary": summary.model_dump() if request.include_summary and summary else None,
        "filenames": list(ws.materials.files),
        "urls": list(ws.materials.urls),
    }


async def send_mail(
    ws: Workspace,
    request: MailRequest | None = None,
    *,
    on_status: StatusCallback | None = None,
) -> int | None:
    """Send the session material notification.

    Args:
        request: What to send. Defaults to the workspace's mail composer form.
        on_status: Called with every status change, including the
            intermediate "generating" status.

    Returns:
        Number of recipients notified, or None if nothing was sent.
    """
    composer = ws.mail
    request = request if request is not None else composer.request

    def set_status(status: MailStatus | None) -> None:
        composer.status = status
        if status is not None and on_status is not None:
            on_status(status)

    try:
        request.ensure_valid()
    except MailValidationError as exc:
        set_status(MailStatus("error", str(exc)))
        return None
    require_context(ws)

    summary = ws.summary
    if request.include_summary and summary is None:
        composer.sending = True
        set_status(MailStatus("info", "Generating AI summary before sending..."))
        summary = await generate_summary(ws)
        if summary is None:
            set_status(
                MailStatus(
                    "error",
                    "Failed to generate summary. Cannot proceed with summary inclusion.",
                )
            )
            composer.sending = False
            return None

    composer.sending = True
    set_status(None)
    try:
        sent = await ws.client.email_material(build_payload(ws, request, summary))
    except APIClientError as exc:
        logger.warning("Mail dispatch failed: %s", exc)
        if isinstance(exc, APIConnectionError):
            set_status(MailStatus("error", "Error connecting to server."))
            ws.notify("Connection error", "error")
        else:
            set_status(MailStatus("error", "Failed to send emails."))
            ws.notify("Failed to send emails", "error")
        return None
    finally:
        composer.sending = False

    set_status(MailStatus("success", f"Successfully sent {sent} notification emails!"))
    ws.notify(f"Sent {sent} emails!", "success")
    logger.info(
        "Mailed %s divisions %s (%d recipients)",
        ws.context.course_id,
        sorted(request.divisions),
        sent,
    )
    schedule_dismiss(ws)
    return sent


def schedule_dismiss(ws: Workspace) -> asyncio.TimerHandle:
    """Close the mail composer after the configured delay."""
    loop = asyncio.get_running_loop()
    if ws.dismiss_handle is not None:
        ws.dismiss_handle.cancel()
    ws.dismiss_handle = loop.call_later(ws.mail_dismiss_delay, ws.mail.close)
    return ws.dismiss_handle
