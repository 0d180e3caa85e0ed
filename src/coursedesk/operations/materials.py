"""Material sync and mutation operations.

Each mutation mirrors exactly one authoritative server call. The local
MaterialSet is only ever replaced wholesale by a sync; removals are the
one optimistic local edit, reconciled by the next sync.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from coursedesk.api.errors import APIClientError, APIConnectionError, APIResponseError
from coursedesk.exceptions import NoActiveContextError

if TYPE_CHECKING:
    from coursedesk.api.client import UploadSource
    from coursedesk.workspace import Workspace

logger = logging.getLogger(__name__)


def require_context(ws: Workspace) -> None:
    if not ws.context.is_set:
        raise NoActiveContextError()


def failure_message(exc: APIClientError, fallback: str, connection: str) -> str:
    """Server-supplied detail if any, else the generic fallback for the failure kind."""
    if isinstance(exc, APIConnectionError):
        return connection
    if isinstance(exc, APIResponseError) and exc.detail:
        return exc.detail
    return fallback


async def sync_materials(ws: Workspace) -> bool:
    """Replace the local MaterialSet with the server's copy.

    Background reconciliation: failures are logged, never raised or
    notified, and leave the local set untouched. When several syncs
    overlap, whichever response resolves last wins.

    Returns:
        True if the local set was replaced.
    """
    if not ws.context.is_set:
        return False
    context, ticket = ws.context, ws.ticket()
    try:
        materials = await ws.client.list_materials(context)
    except APIClientError as exc:
        logger.warning("Material sync failed for %s: %s", context, exc)
        return False
    if not ws.is_current(ticket):
        logger.debug("Discarding material list for abandoned context %s", context)
        return False
    ws.materials = materials
    return True


async def upload(ws: Workspace, sources: Iterable[UploadSource]) -> bool:
    """Upload files, then re-fetch the authoritative list.

    Nothing is added locally before the sync: the server may store
    files under names that differ from the client-side ones.
    """
    require_context(ws)
    sources = list(sources)
    if not sources:
        return False
    context, ticket = ws.context, ws.ticket()
    ws.busy.uploading = True
    try:
        await ws.client.upload_material(context, sources)
        if ws.is_current(ticket):
            await sync_materials(ws)
    except APIClientError as exc:
        ws.fail(
            "upload",
            failure_message(exc, "Upload failed", "Connection error during upload"),
            exc,
        )
        return False
    finally:
        ws.busy.uploading = False

    ws.notify("Files uploaded successfully!", "success")
    logger.info("Uploaded %d file(s) to %s", len(sources), context)
    return True


async def add_url(ws: Workspace, url: str | None = None) -> bool:
    """Add a reference URL; clears the URL input on success only.

    Args:
        url: URL to add. Defaults to the workspace's ``url_input``.
    """
    require_context(ws)
    url = (url if url is not None else ws.url_input).strip()
    if not url:
        return False
    context, ticket = ws.context, ws.ticket()
    try:
        await ws.client.add_url(context, url)
    except APIClientError as exc:
        ws.fail("add_url", failure_message(exc, "Failed to add URL", "Connection error"), exc)
        return False

    if ws.is_current(ticket):
        await sync_materials(ws)
        ws.url_input = ""
    ws.notify("URL added successfully!", "success")
    return True


async def remove_file(ws: Workspace, index: int) -> bool:
    """Optimistically drop the file at *index*, then delete it server-side by name."""
    require_context(ws)
    ws.materials, filename = ws.materials.without_file(index)
    return await _remove(ws, filename, "Material removed")


async def remove_url(ws: Workspace, index: int) -> bool:
    """Optimistically drop the URL at *index*, then delete it server-side by value."""
    require_context(ws)
    ws.materials, url = ws.materials.without_url(index)
    return await _remove(ws, url, "Reference removed")


async def _remove(ws: Workspace, source: str, success_message: str) -> bool:
    # The delete key is the value, not the index: indices shift between syncs.
    context, ticket = ws.context, ws.ticket()
    now_empty = ws.materials.is_empty
    error = None
    try:
        await ws.client.remove_material(context, source)
    except APIClientError as exc:
        error = failure_message(exc, "Failed to remove from server", "Connection error")
        ws.fail("remove", error, exc)
    else:
        ws.notify(success_message, "success")

    # An empty material set invalidates every derived artifact.
    if now_empty and ws.is_current(ticket):
        await clear_all(ws)
        # The reset wipes the error slots; the failed delete still needs reporting.
        if error is not None and ws.is_current(ticket):
            ws.errors["remove"] = error
    return error is None


async def clear_all(ws: Workspace) -> bool:
    """Purge the active context server-side and reset all local state on success."""
    require_context(ws)
    context, ticket = ws.context, ws.ticket()
    try:
        await ws.client.clear_material(context)
    except APIClientError as exc:
        ws.fail(
            "clear",
            failure_message(exc, "Failed to clear session", "Connection error"),
            exc,
        )
        return False
    if ws.is_current(ticket):
        ws.reset_local_state()
    ws.notify("Session cleared - ready for new upload", "success")
    logger.info("Cleared materials for %s", context)
    return True
