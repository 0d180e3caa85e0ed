"""Async httpx client for the CourseDesk backend with tenacity retry.

Every call carries the bearer token. Non-2xx responses are turned into
APIResponseError (APIAuthError for 401/403) carrying the server's
``detail``/``message`` field when present; transport failures become
APIConnectionError.

Only idempotent reads (list-materials, token verification) are retried.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar, Union

import httpx
import tenacity
from pydantic import ValidationError

from coursedesk.api.errors import (
    APIAuthError,
    APIConnectionError,
    APIResponseError,
)
from coursedesk.models.artifacts import SessionPlan, SummaryArtifact
from coursedesk.models.config import ClientConfig
from coursedesk.models.context import SessionContext
from coursedesk.models.materials import MaterialSet

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {502, 503, 504}
_AUTH_ERROR_STATUS_CODES = {401, 403}

# A path on disk, or an explicit (filename, content) pair.
UploadSource = Union[str, Path, tuple[str, bytes]]

T = TypeVar("T")


def _is_retryable(exc: BaseException) -> bool:
    """Check if an exception is retryable.

    Retryable: connection errors, 502, 503, 504.
    Not retryable: 401, 403, other client and server errors.
    """
    if isinstance(exc, APIConnectionError):
        return True
    if isinstance(exc, APIAuthError):
        return False
    if isinstance(exc, APIResponseError):
        return exc.status_code in _RETRYABLE_STATUS_CODES
    return False


def _extract_detail(response: httpx.Response) -> str | None:
    """Pull the human-readable message out of an error body, if any."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    detail = data.get("detail") or data.get("message")
    if isinstance(detail, str):
        return detail
    if detail:
        # FastAPI validation errors come back as a list of dicts.
        return str(detail)
    return None


def _load_upload(source: UploadSource) -> tuple[str, bytes, str]:
    if isinstance(source, tuple):
        name, content = source
    else:
        path = Path(source)
        name, content = path.name, path.read_bytes()
    mimetype = mimetypes.guess_type(name)[0] or "application/octet-stream"
    return name, content, mimetype


class CourseDeskClient:
    """Async client for the faculty dashboard backend.

    Usage::

        async with CourseDeskClient(config) as client:
            materials = await client.list_materials(SessionContext("CS101", "A"))
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Connection settings (base URL, token, timeout, retries).
            transport: Optional httpx transport, e.g. httpx.MockTransport
                in tests.
        """
        self._config = config
        kwargs: dict[str, Any] = {
            "base_url": config.base_url,
            "headers": {"Authorization": f"Bearer {config.token}"},
        }
        if config.timeout is not None:
            kwargs["timeout"] = config.timeout
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._config

    # ------------------------------------------------------------------
    # Transport helpers
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Execute a single request (no retry) and map failures to API errors.

        Raises:
            APIAuthError: On 401/403.
            APIResponseError: On any other non-2xx status.
            APIConnectionError: On transport failure.
        """
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise APIConnectionError(f"Connection error: {exc}") from exc

        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise APIAuthError(response.status_code, _extract_detail(response))
        if not response.is_success:
            raise APIResponseError(response.status_code, _extract_detail(response))
        return response

    async def _read(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Execute an idempotent request with retry on transient failures.

        Uses tenacity.AsyncRetrying programmatically (not as decorator) so
        that the attempt count comes from the per-instance config.
        """
        retryer = tenacity.AsyncRetrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=tenacity.wait_exponential(multiplier=self._config.retry_wait, max=10),
            stop=tenacity.stop_after_attempt(max(1, self._config.sync_retries)),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retryer(self._request, method, path, **kwargs)

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise APIResponseError(response.status_code, "Response body is not JSON") from exc
        if not isinstance(data, dict):
            raise APIResponseError(response.status_code, f"Unexpected response: {data!r}")
        return data

    def _decode(self, response: httpx.Response, parse: Callable[[dict[str, Any]], T]) -> T:
        """Parse a JSON object body, mapping a shape mismatch to APIResponseError."""
        data = self._json(response)
        try:
            return parse(data)
        except (ValidationError, TypeError, ValueError) as exc:
            raise APIResponseError(response.status_code, "Unexpected response shape") from exc

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------

    async def list_materials(self, context: SessionContext) -> MaterialSet:
        """Fetch the authoritative MaterialSet for *context*."""
        response = await self._read("GET", "/list-materials", params=context.as_params())
        return self._decode(response, MaterialSet.from_response)

    async def upload_material(
        self, context: SessionContext, sources: Iterable[UploadSource]
    ) -> None:
        """Post files as a multipart payload with repeated ``files`` fields."""
        files = [("files", _load_upload(source)) for source in sources]
        await self._request(
            "POST", "/upload-material", data=context.as_params(), files=files
        )

    async def add_url(self, context: SessionContext, url: str) -> None:
        await self._request(
            "POST", "/add-url", json={"url": url, **context.as_params()}
        )

    async def remove_material(self, context: SessionContext, source: str) -> None:
        """Delete one file or URL, identified by its value."""
        await self._request(
            "DELETE",
            "/remove-material",
            params={**context.as_params(), "source": source},
        )

    async def clear_material(self, context: SessionContext) -> None:
        """Purge materials and derived artifacts for *context* server-side."""
        await self._request("POST", "/clear-material", json=context.as_params())

    async def clear_all(self) -> None:
        """Purge materials for every context owned by the token holder."""
        await self._request("POST", "/clear-all")

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate_summary(self, context: SessionContext) -> SummaryArtifact:
        response = await self._request(
            "POST", "/generate-summary", json=context.as_params()
        )
        return self._decode(response, SummaryArtifact.model_validate)

    async def generate_session_plan(self, context: SessionContext) -> SessionPlan:
        response = await self._request(
            "POST", "/generate-session-plan", json=context.as_params()
        )
        return self._decode(response, SessionPlan.model_validate)

    async def chat(
        self,
        context: SessionContext,
        question: str,
        history: list[dict[str, str]],
    ) -> str:
        """Ask one question about the materials; returns the answer text."""
        response = await self._request(
            "POST",
            "/chat",
            json={"question": question, **context.as_params(), "history": history},
        )
        return self._decode(response, lambda data: str(data.get("answer") or ""))

    # ------------------------------------------------------------------
    # Mail and account
    # ------------------------------------------------------------------

    async def email_material(self, payload: dict[str, Any]) -> int:
        """Dispatch the notification mail; returns the number of recipients."""
        response = await self._request("POST", "/email-material", json=payload)
        return self._decode(response, lambda data: int(data.get("sent") or 0))

    async def verify_token(self) -> bool:
        """Return False if the backend rejects the token with 401.

        Raises:
            APIClientError: On any other failure.
        """
        try:
            await self._read("GET", "/")
        except APIAuthError as exc:
            if exc.status_code == 401:
                return False
            raise
        return True

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

    async def __aenter__(self) -> CourseDeskClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()


__all__ = ["CourseDeskClient", "UploadSource"]
