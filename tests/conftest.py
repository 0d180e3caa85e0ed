"""Shared test fixtures for CourseDesk.

Provides an in-memory fake backend served through httpx.MockTransport,
a recording notifier, and workspace fixtures wired to both.
"""

from __future__ import annotations

import asyncio
import json
import re
from collections import defaultdict, deque
from typing import Any

import httpx
import pytest
import pytest_asyncio

from coursedesk import ClientConfig, CourseAssignment, Workspace

ASSIGNMENTS = [
    CourseAssignment(course_id="CS101", course_name="Intro to Programming", division="A"),
    CourseAssignment(course_id="CS101", course_name="Intro to Programming", division="B"),
    CourseAssignment(course_id="MA201", course_name="Linear Algebra", division="C"),
]

SUMMARY_PAYLOAD = {
    "summary": ["A", "B"],
    "key_concepts": [{"concept": "X", "explanation": "Y"}],
    "discussion_prompts": ["Why?"],
}

PLAN_PAYLOAD = {
    "session_title": "Loops and Iteration",
    "blocks": [
        {
            "duration": "10 min",
            "type": "warmup",
            "title": "Recap",
            "activity": "Quick quiz on variables",
            "questions": ["What is a variable?"],
        },
        {
            "duration": "30 min",
            "type": "lecture",
            "title": "For loops",
            "activity": "Live coding",
            "questions": [],
        },
    ],
}

_FILENAME_RE = re.compile(rb'filename="([^"]+)"')


def _form_field(body: bytes, name: str) -> str:
    match = re.search(rb'name="' + name.encode() + rb'"\r\n\r\n([^\r]*)', body)
    return match.group(1).decode() if match else ""


class FakeBackend:
    """In-memory stand-in for the dashboard backend.

    Keeps a material store per (course_id, division), records every call,
    and supports injected failures, canned responses, and gates that hold
    a request until the test releases it.
    """

    def __init__(self) -> None:
        self.store: dict[tuple[str, str], dict[str, list[str]]] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.failures: dict[str, Any] = {}
        self.canned: dict[str, deque[Any]] = defaultdict(deque)
        self.gated: set[str] = set()
        self.gates: dict[str, list[asyncio.Event]] = defaultdict(list)
        self.summary = SUMMARY_PAYLOAD
        self.plan = PLAN_PAYLOAD
        self.answer = "Loops repeat a block of code."
        self.sent = 3

    # -- test controls --

    def seed(self, course_id: str, division: str, files=(), urls=()) -> None:
        self.store[(course_id, division)] = {"files": list(files), "urls": list(urls)}

    def materials(self, course_id: str, division: str) -> dict[str, list[str]]:
        return self.store.get((course_id, division), {"files": [], "urls": []})

    def fail(self, path: str, status: int = 500, body: Any = None) -> None:
        """Make every call to *path* return *status* with a JSON *body*."""
        self.failures[path] = (status, body)

    def disconnect(self, path: str) -> None:
        """Make every call to *path* raise a transport error."""
        self.failures[path] = httpx.ConnectError("connection refused")

    def heal(self, path: str) -> None:
        self.failures.pop(path, None)

    def count(self, path: str) -> int:
        return sum(1 for _, p, _ in self.calls if p == path)

    def paths(self) -> list[str]:
        return [p for _, p, _ in self.calls]

    def payloads(self, path: str) -> list[dict[str, Any]]:
        return [payload for _, p, payload in self.calls if p == path]

    async def wait_for_gates(self, path: str, n: int) -> None:
        while len(self.gates[path]) < n:
            await asyncio.sleep(0)

    # -- transport --

    async def handler(self, request: httpx.Request) -> httpx.Response:
        body = await request.aread()
        path = request.url.path
        if request.headers.get("content-type", "").startswith("application/json") and body:
            payload = json.loads(body)
        elif path == "/upload-material":
            payload = {
                "course_id": _form_field(body, "course_id"),
                "division": _form_field(body, "division"),
                "files": [m.decode() for m in _FILENAME_RE.findall(body)],
            }
        else:
            payload = dict(request.url.params)
        payload["_auth"] = request.headers.get("authorization", "")
        self.calls.append((request.method, path, payload))

        canned = self.canned[path].popleft() if self.canned[path] else None
        if path in self.gated:
            gate = asyncio.Event()
            self.gates[path].append(gate)
            await gate.wait()

        failure = self.failures.get(path)
        if isinstance(failure, Exception):
            raise failure
        if failure is not None:
            status, error_body = failure
            return httpx.Response(status, json=error_body if error_body is not None else {})
        if canned is not None:
            return httpx.Response(200, json=canned)
        return self._route(request.method, path, payload)

    def _route(self, method: str, path: str, payload: dict[str, Any]) -> httpx.Response:
        key = (payload.get("course_id", ""), payload.get("division", ""))
        if path == "/":
            return httpx.Response(200, json={"status": "ok"})
        if path == "/list-materials":
            return httpx.Response(200, json=self.materials(*key))
        if path == "/upload-material":
            entry = self.store.setdefault(key, {"files": [], "urls": []})
            entry["files"].extend(payload["files"])
            return httpx.Response(200, json={"status": "uploaded"})
        if path == "/add-url":
            entry = self.store.setdefault(key, {"files": [], "urls": []})
            entry["urls"].append(payload["url"])
            return httpx.Response(200, json={"status": "added"})
        if path == "/remove-material" and method == "DELETE":
            entry = self.store.get(key, {"files": [], "urls": []})
            source = payload["source"]
            for kind in ("files", "urls"):
                if source in entry[kind]:
                    entry[kind].remove(source)
                    break
            return httpx.Response(200, json={"status": "removed"})
        if path == "/clear-material":
            self.store.pop(key, None)
            return httpx.Response(200, json={"status": "cleared"})
        if path == "/clear-all":
            self.store.clear()
            return httpx.Response(200, json={"status": "cleared"})
        if path == "/generate-summary":
            return httpx.Response(200, json=self.summary)
        if path == "/generate-session-plan":
            return httpx.Response(200, json=self.plan)
        if path == "/chat":
            return httpx.Response(200, json={"answer": self.answer})
        if path == "/email-material":
            return httpx.Response(200, json={"sent": self.sent})
        return httpx.Response(404, json={"detail": "Not Found"})


class RecordingNotifier:
    """Collects (level, message) notices."""

    def __init__(self) -> None:
        self.notices: list[tuple[str, str]] = []

    def notify(self, message: str, level: str = "info") -> None:
        self.notices.append((level, message))

    def errors(self) -> list[str]:
        return [m for level, m in self.notices if level == "error"]


def make_config(**overrides: Any) -> ClientConfig:
    values: dict[str, Any] = {
        "base_url": "http://test-api",
        "token": "test-token",
        "sync_retries": 1,
        "retry_wait": 0,
        "mail_dismiss_delay": 0.0,
    }
    values.update(overrides)
    return ClientConfig(**values)


def make_workspace(
    backend: FakeBackend,
    notifier: RecordingNotifier | None = None,
    assignments=ASSIGNMENTS,
    **config: Any,
) -> Workspace:
    """Create a Workspace talking to *backend* through a mock transport."""
    return Workspace.open(
        make_config(**config),
        assignments,
        notifier=notifier or RecordingNotifier(),
        transport=httpx.MockTransport(backend.handler),
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture
async def ws(backend: FakeBackend, notifier: RecordingNotifier):
    """Workspace with no context selected yet."""
    workspace = make_workspace(backend, notifier)
    yield workspace
    await workspace.close()


@pytest_asyncio.fixture
async def active_ws(backend: FakeBackend, notifier: RecordingNotifier):
    """Workspace on CS101/A holding one uploaded file."""
    backend.seed("CS101", "A", files=["slides.pdf"])
    workspace = make_workspace(backend, notifier)
    await workspace.select("CS101", "A")
    backend.calls.clear()
    notifier.notices.clear()
    yield workspace
    await workspace.close()
