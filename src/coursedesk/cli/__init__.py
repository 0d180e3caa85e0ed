"""CourseDesk CLI -- terminal interface for the session material workspace.

This module is NEVER imported from coursedesk/__init__.py.
It is only loaded via the ``coursedesk`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, TypeVar

try:
    import click
    from dotenv import load_dotenv
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install coursedesk[cli]"
    ) from None

from pydantic import TypeAdapter

from coursedesk.cli.formatting import RichNotifier, format_error, get_console

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from rich.console import Console

    from coursedesk.models.context import CourseAssignment
    from coursedesk.workspace import Workspace

T = TypeVar("T")


@click.group()
@click.option("--api-url", default=None, envvar="COURSEDESK_API_URL", help="Backend base URL.")
@click.option("--token", default=None, envvar="COURSEDESK_TOKEN", help="Bearer token from login.")
@click.option(
    "--courses",
    "courses_path",
    default=None,
    envvar="COURSEDESK_COURSES",
    type=click.Path(dir_okay=False),
    help="JSON file with course assignments (login response or list).",
)
@click.option("--course", default=None, envvar="COURSEDESK_COURSE", help="Course id to work on.")
@click.option("--division", default=None, envvar="COURSEDESK_DIVISION", help="Division to work on.")
@click.option("-v", "--verbose", is_flag=True, help="Log requests and state changes.")
@click.pass_context
def cli(
    ctx: click.Context,
    api_url: str | None,
    token: str | None,
    courses_path: str | None,
    course: str | None,
    division: str | None,
    verbose: bool,
) -> None:
    """CourseDesk: session materials, AI summaries, plans and mail for your classes."""
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url
    ctx.obj["token"] = token
    ctx.obj["courses_path"] = courses_path
    ctx.obj["course"] = course
    ctx.obj["division"] = division
    if verbose:
        _configure_logging()


def _configure_logging() -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    # httpx logs every request at INFO; ours already cover that.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def load_assignments(path: str | None) -> list[CourseAssignment]:
    """Read course assignments from a JSON file.

    Accepts either a bare list or a login response with a ``courses`` key.
    """
    from coursedesk.models.context import CourseAssignment

    if path is None:
        return []
    data: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("courses", [])
    return TypeAdapter(list[CourseAssignment]).validate_python(data)


def run(coro: Awaitable[T]) -> T:
    """Run a coroutine to completion from a synchronous click command."""
    return asyncio.run(coro)  # type: ignore[arg-type]


def _open_workspace(ctx: click.Context, console: Console) -> Workspace:
    from coursedesk.models.config import ClientConfig
    from coursedesk.workspace import Workspace

    obj = ctx.obj
    config = ClientConfig.from_env(base_url=obj["api_url"], token=obj["token"])
    return Workspace.open(
        config,
        load_assignments(obj["courses_path"]),
        notifier=RichNotifier(console),
        transport=obj.get("transport"),
    )


async def _select_from_options(ws: Workspace, ctx: click.Context) -> None:
    course = ctx.obj["course"]
    if course:
        await ws.select(course, ctx.obj["division"])
    else:
        await ws.select_default()


@asynccontextmanager
async def workspace_session(
    ctx: click.Context, *, select: bool = True
) -> AsyncIterator[tuple[Workspace, Console]]:
    """Open a Workspace, select the context from options, yield (ws, console).

    Ensures the workspace is closed on exit and formats exceptions as CLI
    errors.
    """
    console = get_console()
    try:
        ws = _open_workspace(ctx, console)
        try:
            if select:
                await _select_from_options(ws, ctx)
            yield ws, console
        finally:
            await ws.close()
    except SystemExit:
        raise
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


def main() -> None:
    """Console script entry point: load .env, then dispatch."""
    load_dotenv()
    cli()


# Register subcommands after cli group is defined
from coursedesk.cli.commands.account import courses, logout, verify  # noqa: E402
from coursedesk.cli.commands.generate import ask, plan, summary  # noqa: E402
from coursedesk.cli.commands.mail import mail  # noqa: E402
from coursedesk.cli.commands.materials import (  # noqa: E402
    add_url,
    clear,
    materials,
    remove,
    upload,
)
from coursedesk.cli.commands.shell import shell  # noqa: E402

cli.add_command(courses)
cli.add_command(verify)
cli.add_command(logout)
cli.add_command(materials)
cli.add_command(upload)
cli.add_command(add_url)
cli.add_command(remove)
cli.add_command(clear)
cli.add_command(summary)
cli.add_command(plan)
cli.add_command(ask)
cli.add_command(mail)
cli.add_command(shell)
