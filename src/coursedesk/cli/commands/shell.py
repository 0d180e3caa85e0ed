"""coursedesk shell -- interactive workspace that survives context switches."""

from __future__ import annotations

import asyncio
import shlex
from typing import TYPE_CHECKING

import click

from coursedesk.cli.formatting import (
    format_chat,
    format_context_header,
    format_materials,
    format_plan,
    format_summary,
)
from coursedesk.exceptions import CourseDeskError

if TYPE_CHECKING:
    from rich.console import Console

    from coursedesk.workspace import Workspace

HELP = """\
use COURSE [DIVISION]   switch context (clears the previous one)
ls                      show materials
upload PATH...          upload files
url URL                 add a reference URL
rm file|url INDEX       remove a material
clear                   clear materials and generated content
summary                 generate the AI summary
plan                    generate a session plan
title TEXT              rename the session plan
ask QUESTION            chat about the materials
history                 show the chat transcript
mail DIVISION...        email materials and summary to divisions
quit                    leave the shell"""


async def dispatch(ws: Workspace, console: Console, line: str) -> bool:
    """Execute one shell line. Returns False when the shell should exit."""
    args = shlex.split(line)
    if not args:
        return True
    cmd, rest = args[0].lower(), args[1:]

    if cmd in ("quit", "exit"):
        return False
    if cmd == "help":
        console.print(HELP)
    elif cmd == "use" and rest:
        await ws.select(rest[0], rest[1] if len(rest) > 1 else None)
        format_context_header(ws, console)
        format_materials(ws.materials, console)
    elif cmd == "ls":
        format_context_header(ws, console)
        format_materials(ws.materials, console)
    elif cmd == "upload" and rest:
        await ws.upload(rest)
        format_materials(ws.materials, console)
    elif cmd == "url" and rest:
        await ws.add_url(rest[0])
    elif cmd == "rm" and len(rest) == 2 and rest[0] in ("file", "url"):
        index = int(rest[1])
        if rest[0] == "file":
            await ws.remove_file(index)
        else:
            await ws.remove_url(index)
        format_materials(ws.materials, console)
    elif cmd == "clear":
        await ws.clear_all()
    elif cmd == "summary":
        if await ws.generate_summary() is not None:
            format_summary(ws.summary, console)
    elif cmd == "plan":
        if await ws.generate_plan() is not None:
            format_plan(ws.plan, console)
    elif cmd == "title" and rest:
        ws.set_plan_title(" ".join(rest))
        format_plan(ws.plan, console)
    elif cmd == "ask" and rest:
        await ws.send_chat(" ".join(rest))
        format_chat(ws.chat[-2:], console)
    elif cmd == "history":
        format_chat(ws.chat, console)
    elif cmd == "mail":
        request = ws.mail.request.model_copy(update={"divisions": set(rest)})
        await ws.send_mail(
            request,
            on_status=lambda status: console.print(status.message),
        )
    else:
        console.print(f"[yellow]Unknown command: {line!r}. Type 'help'.[/yellow]")
    return True


@click.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Interactive session: switch contexts and work on materials in one place."""
    from coursedesk.cli import run, workspace_session

    async def _shell() -> None:
        async with workspace_session(ctx) as (ws, console):
            format_context_header(ws, console)
            format_materials(ws.materials, console)
            while True:
                try:
                    line = await asyncio.to_thread(
                        click.prompt, "coursedesk", default="quit", show_default=False
                    )
                except click.Abort:
                    break
                try:
                    if not await dispatch(ws, console, line):
                        break
                except (CourseDeskError, ValueError, IndexError, OSError) as e:
                    console.print(f"[red]Error:[/red] {e}")

    run(_shell())
