"""coursedesk summary / plan / ask -- AI generation commands."""

from __future__ import annotations

from pathlib import Path

import click

from coursedesk.cli.formatting import format_chat, format_plan, format_summary


@click.command()
@click.option(
    "-o", "--output", default=None, type=click.Path(dir_okay=False), help="Also write Markdown here."
)
@click.pass_context
def summary(ctx: click.Context, output: str | None) -> None:
    """Generate an AI summary of the current materials."""
    from coursedesk.cli import run, workspace_session
    from coursedesk.formatting import render_summary_markdown

    async def _summary() -> bool:
        async with workspace_session(ctx) as (ws, console):
            if ws.materials.is_empty:
                console.print("[yellow]No materials to summarize. Upload something first.[/yellow]")
                return False
            result = await ws.generate_summary()
            if result is None:
                return False
            format_summary(result, console)
            if output:
                Path(output).write_text(render_summary_markdown(result), encoding="utf-8")
            return True

    if not run(_summary()):
        raise SystemExit(1)


@click.command()
@click.option(
    "-o", "--output", default=None, type=click.Path(dir_okay=False), help="Also write Markdown here."
)
@click.pass_context
def plan(ctx: click.Context, output: str | None) -> None:
    """Generate a session plan from the current materials."""
    from coursedesk.cli import run, workspace_session
    from coursedesk.formatting import render_plan_markdown

    async def _plan() -> bool:
        async with workspace_session(ctx) as (ws, console):
            result = await ws.generate_plan()
            if result is None:
                return False
            format_plan(result, console)
            if output:
                Path(output).write_text(render_plan_markdown(result), encoding="utf-8")
            return True

    if not run(_plan()):
        raise SystemExit(1)


@click.command()
@click.argument("question", nargs=-1, required=True)
@click.pass_context
def ask(ctx: click.Context, question: tuple[str, ...]) -> None:
    """Ask one question about the current materials."""
    from coursedesk.cli import run, workspace_session

    async def _ask() -> bool:
        async with workspace_session(ctx) as (ws, console):
            answer = await ws.send_chat(" ".join(question))
            format_chat(ws.chat, console)
            return answer is not None

    if not run(_ask()):
        raise SystemExit(1)
