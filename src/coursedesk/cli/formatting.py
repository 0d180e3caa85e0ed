"""Rich formatting helpers for the CourseDesk CLI.

Provides functions that format workspace state for terminal display.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coursedesk.protocols import NoticeLevel

if TYPE_CHECKING:
    from coursedesk.models.artifacts import ChatTurn, SessionPlan, SummaryArtifact
    from coursedesk.models.context import CourseAssignment
    from coursedesk.models.materials import MaterialSet
    from coursedesk.workspace import Workspace

_NOTICE_STYLES = {"success": "green", "error": "red", "info": "cyan"}


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


class RichNotifier:
    """Notifier that prints notices as single colored lines."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        style = _NOTICE_STYLES.get(level, "cyan")
        self._console.print(f"[{style}]{escape(message)}[/{style}]")


def format_assignments(assignments: list[CourseAssignment], console: Console) -> None:
    if not assignments:
        console.print("[dim]No course assignments.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Course", style="yellow")
    table.add_column("Name")
    table.add_column("Division", style="cyan")
    for a in assignments:
        table.add_row(escape(a.course_id), escape(a.course_name), escape(a.division))
    console.print(table)


def format_context_header(ws: Workspace, console: Console) -> None:
    name = ws.course_name or ws.context.course_id
    console.print(
        f"[bold]{escape(name)}[/bold] [dim]>[/dim] Division {escape(ws.context.division)}"
    )


def format_materials(materials: MaterialSet, console: Console) -> None:
    """Display files and URLs with the indices used by the remove commands."""
    if materials.is_empty:
        console.print("[dim]No materials.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("#", justify="right", style="yellow", width=3)
    table.add_column("Kind", style="cyan", width=4)
    table.add_column("Source")
    for i, name in enumerate(materials.files):
        table.add_row(str(i), "file", escape(name))
    for i, url in enumerate(materials.urls):
        table.add_row(str(i), "url", escape(url))
    console.print(table)


def format_summary(summary: SummaryArtifact, console: Console) -> None:
    console.print("[bold]Summary[/bold]")
    for point in summary.points:
        console.print(f"  - {escape(point)}")

    if summary.key_concepts:
        console.print()
        console.print("[bold]Key Concepts[/bold]")
        for kc in summary.key_concepts:
            console.print(f"  [yellow]{escape(kc.concept)}[/yellow]: {escape(kc.explanation)}")

    if summary.discussion_prompts:
        console.print()
        console.print("[bold]Discussion Prompts[/bold]")
        for i, prompt in enumerate(summary.discussion_prompts, 1):
            console.print(f"  {i}. {escape(prompt)}")


def format_plan(plan: SessionPlan, console: Console) -> None:
    console.print(f"[bold]{escape(plan.session_title or 'Session Plan')}[/bold]")
    if not plan.blocks:
        console.print("[dim]No blocks.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("#", justify="right", style="yellow", width=3)
    table.add_column("Time", style="green")
    table.add_column("Type", style="cyan")
    table.add_column("Title")
    table.add_column("Activity")
    for i, block in enumerate(plan.blocks):
        activity = block.activity
        if block.questions:
            activity += "\n" + "\n".join(f"? {q}" for q in block.questions)
        table.add_row(
            str(i),
            escape(str(block.duration)),
            escape(block.type),
            escape(block.title),
            escape(activity),
        )
    console.print(table)


def format_chat(turns: list[ChatTurn], console: Console) -> None:
    for turn in turns:
        if turn.role == "faculty":
            console.print(f"[bold cyan]you[/bold cyan]  {escape(turn.content)}")
        elif turn.role == "ai":
            console.print(f"[bold green]ai[/bold green]   {escape(turn.content)}")
        else:
            console.print(f"[bold red]!![/bold red]   {escape(turn.content)}")


def format_error(message: str, console: Console) -> None:
    """Display an error message in red."""
    console.print(f"[red]Error:[/red] {escape(message)}")
