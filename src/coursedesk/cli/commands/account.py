"""coursedesk courses / verify / logout -- account-level commands."""

from __future__ import annotations

import click

from coursedesk.cli.formatting import format_assignments, format_error, get_console


@click.command()
@click.pass_context
def courses(ctx: click.Context) -> None:
    """List the course/division assignments from the courses file."""
    from coursedesk.cli import load_assignments

    console = get_console()
    try:
        format_assignments(load_assignments(ctx.obj["courses_path"]), console)
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


@click.command()
@click.pass_context
def verify(ctx: click.Context) -> None:
    """Check that the backend still accepts the token."""
    from coursedesk.cli import run, workspace_session

    async def _verify() -> bool:
        async with workspace_session(ctx, select=False) as (ws, console):
            ok = await ws.verify()
            if ok:
                console.print("[green]Token accepted.[/green]")
            else:
                console.print("[red]Token rejected. Log in again.[/red]")
            return ok

    if not run(_verify()):
        raise SystemExit(1)


@click.command()
@click.pass_context
def logout(ctx: click.Context) -> None:
    """Clear all materials server-side for this login."""
    from coursedesk.cli import run, workspace_session

    async def _logout() -> None:
        async with workspace_session(ctx, select=False) as (ws, console):
            await ws.logout()
            console.print("Logged out.")

    run(_logout())
