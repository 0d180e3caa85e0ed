"""coursedesk materials / upload / add-url / remove / clear -- material commands."""

from __future__ import annotations

import click

from coursedesk.cli.formatting import format_context_header, format_materials


@click.command()
@click.pass_context
def materials(ctx: click.Context) -> None:
    """Show the files and URLs for the selected course and division."""
    from coursedesk.cli import run, workspace_session

    async def _materials() -> None:
        async with workspace_session(ctx) as (ws, console):
            format_context_header(ws, console)
            format_materials(ws.materials, console)

    run(_materials())


@click.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def upload(ctx: click.Context, paths: tuple[str, ...]) -> None:
    """Upload one or more files."""
    from coursedesk.cli import run, workspace_session

    async def _upload() -> bool:
        async with workspace_session(ctx) as (ws, console):
            ok = await ws.upload(paths)
            format_materials(ws.materials, console)
            return ok

    if not run(_upload()):
        raise SystemExit(1)


@click.command("add-url")
@click.argument("url")
@click.pass_context
def add_url(ctx: click.Context, url: str) -> None:
    """Add a reference URL."""
    from coursedesk.cli import run, workspace_session

    async def _add() -> bool:
        async with workspace_session(ctx) as (ws, console):
            ok = await ws.add_url(url)
            format_materials(ws.materials, console)
            return ok

    if not run(_add()):
        raise SystemExit(1)


@click.command()
@click.argument("kind", type=click.Choice(["file", "url"], case_sensitive=False))
@click.argument("index", type=int)
@click.pass_context
def remove(ctx: click.Context, kind: str, index: int) -> None:
    """Remove the file or URL at INDEX (as shown by `materials`)."""
    from coursedesk.cli import run, workspace_session

    async def _remove() -> bool:
        async with workspace_session(ctx) as (ws, console):
            if kind.lower() == "file":
                ok = await ws.remove_file(index)
            else:
                ok = await ws.remove_url(index)
            format_materials(ws.materials, console)
            return ok

    if not run(_remove()):
        raise SystemExit(1)


@click.command()
@click.confirmation_option(prompt="Clear all materials, summary, plan and chat?")
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Clear every material and derived artifact for the context."""
    from coursedesk.cli import run, workspace_session

    async def _clear() -> bool:
        async with workspace_session(ctx) as (ws, _console):
            return await ws.clear_all()

    if not run(_clear()):
        raise SystemExit(1)
