"""coursedesk mail -- send the session material notification."""

from __future__ import annotations

import click

from coursedesk.cli.formatting import get_console


@click.command()
@click.option("-d", "--division", "divisions", multiple=True, help="Target division (repeatable).")
@click.option("-s", "--subject", default=None, help="Subject line. Defaults to 'Session Material - <course>'.")
@click.option("-m", "--message", default="", help="Message body.")
@click.option("--summary/--no-summary", "include_summary", default=True, help="Attach the AI summary.")
@click.pass_context
def mail(
    ctx: click.Context,
    divisions: tuple[str, ...],
    subject: str | None,
    message: str,
    include_summary: bool,
) -> None:
    """Email the current materials (and optionally the AI summary) to students."""
    from coursedesk.cli import run, workspace_session
    from coursedesk.models.mail import MailStatus

    console = get_console()
    styles = {"info": "cyan", "success": "green", "error": "red"}

    def show(status: MailStatus) -> None:
        style = styles[status.kind]
        console.print(f"[{style}]{status.message}[/{style}]")

    async def _mail() -> bool:
        async with workspace_session(ctx) as (ws, _console):
            request = ws.mail.request.model_copy(
                update={
                    "divisions": set(divisions),
                    "subject": subject if subject is not None else ws.mail.request.subject,
                    "message": message,
                    "include_summary": include_summary,
                }
            )
            sent = await ws.send_mail(request, on_status=show)
            return sent is not None

    if not run(_mail()):
        raise SystemExit(1)
