"""Mail dispatch models.

Provides:
- MailRequest: Pydantic model for the notification form
- MailStatus: Frozen dataclass for the status line shown while sending
- MailComposer: Mutable form state (open/sending/status) around a MailRequest
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel

from coursedesk.exceptions import MailValidationError

SUBJECT_PREFIX = "Session Material - "


class MailRequest(BaseModel):
    """What the faculty member wants to send, consumed once per send."""

    divisions: set[str] = set()
    subject: str = ""
    message: str = ""
    include_summary: bool = True

    def ensure_valid(self) -> None:
        """Raise MailValidationError if the request cannot be sent."""
        if not self.divisions:
            raise MailValidationError("Please select at least one division.")


@dataclass(frozen=True)
class MailStatus:
    kind: Literal["info", "success", "error"]
    message: str


@dataclass
class MailComposer:
    """State of the mail form.

    Attributes:
        request: The form contents.
        is_open: Whether the form is showing.
        sending: True while a summary generation or the mail call is in flight.
        status: Last status line, or None.
    """

    request: MailRequest = field(default_factory=MailRequest)
    is_open: bool = False
    sending: bool = False
    status: MailStatus | None = None

    def toggle(self) -> None:
        self.is_open = not self.is_open
        self.status = None

    def close(self) -> None:
        self.is_open = False

    def follow_course(self, course_name: str) -> None:
        """Reset the subject line to the default for *course_name*."""
        self.request = self.request.model_copy(
            update={"subject": f"{SUBJECT_PREFIX}{course_name}"}
        )
