"""Pluggable interfaces for CourseDesk.

The workspace reports user-facing outcomes through a Notifier; how they are
presented (toast, terminal line, log record) is up to the caller.
"""

from __future__ import annotations

import logging
from typing import Literal, Protocol, runtime_checkable

NoticeLevel = Literal["success", "error", "info"]

logger = logging.getLogger("coursedesk.notices")


@runtime_checkable
class Notifier(Protocol):
    """Protocol for presenting user-facing notices.

    Any object with a matching notify() method works.
    """

    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        """Present *message* to the user."""
        ...


class LoggingNotifier:
    """Default notifier: routes notices to the ``coursedesk.notices`` logger."""

    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        if level == "error":
            logger.warning(message)
        else:
            logger.info(message)
