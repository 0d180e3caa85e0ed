"""Material set model.

A MaterialSet is only ever replaced wholesale from the server; the
``without_*`` helpers return new instances for optimistic removals.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class MaterialSet(BaseModel):
    """Uploaded filenames and added URLs for one session context."""

    model_config = {"frozen": True}

    files: tuple[str, ...] = ()
    urls: tuple[str, ...] = ()

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> MaterialSet:
        """Build from a list-materials response, treating null lists as empty."""
        return cls.model_validate(
            {"files": data.get("files") or (), "urls": data.get("urls") or ()}
        )

    @property
    def is_empty(self) -> bool:
        return not self.files and not self.urls

    def without_file(self, index: int) -> tuple[MaterialSet, str]:
        """Return (new set, removed filename) with the file at *index* dropped.

        Raises:
            IndexError: If *index* is negative or out of range.
        """
        if not 0 <= index < len(self.files):
            raise IndexError(f"No file at index {index}")
        removed = self.files[index]
        files = self.files[:index] + self.files[index + 1:]
        return self.model_copy(update={"files": files}), removed

    def without_url(self, index: int) -> tuple[MaterialSet, str]:
        """Return (new set, removed URL) with the URL at *index* dropped.

        Raises:
            IndexError: If *index* is negative or out of range.
        """
        if not 0 <= index < len(self.urls):
            raise IndexError(f"No URL at index {index}")
        removed = self.urls[index]
        urls = self.urls[:index] + self.urls[index + 1:]
        return self.model_copy(update={"urls": urls}), removed
