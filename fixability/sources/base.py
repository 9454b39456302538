"""Abstract issue data source."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from fixability.models import CodeMatch, CommentSnapshot


class SourceError(RuntimeError):
    """A data-source failure that cannot be degraded to an empty result."""


class IssueSource(ABC):
    """Read-only access to one repository's issues, files and code search.

    ``fetch_comments``, ``fetch_file_content`` and ``search_code`` fail soft:
    errors are logged and turned into an empty result. Listing issues is the
    only hard failure.
    """

    name: str = "base"

    @abstractmethod
    def fetch_open_issues(self) -> list[dict[str, Any]]:
        """Return raw open issues, newest first."""
        ...

    @abstractmethod
    def fetch_issue(self, number: int) -> dict[str, Any]:
        """Return a single raw issue."""
        ...

    @abstractmethod
    def fetch_comments(self, issue_number: int) -> list[CommentSnapshot]:
        ...

    @abstractmethod
    def fetch_file_content(self, path: str) -> str | None:
        """Return decoded file content, or None when the path is not a file."""
        ...

    @abstractmethod
    def search_code(self, keyword: str) -> list[CodeMatch]:
        ...

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
