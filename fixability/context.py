"""Turn extracted references into concrete evidence for one issue."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fixability.config import ContextLimits
from fixability.extract import extract_code_keywords, extract_file_references
from fixability.models import CodeReference, CommentSnapshot, FileContent, IssueContext, IssueSnapshot
from fixability.sources.base import IssueSource, SourceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Resolution(Generic[T]):
    """Outcome of resolving one candidate: a value, or the reason it was skipped."""

    candidate: str
    value: T | None = None
    reason: str | None = None

    @property
    def resolved(self) -> bool:
        return self.value is not None


class ContextGatherer:
    def __init__(self, source: IssueSource, limits: ContextLimits | None = None):
        self.source = source
        self.limits = limits or ContextLimits()
        self.last_skipped: list[Resolution] = []

    def gather_issue_context(self, issue: IssueSnapshot | Mapping[str, Any]) -> IssueContext:
        """Build the evidence bundle for an issue.

        Only a malformed raw issue raises (MalformedIssueError); every
        evidence failure just leaves the context with less in it.
        """
        snapshot = issue if isinstance(issue, IssueSnapshot) else IssueSnapshot.from_raw(issue)
        self.last_skipped = []

        comments = self._fetch_comments(snapshot.number)
        file_refs = extract_file_references(snapshot.body, comments)
        keywords = extract_code_keywords(snapshot.body, comments)

        return IssueContext(
            issue=snapshot,
            comments=comments,
            related_files=self.resolve_files(file_refs),
            code_references=self.resolve_code_references(keywords),
        )

    def resolve_files(self, paths: Iterable[str]) -> list[FileContent]:
        resolutions = [self._resolve_file(path) for path in paths]
        return self._collect(resolutions)

    def resolve_code_references(self, keywords: Iterable[str]) -> list[CodeReference]:
        """Search for at most ``limits.max_keywords`` keywords."""
        keywords = list(keywords)[: self.limits.max_keywords]
        resolutions = [self._resolve_keyword(keyword) for keyword in keywords]
        return self._collect(resolutions)

    def _collect(self, resolutions: list[Resolution[T]]) -> list[T]:
        values = []
        for r in resolutions:
            if r.resolved:
                values.append(r.value)
            else:
                self.last_skipped.append(r)
        return values

    def _fetch_comments(self, number: int) -> list[CommentSnapshot]:
        try:
            return list(self.source.fetch_comments(number))
        except SourceError as e:
            logger.warning("Error fetching comments for issue #%s: %s", number, e)
            return []

    def _resolve_file(self, path: str) -> Resolution[FileContent]:
        try:
            content = self.source.fetch_file_content(path)
        except SourceError as e:
            logger.warning("Error fetching file %s: %s", path, e)
            return Resolution(path, reason=str(e))
        if not content:
            logger.info("Skipping %s: not found or empty", path)
            return Resolution(path, reason="not found")
        return Resolution(
            path, value=FileContent(path=path, content=content[: self.limits.max_file_chars])
        )

    def _resolve_keyword(self, keyword: str) -> Resolution[CodeReference]:
        try:
            matches = self.source.search_code(keyword)
        except SourceError as e:
            logger.warning('Error searching for keyword "%s": %s', keyword, e)
            return Resolution(keyword, reason=str(e))
        if not matches:
            return Resolution(keyword, reason="no matches")
        return Resolution(
            keyword,
            value=CodeReference(keyword=keyword, matches=list(matches)[: self.limits.max_matches]),
        )
