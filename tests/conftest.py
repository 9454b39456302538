"""Shared fixtures for fixability tests."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from fixability.models import (
    CodeMatch,
    CodeReference,
    CommentSnapshot,
    FileContent,
    IssueContext,
    IssueSnapshot,
)
from fixability.sources.base import IssueSource, SourceError


class FakeSource(IssueSource):
    """In-memory source that records every call."""

    name = "fake"

    def __init__(self, issues=None, comments=None, files=None, search=None, failing=()):
        self.issues = issues or []
        self.comments = comments or {}
        self.files = files or {}
        self.search = search or {}
        self.failing = set(failing)
        self.calls: list[tuple[str, object]] = []
        self.closed = False

    def _maybe_fail(self, op, arg):
        self.calls.append((op, arg))
        if op in self.failing or (op, arg) in self.failing:
            raise SourceError(f"{op} failed for {arg}")

    def fetch_open_issues(self):
        self._maybe_fail("issues", None)
        return list(self.issues)

    def fetch_issue(self, number):
        self._maybe_fail("issue", number)
        for raw in self.issues:
            if raw.get("number") == number:
                return raw
        raise SourceError(f"issue #{number} not found")

    def fetch_comments(self, issue_number):
        self._maybe_fail("comments", issue_number)
        return [CommentSnapshot(body=b) for b in self.comments.get(issue_number, [])]

    def fetch_file_content(self, path):
        self._maybe_fail("file", path)
        return self.files.get(path)

    def search_code(self, keyword):
        self._maybe_fail("search", keyword)
        return [
            CodeMatch(path=p, url=f"https://github.com/o/r/blob/main/{p}")
            for p in self.search.get(keyword, [])
        ]

    def close(self):
        self.closed = True

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)


@pytest.fixture
def fake_source():
    return FakeSource


@pytest.fixture
def make_context():
    """Build an IssueContext from plain values."""

    def _make(
        title="",
        body="",
        labels=(),
        comments=(),
        files=(),
        code_refs=(),
        number=1,
    ) -> IssueContext:
        return IssueContext(
            issue=IssueSnapshot(number=number, title=title, body=body, labels=tuple(labels)),
            comments=[CommentSnapshot(body=c) for c in comments],
            related_files=[FileContent(path=p, content="x = 1") for p in files],
            code_references=[
                CodeReference(keyword=k, matches=[CodeMatch(path="src/a.py", url="u")])
                for k in code_refs
            ],
        )

    return _make


@pytest.fixture
def raw_issue():
    """A GitHub-shaped issue payload."""

    def _raw(number=1, title="Something", body="", labels=(), **extra):
        data = {
            "number": number,
            "title": title,
            "body": body,
            "labels": [{"name": name} for name in labels],
            "state": "open",
            "created_at": "2026-01-01T00:00:00Z",
            "updated_at": "2026-01-02T00:00:00Z",
        }
        data.update(extra)
        return data

    return _raw


@pytest.fixture
def tmp_config(tmp_path):
    """Write a fixability.yml and return its path."""

    def _write(content: str) -> Path:
        p = tmp_path / "fixability.yml"
        p.write_text(textwrap.dedent(content))
        return p

    return _write
