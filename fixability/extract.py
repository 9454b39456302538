"""Mine issue text for file paths and code identifiers.

Extraction is deliberately permissive: it only produces candidates. The
context gatherer decides how many of them are resolved against the source.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from fixability.models import CommentSnapshot

# Either `segment/segment.ext` or a bare `name.ext`, at the start of the
# text or after whitespace.
FILE_PATTERN = re.compile(
    r"(?:^|\s)([a-zA-Z0-9_-]+/[a-zA-Z0-9_./-]+\.[a-zA-Z]{1,4})"
    r"|(?:^|\s)([a-zA-Z0-9_.-]+\.[a-zA-Z]{1,4})"
)

KEYWORD_PATTERNS = [
    re.compile(r"(?:function|def|class|method)\s+(\w+)", re.IGNORECASE),
    re.compile(r"(?:const|let|var|@\w+)\s+(\w+)", re.IGNORECASE),
    re.compile(r"(?:Error|Exception|Bug|Issue):\s*(\w+)", re.IGNORECASE),
]

SOURCE_EXTENSIONS = (
    ".js",
    ".ts",
    ".jsx",
    ".tsx",
    ".py",
    ".java",
    ".cpp",
    ".c",
    ".h",
    ".css",
    ".html",
    ".vue",
    ".php",
    ".rb",
    ".go",
    ".rs",
    ".swift",
    ".kt",
)

# Lockfiles and manifests are almost never where the defect lives
IGNORED_FILES = frozenset({"package.json", "package-lock.json", "yarn.lock", "pnpm-lock.yaml"})

MIN_KEYWORD_LENGTH = 3


def issue_text(body: str | None, comments: Iterable[CommentSnapshot | str | None]) -> str:
    """Join the issue body and comment bodies with single spaces."""
    parts = [body or ""]
    for comment in comments:
        if isinstance(comment, CommentSnapshot):
            parts.append(comment.body)
        else:
            parts.append(comment or "")
    return " ".join(parts)


def is_valid_file_path(path: str) -> bool:
    if path in IGNORED_FILES:
        return False
    return path.endswith(SOURCE_EXTENSIONS) or "/" in path


def extract_file_references(
    body: str | None,
    comments: Iterable[CommentSnapshot | str | None] = (),
) -> list[str]:
    """Return candidate file paths mentioned in the issue, first-seen order."""
    files: dict[str, None] = {}
    for match in FILE_PATTERN.finditer(issue_text(body, comments)):
        path = match.group(1) or match.group(2)
        if path and is_valid_file_path(path):
            files.setdefault(path)
    return list(files)


def extract_code_keywords(
    body: str | None,
    comments: Iterable[CommentSnapshot | str | None] = (),
) -> list[str]:
    """Return identifiers that look like functions, classes, variables or error names."""
    text = issue_text(body, comments)
    keywords: dict[str, None] = {}
    for pattern in KEYWORD_PATTERNS:
        for match in pattern.finditer(text):
            name = match.group(1)
            if name and len(name) >= MIN_KEYWORD_LENGTH:
                keywords.setdefault(name)
    return list(keywords)
