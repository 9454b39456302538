"""Core data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MalformedIssueError(ValueError):
    """Raised when a raw issue payload lacks the fields analysis needs."""


class RuleSign(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class FixabilityLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    VERY_LOW = "Very Low"


@dataclass(frozen=True)
class IssueSnapshot:
    number: int
    title: str
    body: str = ""
    labels: tuple[str, ...] = ()
    state: str = "open"
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> IssueSnapshot:
        """Project a tracker payload onto a snapshot.

        Labels may be ``{"name": ...}`` objects (GitHub) or plain strings.
        """
        if not isinstance(raw, Mapping):
            raise MalformedIssueError(f"Issue payload must be a mapping, got {type(raw).__name__}")

        number = raw.get("number")
        if isinstance(number, bool) or not isinstance(number, int):
            raise MalformedIssueError(f"Issue is missing a numeric 'number': {number!r}")
        if "title" not in raw:
            raise MalformedIssueError(f"Issue #{number} is missing 'title'")
        for key in ("title", "body"):
            if raw.get(key) is not None and not isinstance(raw[key], str):
                raise MalformedIssueError(
                    f"Issue #{number} has a non-string '{key}': {type(raw[key]).__name__}"
                )

        raw_labels = raw.get("labels") or []
        if not isinstance(raw_labels, (list, tuple)):
            raise MalformedIssueError(f"Issue #{number} has malformed 'labels': {raw_labels!r}")

        labels = []
        for label in raw_labels:
            name = label.get("name") if isinstance(label, Mapping) else label
            if name:
                labels.append(str(name))

        return cls(
            number=number,
            title=raw.get("title") or "",
            body=raw.get("body") or "",
            labels=tuple(labels),
            state=raw.get("state") or "",
            created_at=raw.get("created_at") or "",
            updated_at=raw.get("updated_at") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "title": self.title,
            "body": self.body,
            "labels": list(self.labels),
            "state": self.state,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class CommentSnapshot:
    body: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | str | None) -> CommentSnapshot:
        body = raw.get("body") if isinstance(raw, Mapping) else raw
        return cls(body=body if isinstance(body, str) else "")


@dataclass
class FileContent:
    path: str  # Relative to repo root
    content: str


@dataclass
class CodeMatch:
    path: str
    url: str


@dataclass
class CodeReference:
    keyword: str
    matches: list[CodeMatch] = field(default_factory=list)


@dataclass
class IssueContext:
    issue: IssueSnapshot
    comments: list[CommentSnapshot] = field(default_factory=list)
    related_files: list[FileContent] = field(default_factory=list)
    code_references: list[CodeReference] = field(default_factory=list)


@dataclass(frozen=True)
class AppliedRule:
    name: str
    weight: float
    sign: RuleSign

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "weight": self.weight, "type": self.sign.value}


@dataclass
class FixabilityAnalysis:
    score: float
    level: FixabilityLevel
    applied_rules: list[AppliedRule] = field(default_factory=list)
    recommendation: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "fixability_level": self.level.value,
            "applied_rules": [r.to_dict() for r in self.applied_rules],
            "recommendation": self.recommendation,
        }


@dataclass
class AnalyzedIssue:
    issue: IssueSnapshot
    analysis: FixabilityAnalysis
    related_files_count: int = 0
    code_references_count: int = 0
    comments_count: int = 0

    @classmethod
    def from_context(cls, context: IssueContext, analysis: FixabilityAnalysis) -> AnalyzedIssue:
        return cls(
            issue=context.issue,
            analysis=analysis,
            related_files_count=len(context.related_files),
            code_references_count=len(context.code_references),
            comments_count=len(context.comments),
        )

    def url_for(self, repo: str) -> str:
        return f"https://github.com/{repo}/issues/{self.issue.number}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "issue": self.issue.to_dict(),
            "analysis": self.analysis.to_dict(),
            "context": {
                "related_files_count": self.related_files_count,
                "code_references_count": self.code_references_count,
                "comments_count": self.comments_count,
            },
        }


@dataclass(frozen=True)
class RepositoryInfo:
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


LEVEL_ORDER = [
    FixabilityLevel.HIGH,
    FixabilityLevel.MEDIUM,
    FixabilityLevel.LOW,
    FixabilityLevel.VERY_LOW,
]


@dataclass
class RepoAnalysis:
    repo: str  # owner/repo
    issues: list[AnalyzedIssue] = field(default_factory=list)
    skipped: int = 0  # Malformed issues that could not be analyzed
    timestamp: str = ""

    def sorted_issues(self) -> list[AnalyzedIssue]:
        """Issues by descending score; ties keep fetch order."""
        return sorted(self.issues, key=lambda item: item.analysis.score, reverse=True)

    def by_level(self) -> dict[FixabilityLevel, list[AnalyzedIssue]]:
        grouped: dict[FixabilityLevel, list[AnalyzedIssue]] = {level: [] for level in LEVEL_ORDER}
        for item in self.sorted_issues():
            grouped[item.analysis.level].append(item)
        return grouped

    def top_recommended(self, n: int, min_score: float = 0.4) -> list[AnalyzedIssue]:
        return [item for item in self.sorted_issues()[:n] if item.analysis.score >= min_score]
