"""Fixability heuristics.

Each rule is a plain ``Rule(name, weight, check)`` entry. ``check`` is a pure
predicate over an ``IssueContext`` and must return a bool for empty evidence
as well. Positive and negative rules live in two ordered tables; the order is
the order rules appear in an analysis.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from fixability.models import IssueContext


@dataclass(frozen=True)
class Rule:
    name: str
    weight: float
    check: Callable[[IssueContext], bool]


BUG_KEYWORDS = ("error", "bug", "crash", "exception", "fail", "broken", "issue", "problem")
BUG_LABELS = ("bug", "error", "defect", "issue", "crash")
ENHANCEMENT_LABELS = ("enhancement", "feature", "improvement")
FEATURE_KEYWORDS = ("feature", "add", "implement", "support", "enhancement")
QUESTION_KEYWORDS = ("how", "why", "what", "question", "help", "discussion")
DEPENDENCY_KEYWORDS = ("npm", "yarn", "package", "dependency", "third-party", "external")
DUPLICATE_KEYWORDS = ("duplicate", "already", "existing")

STACK_TRACE_PATTERNS = [
    re.compile(r"at\s+\w+.*:\d+:\d+"),  # JS frame
    re.compile(r'File\s+".*",\s+line\s+\d+'),  # Python frame
    re.compile(r"^\s*at\s+.*\(.*:\d+:\d+\)$", re.MULTILINE),
    re.compile(r"Traceback|Exception|Error:"),
]

ERROR_MESSAGE_PATTERNS = [
    re.compile(r"Error:\s*.+"),
    re.compile(r"Exception:\s*.+"),
    re.compile(r"Failed:\s*.+"),
    re.compile(r"TypeError|ReferenceError|SyntaxError"),
]

FUNCTION_PATTERNS = [
    re.compile(r"function\s+\w+", re.IGNORECASE),
    re.compile(r"\w+\(\)"),
    re.compile(r"method\s+\w+", re.IGNORECASE),
    re.compile(r"\w+\.\w+\("),
]

REQUIREMENT_PATTERNS = [
    re.compile(r"should|must|need|want|require", re.IGNORECASE),
    re.compile(r"step.*\d", re.IGNORECASE),
    re.compile(r"expected.*behavior", re.IGNORECASE),
    re.compile(r"\d+\."),
]

MIN_REQUIREMENTS_LENGTH = 100


def _title_and_body(context: IssueContext) -> str:
    return f"{context.issue.title} {context.issue.body}"


def _body_and_comments(context: IssueContext) -> str:
    comments = " ".join(c.body for c in context.comments)
    return f"{context.issue.body} {comments}"


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def _matches_any(text: str, patterns: list[re.Pattern]) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def _has_label(context: IssueContext, fragments: tuple[str, ...]) -> bool:
    return any(_contains_any(label.lower(), fragments) for label in context.issue.labels)


def has_bug_indicators(context: IssueContext) -> bool:
    return _contains_any(_title_and_body(context).lower(), BUG_KEYWORDS)


def has_stack_trace(context: IssueContext) -> bool:
    return _matches_any(_body_and_comments(context), STACK_TRACE_PATTERNS)


def has_error_message(context: IssueContext) -> bool:
    return _matches_any(_body_and_comments(context), ERROR_MESSAGE_PATTERNS)


def has_bug_label(context: IssueContext) -> bool:
    return _has_label(context, BUG_LABELS)


def has_enhancement_label(context: IssueContext) -> bool:
    return _has_label(context, ENHANCEMENT_LABELS)


def mentions_function_or_method(context: IssueContext) -> bool:
    return _matches_any(_title_and_body(context), FUNCTION_PATTERNS)


def has_clear_requirements(context: IssueContext) -> bool:
    body = context.issue.body
    return _matches_any(body, REQUIREMENT_PATTERNS) and len(body) > MIN_REQUIREMENTS_LENGTH


def is_feature_request(context: IssueContext) -> bool:
    return _contains_any(_title_and_body(context).lower(), FEATURE_KEYWORDS)


def is_question_or_discussion(context: IssueContext) -> bool:
    title = context.issue.title.lower()
    return _contains_any(title, QUESTION_KEYWORDS) or title.rstrip().endswith("?")


def has_external_dependency_issue(context: IssueContext) -> bool:
    return _contains_any(_title_and_body(context).lower(), DEPENDENCY_KEYWORDS)


def is_duplicate(context: IssueContext) -> bool:
    text = " ".join(c.body for c in context.comments).lower()
    return _contains_any(text, DUPLICATE_KEYWORDS)


POSITIVE_RULES: tuple[Rule, ...] = (
    Rule(
        "Bug Report with Stack Trace",
        0.9,
        lambda ctx: has_bug_indicators(ctx) and has_stack_trace(ctx),
    ),
    Rule(
        "File Reference with Error Message",
        0.8,
        lambda ctx: len(ctx.related_files) > 0 and has_error_message(ctx),
    ),
    Rule("Simple Bug Label", 0.7, has_bug_label),
    Rule("Code References Available", 0.6, lambda ctx: len(ctx.code_references) > 0),
    Rule("Specific Function/Method Mentioned", 0.5, mentions_function_or_method),
    Rule(
        "Enhancement with Clear Requirements",
        0.4,
        lambda ctx: has_enhancement_label(ctx) and has_clear_requirements(ctx),
    ),
)

NEGATIVE_RULES: tuple[Rule, ...] = (
    Rule(
        "Feature Request without Context",
        -0.5,
        lambda ctx: is_feature_request(ctx) and not has_clear_requirements(ctx),
    ),
    Rule("Question or Discussion", -0.6, is_question_or_discussion),
    Rule("External Dependency Issue", -0.4, has_external_dependency_issue),
    Rule("Duplicate Issue", -0.8, is_duplicate),
)
