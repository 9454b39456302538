"""Score an issue context against the rule tables."""

from __future__ import annotations

from collections.abc import Sequence

from fixability.models import (
    AppliedRule,
    FixabilityAnalysis,
    FixabilityLevel,
    IssueContext,
    RuleSign,
)
from fixability.rules import NEGATIVE_RULES, POSITIVE_RULES, Rule

LEVEL_THRESHOLDS = [
    (0.7, FixabilityLevel.HIGH),
    (0.4, FixabilityLevel.MEDIUM),
    (0.2, FixabilityLevel.LOW),
]

RECOMMENDATIONS = {
    FixabilityLevel.HIGH: (
        "This issue appears highly fixable with clear context and actionable information."
    ),
    FixabilityLevel.MEDIUM: (
        "This issue is moderately fixable but may need additional context or investigation."
    ),
    FixabilityLevel.LOW: (
        "This issue has low fixability - consider asking for more details or reproduction steps."
    ),
    FixabilityLevel.VERY_LOW: (
        "This issue appears difficult to fix without significant additional information."
    ),
}


def fixability_level(score: float) -> FixabilityLevel:
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return FixabilityLevel.VERY_LOW


def recommendation_for(level: FixabilityLevel) -> str:
    return RECOMMENDATIONS[level]


def analyze_fixability(
    context: IssueContext,
    positive_rules: Sequence[Rule] = POSITIVE_RULES,
    negative_rules: Sequence[Rule] = NEGATIVE_RULES,
) -> FixabilityAnalysis:
    """Sum the weights of every matching rule, then clamp into [0, 1].

    The clamp is applied once to the full sum, never per rule.
    """
    score = 0.0
    applied: list[AppliedRule] = []

    for rules, sign in ((positive_rules, RuleSign.POSITIVE), (negative_rules, RuleSign.NEGATIVE)):
        for rule in rules:
            if rule.check(context):
                score += rule.weight
                applied.append(AppliedRule(name=rule.name, weight=rule.weight, sign=sign))

    score = max(0.0, min(1.0, score))
    level = fixability_level(score)

    return FixabilityAnalysis(
        score=score,
        level=level,
        applied_rules=applied,
        recommendation=recommendation_for(level),
    )
