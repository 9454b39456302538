"""Tests for report generation."""

from __future__ import annotations

import json

import pytest

from fixability.models import (
    AnalyzedIssue,
    AppliedRule,
    FixabilityAnalysis,
    FixabilityLevel,
    IssueSnapshot,
    RepoAnalysis,
    RuleSign,
)
from fixability.reporter import format_summary, generate_report, results_to_json, save_report


def _item(number, title, score, level, rules=()):
    return AnalyzedIssue(
        issue=IssueSnapshot(number=number, title=title),
        analysis=FixabilityAnalysis(
            score=score,
            level=level,
            applied_rules=list(rules),
            recommendation=f"recommendation for {level.value}",
        ),
        related_files_count=1,
        code_references_count=2,
        comments_count=3,
    )


@pytest.fixture
def sample_analysis():
    return RepoAnalysis(
        repo="octo/widgets",
        issues=[
            _item(
                1,
                "Question about config",
                0.0,
                FixabilityLevel.VERY_LOW,
                [AppliedRule("Question or Discussion", -0.6, RuleSign.NEGATIVE)],
            ),
            _item(
                2,
                "Crash on save",
                0.9,
                FixabilityLevel.HIGH,
                [AppliedRule("Bug Report with Stack Trace", 0.9, RuleSign.POSITIVE)],
            ),
            _item(3, "Flaky export", 0.5, FixabilityLevel.MEDIUM),
        ],
        skipped=1,
        timestamp="2026-10-19T10:00:00",
    )


class TestGenerateReport:
    def test_title(self, sample_analysis):
        assert "# Fixability Report: octo/widgets" in generate_report(sample_analysis)

    def test_level_sections_in_order(self, sample_analysis):
        report = generate_report(sample_analysis)
        high = report.index("HIGH FIXABILITY")
        medium = report.index("MEDIUM FIXABILITY")
        very_low = report.index("VERY LOW FIXABILITY")
        assert high < medium < very_low

    def test_issue_details(self, sample_analysis):
        report = generate_report(sample_analysis)
        assert "### #2: Crash on save" in report
        assert "**Score**: 90.0%" in report
        assert "1 files, 2 code refs, 3 comments" in report
        assert "- + Bug Report with Stack Trace (0.9)" in report
        assert "- - Question or Discussion (-0.6)" in report
        assert "https://github.com/octo/widgets/issues/2" in report

    def test_skipped_count(self, sample_analysis):
        assert "**Skipped (malformed)**: 1" in generate_report(sample_analysis)

    def test_top_recommended(self, sample_analysis):
        report = generate_report(sample_analysis, top_n=5)
        top = report[report.index("Top 5 Recommended") :]
        assert "1. #2: Crash on save (90.0%)" in top
        assert "2. #3: Flaky export (50.0%)" in top
        assert "#1:" not in top

    def test_no_issues(self):
        report = generate_report(RepoAnalysis(repo="octo/empty", timestamp="t"))
        assert "No open issues to analyze." in report


class TestResultsToJson:
    def test_sorted_payload(self, sample_analysis):
        data = json.loads(results_to_json(sample_analysis))
        assert data["repo"] == "octo/widgets"
        assert data["skipped"] == 1
        assert [i["issue"]["number"] for i in data["issues"]] == [2, 3, 1]
        assert data["issues"][0]["analysis"]["applied_rules"][0]["type"] == "positive"


class TestSaveReport:
    def test_creates_file(self, tmp_path, sample_analysis):
        report = generate_report(sample_analysis)
        path = save_report(report, tmp_path / "reports", "octo/widgets")
        assert path.exists()
        assert path.parent.name == "octo__widgets"
        assert path.name.endswith("-fixability.md")
        assert path.read_text(encoding="utf-8") == report

    def test_json_extension(self, tmp_path, sample_analysis):
        path = save_report("{}", tmp_path, "octo/widgets", "json")
        assert path.suffix == ".json"


class TestFormatSummary:
    def test_counts_and_top(self, sample_analysis):
        summary = format_summary(sample_analysis)
        assert "octo/widgets: 3 issues analyzed (1 skipped)" in summary
        assert "High: 1" in summary
        assert "Very Low: 1" in summary
        assert "#2 Crash on save (90.0%)" in summary
