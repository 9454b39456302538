"""Report generation."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from fixability.models import FixabilityLevel, RepoAnalysis, RuleSign

LEVEL_ICONS = {
    FixabilityLevel.HIGH: "🟢",
    FixabilityLevel.MEDIUM: "🟡",
    FixabilityLevel.LOW: "🟠",
    FixabilityLevel.VERY_LOW: "🔴",
}


def _percent(score: float) -> str:
    return f"{score * 100:.1f}%"


def generate_report(result: RepoAnalysis, top_n: int = 10) -> str:
    """Generate a markdown report grouped by fixability level."""
    grouped = result.by_level()

    lines = [
        f"# Fixability Report: {result.repo}",
        "",
        f"- **Repo**: {result.repo}",
        f"- **Date**: {result.timestamp}",
        f"- **Issues analyzed**: {len(result.issues)}",
    ]
    if result.skipped:
        lines.append(f"- **Skipped (malformed)**: {result.skipped}")
    lines.extend(["", "## Summary", ""])

    if not result.issues:
        lines.append("No open issues to analyze.")
        lines.append("")
        return "\n".join(lines)

    for level, items in grouped.items():
        if items:
            lines.append(f"- {LEVEL_ICONS[level]} **{level.value}**: {len(items)} issues")
    lines.append("")

    for level, items in grouped.items():
        if not items:
            continue

        lines.append(f"## {LEVEL_ICONS[level]} {level.value.upper()} FIXABILITY ({len(items)})")
        lines.append("")

        for item in items:
            analysis = item.analysis
            lines.append(f"### #{item.issue.number}: {item.issue.title}")
            lines.append("")
            lines.append(f"**Score**: {_percent(analysis.score)}  ")
            lines.append(
                f"**Context**: {item.related_files_count} files, "
                f"{item.code_references_count} code refs, {item.comments_count} comments  "
            )
            lines.append(f"**Recommendation**: {analysis.recommendation}")
            if analysis.applied_rules:
                lines.append("")
                lines.append("Applied rules:")
                for rule in analysis.applied_rules:
                    sign = "+" if rule.sign == RuleSign.POSITIVE else "-"
                    lines.append(f"- {sign} {rule.name} ({rule.weight})")
            lines.append("")
            lines.append(item.url_for(result.repo))
            lines.append("")

    top = result.top_recommended(top_n)
    if top:
        lines.append(f"## 🎯 Top {top_n} Recommended Fixes")
        lines.append("")
        for index, item in enumerate(top, start=1):
            lines.append(
                f"{index}. #{item.issue.number}: {item.issue.title} ({_percent(item.analysis.score)})"
            )
        lines.append("")

    return "\n".join(lines)


def results_to_json(result: RepoAnalysis) -> str:
    payload = {
        "repo": result.repo,
        "timestamp": result.timestamp,
        "skipped": result.skipped,
        "issues": [item.to_dict() for item in result.sorted_issues()],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def save_report(report: str, reports_dir: str | Path, repo: str, ext: str = "md") -> Path:
    """Save a report to disk."""
    reports_path = Path(reports_dir) / repo.replace("/", "__")
    reports_path.mkdir(parents=True, exist_ok=True)

    date_str = datetime.now().strftime("%Y-%m-%d")
    report_file = reports_path / f"{date_str}-fixability.{ext}"
    report_file.write_text(report, encoding="utf-8")
    return report_file


def format_summary(result: RepoAnalysis) -> str:
    """Format a short terminal summary."""
    lines = [f"📊 {result.repo}: {len(result.issues)} issues analyzed"]
    if result.skipped:
        lines[0] += f" ({result.skipped} skipped)"

    for level, items in result.by_level().items():
        if items:
            lines.append(f"   {LEVEL_ICONS[level]} {level.value}: {len(items)}")

    top = result.top_recommended(3)
    if top:
        lines.append("")
        for item in top:
            lines.append(f"   #{item.issue.number} {item.issue.title} ({_percent(item.analysis.score)})")

    return "\n".join(lines)
