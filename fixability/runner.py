"""Batch driver: fetch open issues, gather context, score, report."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
from datetime import datetime
from typing import Any

from fixability.config import FixabilityConfig
from fixability.context import ContextGatherer
from fixability.models import AnalyzedIssue, MalformedIssueError, RepoAnalysis, RepositoryInfo
from fixability.reporter import generate_report, results_to_json, save_report
from fixability.scorer import analyze_fixability
from fixability.sources.base import IssueSource, SourceError
from fixability.sources.github import GitHubSource

logger = logging.getLogger(__name__)

GITHUB_URL_PATTERN = re.compile(r"github\.com[/:]([^/\s]+)/([^/\s#?]+)")


def parse_repo_spec(spec: str) -> RepositoryInfo:
    """Parse `owner/repo` or a GitHub URL into owner and repo."""
    spec = spec.strip()
    if "github.com" in spec:
        match = GITHUB_URL_PATTERN.search(spec)
        if match:
            repo = match.group(2)
            if repo.endswith(".git"):
                repo = repo[: -len(".git")]
            return RepositoryInfo(owner=match.group(1), repo=repo)
    else:
        parts = spec.strip("/").split("/")
        if len(parts) == 2 and all(parts):
            return RepositoryInfo(owner=parts[0], repo=parts[1])

    raise ValueError(
        f"Invalid repository format: {spec!r}. Use owner/repo or a full GitHub URL"
    )


def make_source(config: FixabilityConfig, info: RepositoryInfo) -> IssueSource:
    return GitHubSource(
        info.owner,
        info.repo,
        token=config.github.token,
        api_url=config.github.api_url,
        timeout=config.github.timeout,
    )


def _analyze_raw_issue(
    config: FixabilityConfig,
    source: IssueSource,
    raw: dict[str, Any],
) -> AnalyzedIssue | None:
    """Score one raw issue. Returns None if the payload is unusable."""
    gatherer = ContextGatherer(source, config.limits)
    try:
        context = gatherer.gather_issue_context(raw)
    except MalformedIssueError as e:
        logger.warning("Skipping malformed issue: %s", e)
        return None
    analysis = analyze_fixability(context)
    return AnalyzedIssue.from_context(context, analysis)


def analyze_repository(
    config: FixabilityConfig,
    repo: str | RepositoryInfo,
    source: IssueSource | None = None,
) -> RepoAnalysis:
    """Analyze every open issue of a repository.

    Issues are processed one at a time unless ``config.max_workers`` > 1.
    Results keep the order in which the issues were fetched.
    """
    info = parse_repo_spec(repo) if isinstance(repo, str) else repo
    name = info.full_name

    with (nullcontext(source) if source is not None else make_source(config, info)) as src:
        raw_issues = src.fetch_open_issues()
        print(f"[{name}] Found {len(raw_issues)} open issues")

        if config.max_workers > 1 and len(raw_issues) > 1:
            with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
                outcomes = list(
                    pool.map(lambda raw: _analyze_raw_issue(config, src, raw), raw_issues)
                )
        else:
            outcomes = []
            for raw in raw_issues:
                if isinstance(raw, Mapping):
                    print(f"[{name}] Analyzing issue #{raw.get('number')}: {raw.get('title')}")
                outcomes.append(_analyze_raw_issue(config, src, raw))

    result = RepoAnalysis(repo=name, timestamp=datetime.now().isoformat())
    for outcome in outcomes:
        if outcome is None:
            result.skipped += 1
            continue
        result.issues.append(outcome)
        logger.debug(
            "#%s scored %.3f (%s)",
            outcome.issue.number,
            outcome.analysis.score,
            outcome.analysis.level.value,
        )

    print(f"[{name}] Analyzed {len(result.issues)} issues ({result.skipped} skipped)")
    return result


def analyze_issue(
    config: FixabilityConfig,
    repo: str | RepositoryInfo,
    number: int,
    source: IssueSource | None = None,
) -> AnalyzedIssue:
    """Analyze a single issue. Raises MalformedIssueError or SourceError."""
    info = parse_repo_spec(repo) if isinstance(repo, str) else repo
    with (nullcontext(source) if source is not None else make_source(config, info)) as src:
        raw = src.fetch_issue(number)
        context = ContextGatherer(src, config.limits).gather_issue_context(raw)
    return AnalyzedIssue.from_context(context, analyze_fixability(context))


def run_analysis(
    config: FixabilityConfig,
    repo_name: str | None = None,
    save: bool = True,
    output_format: str = "markdown",
    top_n: int | None = None,
) -> list[RepoAnalysis]:
    """Analyze one repository or every enabled configured repository."""
    if repo_name:
        targets = [repo_name]
    else:
        targets = [r.name for r in config.enabled_repos()]

    top_n = top_n or config.top_recommended
    results = []
    for target in targets:
        info = parse_repo_spec(target)
        try:
            result = analyze_repository(config, info)
        except SourceError as e:
            # One unreachable repo must not stop the rest
            if repo_name:
                raise
            print(f"[{info.full_name}] Error: {e}")
            continue

        results.append(result)

        if save:
            if output_format == "json":
                report = results_to_json(result)
            else:
                report = generate_report(result, top_n=top_n)
            ext = "json" if output_format == "json" else "md"
            report_path = save_report(report, config.reports_dir, result.repo, ext)
            print(f"[{result.repo}] Report saved to {report_path}")

    return results
