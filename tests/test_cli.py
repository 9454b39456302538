"""Tests for the CLI (via Click test runner, no API calls)."""

from __future__ import annotations

import yaml
from click.testing import CliRunner

from fixability.cli import main
from fixability.models import (
    AnalyzedIssue,
    AppliedRule,
    FixabilityAnalysis,
    FixabilityLevel,
    IssueSnapshot,
    RepoAnalysis,
    RuleSign,
)
from fixability.sources.base import SourceError


def _write_config(tmp_path, repos=None):
    config = {
        "repos": repos if repos is not None else [{"name": "octo/widgets"}],
        "reports_dir": str(tmp_path / "reports"),
    }
    cfg_path = tmp_path / "fixability.yml"
    cfg_path.write_text(yaml.dump(config))
    return str(cfg_path)


def _analysis(repo="octo/widgets"):
    item = AnalyzedIssue(
        issue=IssueSnapshot(number=7, title="Crash on save"),
        analysis=FixabilityAnalysis(
            score=0.9,
            level=FixabilityLevel.HIGH,
            applied_rules=[AppliedRule("Bug Report with Stack Trace", 0.9, RuleSign.POSITIVE)],
            recommendation="Go fix it.",
        ),
    )
    return RepoAnalysis(repo=repo, issues=[item], timestamp="2026-10-19T10:00:00")


class TestRulesCommand:
    def test_lists_weights(self):
        result = CliRunner().invoke(main, ["rules"])
        assert result.exit_code == 0
        assert "+0.9  Bug Report with Stack Trace" in result.output
        assert "-0.8  Duplicate Issue" in result.output


class TestStatusCommand:
    def test_shows_repos_and_limits(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        cfg = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["--config", cfg, "status"])
        assert result.exit_code == 0
        assert "octo/widgets" in result.output
        assert "Token (GITHUB_TOKEN): not set" in result.output
        assert "5000 chars/file" in result.output

    def test_invalid_config(self, tmp_path):
        cfg = tmp_path / "fixability.yml"
        cfg.write_text("max_workers: 0\n")
        result = CliRunner().invoke(main, ["--config", str(cfg), "status"])
        assert result.exit_code != 0
        assert "max_workers" in result.output


class TestAnalyzeCommand:
    def test_no_repos(self, tmp_path):
        cfg = _write_config(tmp_path, repos=[])
        result = CliRunner().invoke(main, ["--config", cfg, "analyze"])
        assert result.exit_code == 0
        assert "No repos configured" in result.output

    def test_passes_options(self, tmp_path, monkeypatch):
        calls = {}

        def fake_run(config, repo_name=None, save=True, output_format="markdown", top_n=None):
            calls.update(repo_name=repo_name, save=save, fmt=output_format, top_n=top_n)
            return [_analysis()]

        monkeypatch.setattr("fixability.cli.run_analysis", fake_run)
        cfg = _write_config(tmp_path)
        result = CliRunner().invoke(
            main, ["--config", cfg, "analyze", "octo/widgets", "--top", "3", "--no-save"]
        )
        assert result.exit_code == 0
        assert calls == {"repo_name": "octo/widgets", "save": False, "fmt": "markdown", "top_n": 3}
        assert "octo/widgets: 1 issues analyzed" in result.output

    def test_json_to_stdout(self, tmp_path, monkeypatch):
        monkeypatch.setattr("fixability.cli.run_analysis", lambda config, **kw: [_analysis()])
        cfg = _write_config(tmp_path)
        result = CliRunner().invoke(
            main, ["--config", cfg, "analyze", "octo/widgets", "-F", "json", "--no-save"]
        )
        assert result.exit_code == 0
        assert '"fixability_level": "High"' in result.output

    def test_top_must_be_positive(self, tmp_path):
        cfg = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["--config", cfg, "analyze", "octo/widgets", "--top", "0"])
        assert result.exit_code != 0

    def test_invalid_repo(self, tmp_path):
        cfg = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["--config", cfg, "analyze", "not-a-repo"])
        assert result.exit_code == 1
        assert "Invalid repository" in result.output

    def test_source_error(self, tmp_path, monkeypatch):
        def fake_run(config, **kw):
            raise SourceError("Failed to list issues for octo/widgets: 502")

        monkeypatch.setattr("fixability.cli.run_analysis", fake_run)
        cfg = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["--config", cfg, "analyze", "octo/widgets"])
        assert result.exit_code == 1
        assert "Failed to list issues" in result.output


class TestScoreCommand:
    def test_prints_analysis(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            "fixability.cli.analyze_issue",
            lambda config, repo, number: _analysis().issues[0],
        )
        cfg = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["--config", cfg, "score", "octo/widgets", "7"])
        assert result.exit_code == 0
        assert "#7: Crash on save" in result.output
        assert "High (90.0%)" in result.output
        assert "+ Bug Report with Stack Trace (0.9)" in result.output


class TestReportCommand:
    def test_no_reports(self, tmp_path):
        cfg = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["--config", cfg, "report"])
        assert "No reports yet" in result.output

    def test_shows_latest(self, tmp_path):
        cfg = _write_config(tmp_path)
        folder = tmp_path / "reports" / "octo__widgets"
        folder.mkdir(parents=True)
        (folder / "2026-10-01-fixability.md").write_text("old report")
        (folder / "2026-10-19-fixability.md").write_text("new report")
        result = CliRunner().invoke(main, ["--config", cfg, "report", "--repo", "octo/widgets"])
        assert result.exit_code == 0
        assert "new report" in result.output

    def test_unknown_repo(self, tmp_path):
        cfg = _write_config(tmp_path)
        (tmp_path / "reports" / "octo__widgets").mkdir(parents=True)
        result = CliRunner().invoke(main, ["--config", cfg, "report", "--repo", "octo/other"])
        assert "No matching reports found." in result.output
