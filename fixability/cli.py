"""CLI entrypoint for fixability."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from fixability import __version__
from fixability.config import load_config
from fixability.models import RuleSign
from fixability.reporter import LEVEL_ICONS, format_summary, results_to_json
from fixability.rules import NEGATIVE_RULES, POSITIVE_RULES
from fixability.runner import analyze_issue, run_analysis
from fixability.sources.base import SourceError


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _warn_if_anonymous(config) -> None:
    if not config.github.token:
        click.echo(
            f"Warning: {config.github.token_env} is not set. "
            "Requests are unauthenticated and code search will return nothing.",
            err=True,
        )


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=None, help="Path to fixability.yml")
@click.option("--verbose", "-v", is_flag=True, help="Log evidence-gathering details")
@click.pass_context
def main(ctx, config_path, verbose):
    """Fixability: rank open issues by how actionable they are."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(str(e))
    ctx.obj["config"] = config
    _configure_logging("DEBUG" if verbose else config.log_level)


@main.command()
@click.argument("repo", required=False)
@click.option(
    "--top",
    "-t",
    "top_n",
    type=click.IntRange(min=1),
    default=None,
    help="How many recommended fixes to list (default: from config)",
)
@click.option(
    "--format",
    "-F",
    "output_format",
    type=click.Choice(["markdown", "json"]),
    default="markdown",
    help="Saved report format",
)
@click.option("--no-save", is_flag=True, help="Do not write a report file")
@click.pass_context
def analyze(ctx, repo, top_n, output_format, no_save):
    """Analyze open issues of REPO (owner/repo or GitHub URL), or all configured repos."""
    config = ctx.obj["config"]

    if not repo and not config.enabled_repos():
        click.echo("No repos configured. Pass a repo or add repos to fixability.yml.")
        return

    _warn_if_anonymous(config)
    try:
        results = run_analysis(
            config,
            repo_name=repo,
            save=not no_save,
            output_format=output_format,
            top_n=top_n,
        )
    except (ValueError, SourceError) as e:
        raise click.ClickException(str(e))

    for result in results:
        click.echo("")
        if output_format == "json" and no_save:
            click.echo(results_to_json(result))
        else:
            click.echo(format_summary(result))


@main.command()
@click.argument("repo")
@click.argument("number", type=click.IntRange(min=1))
@click.pass_context
def score(ctx, repo, number):
    """Analyze a single issue NUMBER of REPO."""
    config = ctx.obj["config"]
    _warn_if_anonymous(config)
    try:
        item = analyze_issue(config, repo, number)
    except (ValueError, SourceError) as e:
        raise click.ClickException(str(e))

    analysis = item.analysis
    click.echo(f"#{item.issue.number}: {item.issue.title}")
    click.echo(
        f"{LEVEL_ICONS[analysis.level]} {analysis.level.value} ({analysis.score * 100:.1f}%)"
    )
    click.echo(
        f"Context: {item.related_files_count} files, {item.code_references_count} code refs, "
        f"{item.comments_count} comments"
    )
    click.echo(f"Recommendation: {analysis.recommendation}")
    if analysis.applied_rules:
        click.echo("Applied rules:")
        for rule in analysis.applied_rules:
            sign = "+" if rule.sign == RuleSign.POSITIVE else "-"
            click.echo(f"  {sign} {rule.name} ({rule.weight})")


@main.command()
def rules():
    """Show the scoring rules and their weights."""
    click.echo("Positive rules:")
    for rule in POSITIVE_RULES:
        click.echo(f"  {rule.weight:+.1f}  {rule.name}")
    click.echo("")
    click.echo("Negative rules:")
    for rule in NEGATIVE_RULES:
        click.echo(f"  {rule.weight:+.1f}  {rule.name}")


@main.command()
@click.pass_context
def status(ctx):
    """Show current configuration."""
    config = ctx.obj["config"]

    click.echo(f"Fixability v{__version__}")
    click.echo("")

    click.echo("Repos:")
    for repo in config.repos:
        state = "" if repo.enabled else " (disabled)"
        click.echo(f"  {repo.name}{state}")
    if not config.repos:
        click.echo("  (none configured)")

    click.echo("")
    click.echo(f"GitHub API: {config.github.api_url}")
    token_state = "set" if config.github.token else "not set"
    click.echo(f"Token ({config.github.token_env}): {token_state}")
    click.echo(
        f"Limits: {config.limits.max_file_chars} chars/file, "
        f"{config.limits.max_keywords} keywords, {config.limits.max_matches} matches/keyword"
    )
    click.echo(f"Workers: {config.max_workers}")
    click.echo(f"Reports: {config.reports_dir}")


@main.command()
@click.option("--repo", "-r", default=None, help="Show report for a specific repo")
@click.pass_context
def report(ctx, repo):
    """Show the latest saved report."""
    config = ctx.obj["config"]
    reports_dir = Path(config.reports_dir)

    if not reports_dir.exists():
        click.echo("No reports yet. Run `fixability analyze` first.")
        return

    reports = sorted(reports_dir.rglob("*-fixability.*"), key=lambda p: p.name, reverse=True)
    if repo:
        folder = repo.replace("/", "__")
        reports = [r for r in reports if r.parent.name == folder]

    if not reports:
        click.echo("No matching reports found.")
        return

    click.echo(reports[0].read_text(encoding="utf-8"))


if __name__ == "__main__":
    main()
