"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from fixability.sources.github import DEFAULT_API_URL

DEFAULT_CONFIG_FILE = "fixability.yml"


@dataclass
class RepoConfig:
    name: str  # owner/repo
    enabled: bool = True


@dataclass
class GitHubConfig:
    api_url: str = DEFAULT_API_URL
    token_env: str = "GITHUB_TOKEN"
    timeout: float = 30.0

    @property
    def token(self) -> str | None:
        return os.environ.get(self.token_env) or None


@dataclass
class ContextLimits:
    """Bounds on how much evidence is resolved per issue."""

    max_file_chars: int = 5000
    max_keywords: int = 5  # Each keyword costs one code-search request
    max_matches: int = 3


@dataclass
class FixabilityConfig:
    repos: list[RepoConfig] = field(default_factory=list)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    limits: ContextLimits = field(default_factory=ContextLimits)
    max_workers: int = 1
    top_recommended: int = 10
    reports_dir: str = ".fixability/reports"
    log_level: str = "WARNING"

    def enabled_repos(self) -> list[RepoConfig]:
        return [r for r in self.repos if r.enabled]


def _positive_int(raw: dict, key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config value '{key}' must be a positive integer, got {value!r}")
    return value


def load_config(config_path: str | Path | None = None) -> FixabilityConfig:
    """Load config from fixability.yml, falling back to defaults."""
    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_FILE)
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        return FixabilityConfig()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    repos = []
    for r in raw.get("repos", []):
        # Allow the short form `- owner/repo`
        if isinstance(r, str):
            repos.append(RepoConfig(name=r))
        else:
            repos.append(RepoConfig(name=r["name"], enabled=r.get("enabled", True)))

    github_raw = raw.get("github", {})
    github = GitHubConfig(
        api_url=github_raw.get("api_url", DEFAULT_API_URL),
        token_env=github_raw.get("token_env", "GITHUB_TOKEN"),
        timeout=float(github_raw.get("timeout", 30.0)),
    )

    limits_raw = raw.get("limits", {})
    limits = ContextLimits(
        max_file_chars=_positive_int(limits_raw, "max_file_chars", 5000),
        max_keywords=_positive_int(limits_raw, "max_keywords", 5),
        max_matches=_positive_int(limits_raw, "max_matches", 3),
    )

    return FixabilityConfig(
        repos=repos,
        github=github,
        limits=limits,
        max_workers=_positive_int(raw, "max_workers", 1),
        top_recommended=_positive_int(raw, "top_recommended", 10),
        reports_dir=raw.get("reports_dir", ".fixability/reports"),
        log_level=str(raw.get("log_level", "WARNING")).upper(),
    )
