"""Issue data sources."""

from fixability.sources.base import IssueSource, SourceError
from fixability.sources.github import GitHubSource

__all__ = ["GitHubSource", "IssueSource", "SourceError"]
