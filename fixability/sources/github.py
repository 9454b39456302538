"""GitHub REST API source."""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from fixability.models import CodeMatch, CommentSnapshot
from fixability.sources.base import IssueSource, SourceError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100


class GitHubSource(IssueSource):
    name = "github"

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        self.owner = owner
        self.repo = repo
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if client is None:
            client = httpx.Client(base_url=api_url.rstrip("/"), timeout=timeout)
        client.headers.update(headers)
        self.client = client

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        logger.debug("GET %s %s", path, params or {})
        resp = self.client.get(path, params=params)
        resp.raise_for_status()
        return resp.json()

    def fetch_open_issues(self) -> list[dict[str, Any]]:
        """Page through open issues until a short or empty page.

        Pull requests share the issues endpoint and are dropped.
        """
        issues: list[dict[str, Any]] = []
        page = 1
        while True:
            print(f"[{self.full_name}] Fetching issues page {page}...")
            try:
                data = self._get(
                    f"/repos/{self.owner}/{self.repo}/issues",
                    params={
                        "state": "open",
                        "sort": "created",
                        "direction": "desc",
                        "per_page": PER_PAGE,
                        "page": page,
                    },
                )
            except (httpx.HTTPError, ValueError) as e:
                raise SourceError(f"Failed to list issues for {self.full_name}: {e}") from e

            if not data:
                break
            if not isinstance(data, list):
                raise SourceError(f"Unexpected issues payload for {self.full_name}")

            issues.extend(
                item for item in data if not (isinstance(item, dict) and "pull_request" in item)
            )

            if len(data) < PER_PAGE:
                break
            page += 1

        return issues

    def fetch_issue(self, number: int) -> dict[str, Any]:
        try:
            return self._get(f"/repos/{self.owner}/{self.repo}/issues/{number}")
        except (httpx.HTTPError, ValueError) as e:
            raise SourceError(f"Failed to fetch issue #{number} of {self.full_name}: {e}") from e

    def fetch_comments(self, issue_number: int) -> list[CommentSnapshot]:
        try:
            data = self._get(
                f"/repos/{self.owner}/{self.repo}/issues/{issue_number}/comments",
                params={"per_page": PER_PAGE},
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Error fetching comments for issue #%s: %s", issue_number, e)
            return []
        if not isinstance(data, list):
            logger.warning("Unexpected comments payload for issue #%s", issue_number)
            return []
        return [CommentSnapshot.from_raw(c) for c in data]

    def fetch_file_content(self, path: str) -> str | None:
        try:
            data = self._get(f"/repos/{self.owner}/{self.repo}/contents/{path}")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Error fetching file content for %s: %s", path, e)
            return None

        # Directories come back as a list of entries
        if not isinstance(data, dict) or data.get("type") != "file" or "content" not in data:
            return None
        try:
            return base64.b64decode(data["content"]).decode("utf-8", errors="replace")
        except ValueError as e:
            logger.warning("Could not decode content of %s: %s", path, e)
            return None

    def search_code(self, keyword: str) -> list[CodeMatch]:
        try:
            data = self._get(
                "/search/code",
                params={"q": f"{keyword} repo:{self.owner}/{self.repo}"},
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning('Error searching code for "%s": %s', keyword, e)
            return []
        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            logger.warning('Unexpected search payload for "%s"', keyword)
            return []
        return [
            CodeMatch(path=item.get("path", ""), url=item.get("html_url", ""))
            for item in items
            if isinstance(item, dict)
        ]

    def close(self) -> None:
        self.client.close()
