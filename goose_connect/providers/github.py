"""GitHub REST API v3 client: just the issue label calls the task hooks need."""

import logging
from urllib.parse import quote, urlparse

import httpx

BASE_URL = "https://api.github.com"

logger = logging.getLogger(__name__)


def _resolve_base_url(api_url: str | None) -> str:
    # The wire api_url doubles as the web host ("https://github.com"), which has no REST API.
    if not api_url:
        return BASE_URL
    parsed = urlparse(api_url)
    if parsed.hostname in ("github.com", "www.github.com"):
        return BASE_URL
    base = api_url.rstrip("/")
    # Enterprise web hosts serve REST under /api/v3.
    if (parsed.hostname or "").startswith("api.") or "/api/" in f"{parsed.path.rstrip('/')}/":
        return base
    return f"{base}/api/v3"


class GitHubClient:
    def __init__(self, token: str, api_url: str | None = None) -> None:
        if not token:
            raise RuntimeError("GitHub API token is required")
        self._base_url = _resolve_base_url(api_url)
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    @property
    def base_url(self) -> str:
        return self._base_url

    def _check(self, response: httpx.Response) -> None:
        if response.status_code == 401:
            raise RuntimeError("GitHub API returned 401. Check the installation token sent with the task.")
        response.raise_for_status()

    def _post(self, path: str, body: dict) -> dict | list:
        response = httpx.post(
            f"{self._base_url}{path}",
            headers=self._headers,
            json=body,
            timeout=30,
        )
        self._check(response)
        return response.json()

    def _delete(self, path: str) -> None:
        response = httpx.delete(
            f"{self._base_url}{path}",
            headers=self._headers,
            timeout=30,
        )
        self._check(response)

    def add_labels(self, owner: str, repo: str, number: int, labels: list[str]) -> list[str]:
        """Add labels to an issue or pull request; returns the labels now on it."""
        nodes = self._post(f"/repos/{owner}/{repo}/issues/{number}/labels", {"labels": labels})
        logger.info("Added labels %s to %s/%s#%d", labels, owner, repo, number)
        return [node["name"] for node in nodes]  # type: ignore[union-attr, index]

    def remove_label(self, owner: str, repo: str, number: int, label: str) -> None:
        self._delete(f"/repos/{owner}/{repo}/issues/{number}/labels/{quote(label, safe='')}")
        logger.info("Removed label %s from %s/%s#%d", label, owner, repo, number)
