"""PRHost backed by the GitHub REST API."""

import logging
from typing import Any, Dict

import requests

from prloadgen.adapters.base import HostError, PRHost


class GitHubAPIHost(PRHost):
    """Open pull requests through POST /repos/{repo}/pulls."""

    missing_message = "Error: GitHub token not configured (set GITHUB_TOKEN or GITHUB_TOKEN_FILE)"
    unauthenticated_message = "Error: GitHub API rejected the configured token"

    def __init__(
        self,
        token: str | None,
        repository: str,
        api_url: str = "https://api.github.com",
        log: logging.Logger | None = None,
    ) -> None:
        self._token = token
        self.repository = repository
        self._api_url = api_url.rstrip("/")
        self._log = log or logging.getLogger("prloadgen.host")
        self._session = requests.Session()
        if token:
            self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._session.request(method, url, json=json, timeout=30)
        except requests.RequestException as e:
            raise HostError(f"{method} {path}: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except ValueError:
                pass
            raise HostError(f"{resp.status_code}: {msg}")
        return resp

    def is_installed(self) -> bool:
        return bool(self._token)

    def is_authenticated(self) -> bool:
        try:
            self._request("GET", "/user")
        except HostError as e:
            self._log.warning("GitHub auth check failed: %s", e)
            return False
        return True

    def create_pr(self, base: str, head: str, title: str, body: str) -> str:
        resp = self._request(
            "POST",
            f"/repos/{self.repository}/pulls",
            json={"title": title, "body": body, "head": head, "base": base},
        )
        data = resp.json() or {}
        return data.get("html_url") or str(data.get("number", ""))
