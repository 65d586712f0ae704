"""GitHub compare API as a change source."""

import logging
from typing import Any, Dict, List

import requests

from reviewgate.models import DiffRange
from reviewgate.sources.base import ChangeSource, DiffEnumerationFailure

# Compare responses list at most this many files, without pagination
MAX_COMPARE_FILES = 300


class GitHubChangeSource(ChangeSource):
    """List changed files with GET /repos/{repo}/compare/{from}...{to}."""

    def __init__(
        self,
        repo: str,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        log: logging.Logger | None = None,
    ) -> None:
        self.repo = repo
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()
        if token:
            self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"
        self._log = log or logging.getLogger("reviewgate.sources.github")

    def _request(self, method: str, path: str, params: Dict[str, Any] | None = None) -> requests.Response:
        url = f"{self._api_url}{path}"
        try:
            resp = self._session.request(method, url, params=params, timeout=30)
        except requests.RequestException as e:
            raise DiffEnumerationFailure(f"{method} {path}: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except ValueError:
                pass
            raise DiffEnumerationFailure(f"{resp.status_code}: {msg}")
        return resp

    def list_changed_paths(self, diff_range: DiffRange) -> List[str]:
        """List files of the comparison in one request.

        The compare endpoint returns at most MAX_COMPARE_FILES files and
        does not paginate them; a capped list cannot be trusted, so it
        raises DiffEnumerationFailure.
        """
        path = f"/repos/{self.repo}/compare/{diff_range.from_revision}...{diff_range.to_revision}"
        files = self._request("GET", path).json().get("files") or []
        if len(files) >= MAX_COMPARE_FILES:
            raise DiffEnumerationFailure(
                f"compare {diff_range.from_revision}...{diff_range.to_revision} lists {len(files)} files, "
                f"the API limit; file list may be truncated"
            )
        paths: List[str] = []
        seen: set[str] = set()
        for item in files:
            filename = item.get("filename")
            if filename and filename not in seen:
                seen.add(filename)
                paths.append(filename)
        self._log.debug("Compare %s: %s files", path, len(paths))
        return paths

    def has_revision(self, revision: str) -> bool:
        try:
            self._request("GET", f"/repos/{self.repo}/commits/{revision}")
        except DiffEnumerationFailure:
            return False
        return True
