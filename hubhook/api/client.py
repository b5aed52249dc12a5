"""Generic GitHub REST request capability.

Resource-specific wrappers (issues, emojis, repos, ...) are thin calls to
``GitHubApi.request`` with a fixed path.
"""

from __future__ import annotations

import os
from typing import Any

from github import Auth, Github, GithubException

from hubhook.utils.logging import get_logger
from hubhook.utils.retry import RetryConfig, RetryError, retry_with_backoff

logger = get_logger("api.client")

DEFAULT_BASE_URL = "https://api.github.com"

SUPPORTED_METHODS = {"GET", "POST", "PATCH", "PUT", "DELETE"}

# Methods whose params travel in the query string rather than a JSON body
QUERY_METHODS = {"GET", "DELETE"}


class GitHubApiError(Exception):
    """Error raised by GitHub API requests."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class _ServerError(Exception):
    """A 5xx response, worth retrying."""

    def __init__(self, error: GithubException) -> None:
        super().__init__(str(error))
        self.error = error


class GitHubApi:
    """Issues requests against the GitHub REST API and returns decoded JSON."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        retry_config: RetryConfig | None = None,
    ) -> None:
        auth = Auth.Token(token) if token else None
        self._github = Github(auth=auth, base_url=base_url)
        self.retry_config = retry_config or RetryConfig()

    @classmethod
    def from_env(cls) -> GitHubApi:
        """Create a client from ``GITHUB_TOKEN`` and ``GITHUB_API_URL``."""
        return cls(
            token=os.environ.get("GITHUB_TOKEN") or None,
            base_url=os.environ.get("GITHUB_API_URL", DEFAULT_BASE_URL),
        )

    def request(
        self,
        path: str,
        method: str = "GET",
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded response body.

        Args:
            path: API path, e.g. ``/emojis``.
            method: HTTP method.
            params: Query parameters for GET/DELETE, JSON body otherwise.

        Returns:
            Decoded JSON response (dict, list or None for empty bodies).

        Raises:
            GitHubApiError: If the method is unsupported or the request fails.
        """
        verb = method.upper()
        if verb not in SUPPORTED_METHODS:
            raise GitHubApiError(f"Unsupported HTTP method: {method}")

        url = path if path.startswith("/") else f"/{path}"
        requester = self._github.requester

        def call() -> Any:
            try:
                if verb in QUERY_METHODS:
                    _, data = requester.requestJsonAndCheck(verb, url, parameters=params)
                else:
                    _, data = requester.requestJsonAndCheck(verb, url, input=params)
            except GithubException as e:
                if e.status >= 500:
                    raise _ServerError(e) from e
                raise
            return data

        try:
            data = retry_with_backoff(call, self.retry_config, retry_on=(_ServerError,))
        except RetryError as e:
            status = getattr(getattr(e.last_exception, "error", None), "status", None)
            raise GitHubApiError(f"{verb} {url} failed after {e.attempts} attempts", status) from e
        except GithubException as e:
            raise GitHubApiError(f"{verb} {url} failed: {e.status}", e.status) from e

        logger.debug("GitHub API request completed", extra={"method": verb, "path": url})
        return data
