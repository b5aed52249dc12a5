"""Outbound GitHub API access."""

from hubhook.api.client import GitHubApi, GitHubApiError

__all__ = ["GitHubApi", "GitHubApiError"]
