"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import pytest

from hubhook.webhook.validators import compute_signature

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_env() -> Generator[None]:
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def webhook_secret() -> str:
    """Shared secret used to sign test deliveries."""
    return "test-webhook-secret"


@pytest.fixture
def mock_env(webhook_secret: str) -> dict[str, str]:
    """Standard environment variables for testing."""
    return {
        "GITHUB_WEBHOOK_SECRET": webhook_secret,
        "LOG_LEVEL": "DEBUG",
    }


@pytest.fixture
def set_mock_env(mock_env: dict[str, str]) -> Generator[None]:
    """Set mock environment variables for a test."""
    for key, value in mock_env.items():
        os.environ[key] = value
    yield


@pytest.fixture
def sample_ping_payload() -> dict[str, Any]:
    """Sample GitHub ping webhook payload."""
    return {
        "zen": "Responsive is better than fast.",
        "hook_id": 123456,
        "hook": {"type": "Repository", "id": 789012},
    }


@pytest.fixture
def sample_issue_payload() -> dict[str, Any]:
    """Sample GitHub issues webhook payload."""
    return {
        "action": "opened",
        "issue": {
            "number": 7,
            "title": "Emoji list is empty",
            "user": {"login": "octocat"},
            "labels": [{"name": "bug"}],
        },
        "repository": {"full_name": "owner/repo"},
        "sender": {"login": "octocat"},
    }


@pytest.fixture
def json_body() -> bytes:
    """A small JSON document as raw bytes."""
    return b'{"action": "opened", "number": 1}'


@pytest.fixture
def sha256_signature(webhook_secret: str, json_body: bytes) -> str:
    """Valid X-Hub-Signature-256 value for json_body."""
    return compute_signature(webhook_secret, json_body, "sha256")
