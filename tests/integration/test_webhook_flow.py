"""Integration tests for the webhook flow."""

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from hubhook import main
from hubhook.main import lambda_handler
from hubhook.webhook.event import WebhookEvent
from hubhook.webhook.handler import WebhookHandler
from tests.fixtures.webhook_payloads import create_lambda_event, form_body


@pytest.fixture
def handler() -> Generator[WebhookHandler]:
    """A fresh module-level handler for each test."""
    fresh = WebhookHandler()
    with patch.object(main, "webhook_handler", fresh):
        yield fresh


class TestWebhookFlow:
    """Integration tests for the complete webhook flow."""

    def test_issue_event_reaches_callback(
        self,
        mock_env: dict[str, str],
        webhook_secret: str,
        sample_issue_payload: dict[str, Any],
        handler: WebhookHandler,
    ) -> None:
        """Test the full flow from signed delivery to application callback."""
        received: list[WebhookEvent] = []
        handler.on("issues")(lambda event: received.append(event) or "handled")
        body = json.dumps(sample_issue_payload).encode()

        with patch.dict("os.environ", mock_env):
            response = lambda_handler(
                create_lambda_event(body, event_type="issues", secret=webhook_secret), None
            )

        assert response["statusCode"] == 200
        result = json.loads(response["body"])
        assert result["status"] == "ok"
        assert result["result"] == "handled"
        assert result["verification"] == "match"
        assert received[0].payload == sample_issue_payload
        assert received[0].body == body
        assert received[0].delivery_id == "test-delivery-123"

    def test_sha1_signed_form_delivery(
        self,
        mock_env: dict[str, str],
        webhook_secret: str,
        sample_issue_payload: dict[str, Any],
        handler: WebhookHandler,
    ) -> None:
        """Test a legacy form-encoded delivery signed with SHA-1."""
        handler.on("issues")(lambda event: event.payload["issue"]["title"])
        event = create_lambda_event(
            form_body(sample_issue_payload),
            event_type="issues",
            secret=webhook_secret,
            algorithm="sha1",
            content_type="application/x-www-form-urlencoded",
        )

        with patch.dict("os.environ", mock_env):
            response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["result"] == "Emoji list is empty"

    def test_base64_encoded_body(
        self,
        mock_env: dict[str, str],
        webhook_secret: str,
        sample_ping_payload: dict[str, Any],
        handler: WebhookHandler,  # noqa: ARG002
    ) -> None:
        """Test that base64-encoded bodies are verified over the decoded bytes."""
        body = json.dumps(sample_ping_payload, ensure_ascii=False).encode()
        event = create_lambda_event(body, secret=webhook_secret, base64_encoded=True)

        with patch.dict("os.environ", mock_env):
            response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["zen"] == sample_ping_payload["zen"]

    def test_unsigned_delivery_without_secret(
        self,
        sample_ping_payload: dict[str, Any],
        handler: WebhookHandler,  # noqa: ARG002
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that deliveries are accepted unauthenticated when no secret is set."""
        monkeypatch.delenv("GITHUB_WEBHOOK_SECRET", raising=False)
        monkeypatch.delenv("HUBHOOK_CONFIG_DIR", raising=False)
        body = json.dumps(sample_ping_payload).encode()

        response = lambda_handler(create_lambda_event(body), None)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["verification"] == "no_secret_configured"

    def test_signature_verification_in_flow(
        self,
        mock_env: dict[str, str],
        sample_issue_payload: dict[str, Any],
        handler: WebhookHandler,
    ) -> None:
        """Test that a wrong signature never reaches the callback."""
        handler.on("issues")(lambda event: pytest.fail("callback must not run"))
        body = json.dumps(sample_issue_payload).encode()

        with patch.dict("os.environ", mock_env):
            response = lambda_handler(
                create_lambda_event(body, event_type="issues", secret="wrong-secret"), None
            )

        assert response["statusCode"] == 403
        assert json.loads(response["body"])["error"] == "invalid_signature"

    def test_tampered_body(
        self,
        mock_env: dict[str, str],
        webhook_secret: str,
        handler: WebhookHandler,  # noqa: ARG002
    ) -> None:
        """Test that a body changed after signing is rejected."""
        event = create_lambda_event(b'{"zen": "a"}', secret=webhook_secret)
        event["body"] = '{"zen": "b"}'

        with patch.dict("os.environ", mock_env):
            response = lambda_handler(event, None)

        assert response["statusCode"] == 403
        assert "mismatch" in json.loads(response["body"])["message"]

    def test_malformed_json_handling(
        self,
        mock_env: dict[str, str],
        webhook_secret: str,
        handler: WebhookHandler,  # noqa: ARG002
    ) -> None:
        """Test that a correctly signed malformed body is a 400."""
        with patch.dict("os.environ", mock_env):
            response = lambda_handler(
                create_lambda_event(b'{"a":', event_type="push", secret=webhook_secret), None
            )

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["error"] == "invalid_payload"

    def test_config_file_in_flow(
        self,
        webhook_secret: str,
        handler: WebhookHandler,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that HUBHOOK_CONFIG_DIR selects the secret variable and form field."""
        (tmp_path / ".hubhook.yml").write_text("secret_env: HOOK_SECRET\npayload_field: data\n")
        monkeypatch.setenv("HUBHOOK_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("HOOK_SECRET", webhook_secret)
        handler.on("push")(lambda event: event.payload)

        response = lambda_handler(
            create_lambda_event(
                b"data=%7B%22ref%22%3A%22main%22%7D",
                event_type="push",
                secret=webhook_secret,
                content_type="application/x-www-form-urlencoded",
            ),
            None,
        )

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["result"] == {"ref": "main"}

    def test_invalid_config_file(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that a broken config file is a server error, not a bypass."""
        (tmp_path / ".hubhook.yml").write_text("payload_field: [unclosed\n")
        monkeypatch.setenv("HUBHOOK_CONFIG_DIR", str(tmp_path))

        response = lambda_handler(create_lambda_event(b"{}"), None)

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["error"] == "configuration_error"

    def test_callback_failure(
        self,
        mock_env: dict[str, str],
        webhook_secret: str,
        handler: WebhookHandler,
    ) -> None:
        """Test that callback exceptions become a 500."""

        @handler.on("push")
        def explode(event: WebhookEvent) -> None:
            raise RuntimeError("boom")

        with patch.dict("os.environ", mock_env):
            response = lambda_handler(
                create_lambda_event(b"{}", event_type="push", secret=webhook_secret), None
            )

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["error"] == "internal_error"
