"""Lambda entry point for the hubhook webhook receiver."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from hubhook import __version__
from hubhook.models.config import ReceiverConfig
from hubhook.utils.config_loader import ConfigLoaderError, load_receiver_config
from hubhook.utils.logging import configure_logging, get_logger
from hubhook.webhook.errors import (
    BadSignatureError,
    MalformedPayloadError,
    UnsupportedContentTypeError,
)
from hubhook.webhook.event import receive
from hubhook.webhook.handler import WebhookHandler, WebhookParseError
from hubhook.webhook.request import RawRequest

# Configure logging on module load
configure_logging()
logger = get_logger("main")

# Applications register their callbacks on this handler
webhook_handler = WebhookHandler()


def load_config() -> ReceiverConfig:
    """Load receiver configuration.

    Reads ``HUBHOOK_CONFIG_DIR`` for a config file when set, otherwise the
    environment alone.
    """
    config_dir = os.environ.get("HUBHOOK_CONFIG_DIR")
    if config_dir:
        return load_receiver_config(Path(config_dir))
    return ReceiverConfig.from_env()


def _create_response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    """Create a Lambda response.

    Args:
        status_code: HTTP status code.
        body: Response body dictionary.

    Returns:
        Lambda response dictionary.
    """
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
        },
        "body": json.dumps(body, default=str),
    }


def _error(status_code: int, error: str, message: str) -> dict[str, Any]:
    return _create_response(status_code, {"error": error, "message": message})


def _handle_webhook(event: dict[str, Any]) -> dict[str, Any]:  # noqa: PLR0911
    """Handle a webhook request.

    Args:
        event: Lambda event from API Gateway.

    Returns:
        Lambda response dictionary.
    """
    try:
        raw = RawRequest.from_lambda_event(event)
    except ValueError as e:
        logger.warning("Unreadable request body", extra={"error": str(e)})
        return _error(400, "invalid_payload", "Request body could not be read")

    logger.info(
        "Received webhook",
        extra={
            "event_type": raw.event_type,
            "delivery_id": raw.delivery_id,
        },
    )

    try:
        config = load_config()
    except ConfigLoaderError as e:
        logger.error("Receiver configuration invalid", extra={"error": str(e)})
        return _error(500, "configuration_error", "Webhook receiver is misconfigured")

    try:
        webhook_event = receive(
            config.secret,
            raw,
            verifier=config.verifier(),
            parser=config.parser(),
        )
    except BadSignatureError as e:
        return _error(403, "invalid_signature", str(e))
    except UnsupportedContentTypeError as e:
        return _error(415, "unsupported_content_type", str(e))
    except MalformedPayloadError as e:
        logger.warning("Invalid webhook payload", extra={"error": str(e)})
        return _error(400, "invalid_payload", str(e))

    try:
        result = webhook_handler.dispatch(webhook_event)
    except WebhookParseError as e:
        logger.warning("Failed to parse webhook", extra={"error": str(e)})
        return _error(400, "invalid_payload", str(e))
    except Exception:
        logger.exception("Webhook callback failed", extra={"event_type": raw.event_type})
        return _error(500, "internal_error", "Failed to process webhook")

    result["verification"] = webhook_event.signature.reason.value
    return _create_response(200, result)


def _handle_health() -> dict[str, Any]:
    """Handle health check request.

    Returns:
        Lambda response dictionary.
    """
    return _create_response(
        200,
        {
            "status": "healthy",
            "version": __version__,
        },
    )


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:  # noqa: ARG001
    """AWS Lambda handler for webhook requests.

    Args:
        event: Lambda event from API Gateway.
        context: Lambda context (unused but required by AWS Lambda).

    Returns:
        Lambda response dictionary.
    """
    path = event.get("path", "")
    method = event.get("httpMethod", "")

    logger.info(
        "Request received",
        extra={"path": path, "method": method},
    )

    if path == "/health" and method == "GET":
        return _handle_health()
    elif path == "/webhook" and method == "POST":
        return _handle_webhook(event)
    else:
        return _error(404, "not_found", f"Path not found: {method} {path}")


# For local development
if __name__ == "__main__":
    import base64

    import uvicorn
    from starlette.applications import Starlette
    from starlette.requests import Request  # noqa: TC002
    from starlette.responses import JSONResponse
    from starlette.routing import Route

    async def webhook_route(request: Request) -> JSONResponse:
        """Handle webhook requests for local development."""
        body = await request.body()
        event = {
            "httpMethod": "POST",
            "path": "/webhook",
            "headers": dict(request.headers),
            "body": base64.b64encode(body).decode("ascii"),
            "isBase64Encoded": True,
        }
        response = lambda_handler(event, None)
        return JSONResponse(
            content=json.loads(response["body"]),
            status_code=response["statusCode"],
        )

    async def health_route(request: Request) -> JSONResponse:
        """Handle health check requests for local development."""
        del request  # unused but required by Starlette routing
        response = lambda_handler({"httpMethod": "GET", "path": "/health"}, None)
        return JSONResponse(
            content=json.loads(response["body"]),
            status_code=response["statusCode"],
        )

    app = Starlette(
        routes=[
            Route("/webhook", webhook_route, methods=["POST"]),
            Route("/health", health_route, methods=["GET"]),
        ]
    )

    print(f"Starting hubhook v{__version__} on http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
