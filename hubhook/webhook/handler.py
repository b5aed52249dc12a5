"""Webhook event dispatcher."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from hubhook.utils.logging import get_logger
from hubhook.webhook.event import WebhookEvent  # noqa: TC001

logger = get_logger("webhook.handler")

EventCallback = Callable[[WebhookEvent], Any]

FALLBACK = "*"


class WebhookParseError(Exception):
    """Raised when a decoded payload lacks fields a built-in handler needs."""

    pass


def parse_ping_event(payload: Any) -> dict[str, Any]:
    """Parse a ping webhook event.

    Args:
        payload: The webhook payload.

    Returns:
        Dictionary with ping event data.

    Raises:
        WebhookParseError: If required fields are missing.
    """
    if not isinstance(payload, dict) or "zen" not in payload:
        raise WebhookParseError("Missing 'zen' in ping payload")

    hook = payload.get("hook") or {}
    return {
        "zen": payload["zen"],
        "hook_id": payload.get("hook_id"),
        "hook_type": hook.get("type") if isinstance(hook, dict) else None,
    }


class WebhookHandler:
    """Routes verified events to application callbacks by ``X-GitHub-Event``."""

    def __init__(self) -> None:
        self._callbacks: dict[str, EventCallback] = {}

    def on(self, event_type: str) -> Callable[[EventCallback], EventCallback]:
        """Register a callback for an event type; ``"*"`` catches the rest."""

        def register(callback: EventCallback) -> EventCallback:
            self._callbacks[event_type] = callback
            return callback

        return register

    def registered(self) -> list[str]:
        return sorted(self._callbacks)

    def dispatch(self, event: WebhookEvent) -> dict[str, Any]:
        """Dispatch a webhook event to the appropriate callback.

        Args:
            event: The verified, decoded event.

        Returns:
            Dictionary with dispatch result.

        Raises:
            WebhookParseError: If a ping payload is missing required fields.
        """
        event_type = event.event_type
        action = event.payload.get("action") if isinstance(event.payload, dict) else None
        logger.info(
            "Dispatching webhook event",
            extra={"event_type": event_type, "action": action, "delivery_id": event.delivery_id},
        )

        callback = self._callbacks.get(event_type)
        if callback is None and event_type == "ping":
            return self._handle_ping(event)
        if callback is None:
            callback = self._callbacks.get(FALLBACK)
        if callback is None:
            return self._handle_unsupported(event_type)

        return {
            "event_type": event_type,
            "action": action,
            "status": "ok",
            "result": callback(event),
        }

    def _handle_ping(self, event: WebhookEvent) -> dict[str, Any]:
        ping_data = parse_ping_event(event.payload)
        logger.info("Ping event received", extra={"hook_id": ping_data["hook_id"]})
        return {
            "event_type": "ping",
            "status": "ok",
            "zen": ping_data["zen"],
        }

    def _handle_unsupported(self, event_type: str) -> dict[str, Any]:
        logger.info("Ignoring unhandled event type", extra={"event_type": event_type})
        return {
            "event_type": event_type,
            "status": "ignored",
        }
