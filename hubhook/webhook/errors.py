"""Exceptions raised while receiving a webhook delivery.

None of these messages carry the shared secret or a computed digest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hubhook.webhook.validators import SignatureReason, SignatureResult


class WebhookError(Exception):
    """Base class for delivery failures."""

    pass


class BadSignatureError(WebhookError):
    """Raised when a configured secret does not authenticate the delivery."""

    def __init__(self, result: SignatureResult) -> None:
        super().__init__(f"Webhook signature rejected: {result.reason.value}")
        self.result = result

    @property
    def reason(self) -> SignatureReason:
        return self.result.reason


class UnsupportedContentTypeError(WebhookError):
    """Raised when the delivery's content type has no decoder."""

    def __init__(self, content_type: str) -> None:
        super().__init__(f'Unsupported content type: "{content_type}"')
        self.content_type = content_type


class MalformedPayloadError(WebhookError):
    """Raised when the body is not well-formed structured data."""

    pass
