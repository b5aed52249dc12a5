"""Signed webhook delivery handling."""

from hubhook.webhook.errors import (
    BadSignatureError,
    MalformedPayloadError,
    UnsupportedContentTypeError,
    WebhookError,
)
from hubhook.webhook.event import WebhookEvent, receive
from hubhook.webhook.handler import WebhookHandler, WebhookParseError
from hubhook.webhook.parser import PayloadParser
from hubhook.webhook.request import Headers, RawRequest
from hubhook.webhook.validators import (
    SignatureReason,
    SignatureResult,
    SignatureVerifier,
    compute_signature,
    verify_webhook_signature,
)

__all__ = [
    "BadSignatureError",
    "Headers",
    "MalformedPayloadError",
    "PayloadParser",
    "RawRequest",
    "SignatureReason",
    "SignatureResult",
    "SignatureVerifier",
    "UnsupportedContentTypeError",
    "WebhookError",
    "WebhookEvent",
    "WebhookHandler",
    "WebhookParseError",
    "compute_signature",
    "receive",
    "verify_webhook_signature",
]
