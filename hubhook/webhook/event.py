"""Delivery assembly: authenticate, then decode."""

from __future__ import annotations

from collections.abc import Mapping  # noqa: TC003
from dataclasses import dataclass
from typing import Any

from hubhook.utils.logging import get_logger
from hubhook.webhook.errors import BadSignatureError
from hubhook.webhook.parser import PayloadParser
from hubhook.webhook.request import RawRequest  # noqa: TC001
from hubhook.webhook.validators import SignatureReason, SignatureResult, SignatureVerifier

logger = get_logger("webhook.event")


@dataclass(frozen=True)
class WebhookEvent:
    """An authenticated, decoded delivery handed to application code."""

    raw: RawRequest
    signature: SignatureResult
    payload: Any = None

    @property
    def body(self) -> bytes:
        return self.raw.body

    @property
    def headers(self) -> Mapping[str, str]:
        return self.raw.headers

    @property
    def verified(self) -> bool:
        return self.signature.verified

    @property
    def authenticated(self) -> bool:
        """True only when a secret was configured and the signature matched."""
        return self.signature.reason is SignatureReason.MATCH

    @property
    def event_type(self) -> str:
        return self.raw.event_type

    @property
    def delivery_id(self) -> str:
        return self.raw.delivery_id


def receive(
    secret: bytes | str | None,
    raw: RawRequest,
    *,
    verifier: SignatureVerifier | None = None,
    parser: PayloadParser | None = None,
) -> WebhookEvent:
    """Authenticate a delivery and decode its payload.

    The signature is checked over ``raw.body`` before anything is decoded.

    Args:
        secret: The shared webhook secret, or None to accept unsigned deliveries.
        raw: The captured delivery.
        verifier: Signature verifier. Uses default GitHub headers if not provided.
        parser: Payload parser. Uses the ``payload`` form field if not provided.

    Returns:
        WebhookEvent with the decoded payload.

    Raises:
        BadSignatureError: If a secret is configured and the delivery is not authentic.
        UnsupportedContentTypeError: If the content type has no decoder.
        MalformedPayloadError: If the body is not well-formed.
    """
    verifier = verifier or SignatureVerifier()
    parser = parser or PayloadParser()

    result = verifier.verify(secret, raw.body, raw.headers)
    log_extra = {
        "delivery_id": raw.delivery_id,
        "event_type": raw.event_type,
        "verification": result.reason.value,
    }

    if not result.verified:
        logger.warning("Rejected webhook delivery", extra=log_extra)
        raise BadSignatureError(result)

    if result.reason is SignatureReason.NO_SECRET_CONFIGURED:
        logger.warning("Accepting unauthenticated webhook delivery", extra=log_extra)
    else:
        logger.info(
            "Webhook signature verified",
            extra={**log_extra, "algorithm": result.algorithm},
        )

    payload = parser.parse(raw)
    return WebhookEvent(raw=raw, signature=result, payload=payload)
