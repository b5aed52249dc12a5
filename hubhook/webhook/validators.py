"""Webhook signature validation."""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from hubhook.utils.logging import get_logger
from hubhook.webhook.request import Headers

logger = get_logger("webhook.validators")

SIGNATURE_256_HEADER = "X-Hub-Signature-256"
SIGNATURE_HEADER = "X-Hub-Signature"

# Newer header first; GitHub still sends the SHA-1 one alongside it
DEFAULT_SIGNATURE_HEADERS: tuple[str, ...] = (SIGNATURE_256_HEADER, SIGNATURE_HEADER)

SUPPORTED_ALGORITHMS: dict[str, Callable[..., Any]] = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}


class SignatureReason(str, Enum):
    """Why a delivery was or was not authenticated."""

    NO_SECRET_CONFIGURED = "no_secret_configured"
    HEADER_MISSING = "header_missing"
    HEADER_MALFORMED = "header_malformed"
    MISMATCH = "mismatch"
    MATCH = "match"


@dataclass(frozen=True)
class SignatureResult:
    """Outcome of one verification attempt."""

    verified: bool
    reason: SignatureReason
    algorithm: str | None = None
    header: str | None = None

    def __bool__(self) -> bool:
        return self.verified


def _as_key(secret: bytes | str) -> bytes:
    return secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)


def compute_signature(secret: bytes | str, body: bytes, algorithm: str = "sha256") -> str:
    """Compute a signature header value for ``body``.

    Args:
        secret: The shared webhook secret.
        body: The raw request body bytes.
        algorithm: ``sha1`` or ``sha256``.

    Returns:
        Header value in ``<algorithm>=<hexdigest>`` form.

    Raises:
        ValueError: If the algorithm is not supported.
    """
    algorithm = algorithm.lower()
    digestmod = SUPPORTED_ALGORITHMS.get(algorithm)
    if digestmod is None:
        raise ValueError(f"Unsupported signature algorithm: {algorithm}")
    return f"{algorithm}=" + hmac.new(_as_key(secret), body, digestmod).hexdigest()


class SignatureVerifier:
    """Checks the HMAC signature header of a delivery against the shared secret."""

    def __init__(self, header_names: Sequence[str] = DEFAULT_SIGNATURE_HEADERS) -> None:
        if not header_names:
            raise ValueError("At least one signature header name is required")
        self.header_names = tuple(header_names)

    def _find_header(self, headers: Mapping[str, str]) -> tuple[str, str] | None:
        for name in self.header_names:
            value = headers.get(name)
            if value is not None:
                return name, value
        return None

    def verify(
        self,
        secret: bytes | str | None,
        raw_body: bytes,
        headers: Mapping[str, str],
    ) -> SignatureResult:
        """Verify the signature of a raw request body.

        Args:
            secret: The shared webhook secret, or None when checking is disabled.
            raw_body: The raw request body bytes, exactly as received.
            headers: Request headers with case-insensitive lookups.

        Returns:
            SignatureResult describing the outcome.
        """
        if not secret:
            return SignatureResult(verified=True, reason=SignatureReason.NO_SECRET_CONFIGURED)

        if not isinstance(headers, Headers):
            headers = Headers(headers)

        found = self._find_header(headers)
        if found is None:
            logger.debug("Signature header missing", extra={"expected": list(self.header_names)})
            return SignatureResult(verified=False, reason=SignatureReason.HEADER_MISSING)

        header_name, value = found
        algorithm, sep, supplied = value.strip().partition("=")
        algorithm = algorithm.lower()
        if not sep or not supplied or algorithm not in SUPPORTED_ALGORITHMS:
            logger.debug("Signature header malformed", extra={"header": header_name})
            return SignatureResult(
                verified=False,
                reason=SignatureReason.HEADER_MALFORMED,
                header=header_name,
            )

        expected = hmac.new(_as_key(secret), raw_body, SUPPORTED_ALGORITHMS[algorithm]).hexdigest()
        matched = hmac.compare_digest(
            expected.encode("ascii"),
            supplied.lower().encode("utf-8", "replace"),
        )

        return SignatureResult(
            verified=matched,
            reason=SignatureReason.MATCH if matched else SignatureReason.MISMATCH,
            algorithm=algorithm,
            header=header_name,
        )


def verify_webhook_signature(
    payload: bytes,
    headers: Mapping[str, str],
    secret: bytes | str | None,
) -> SignatureResult:
    """Verify a delivery with the default GitHub signature headers."""
    return SignatureVerifier().verify(secret, payload, headers)
