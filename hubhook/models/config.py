"""Receiver configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from hubhook.webhook.parser import DEFAULT_PAYLOAD_FIELD, PayloadParser
from hubhook.webhook.validators import DEFAULT_SIGNATURE_HEADERS, SignatureVerifier

DEFAULT_SECRET_ENV = "GITHUB_WEBHOOK_SECRET"


def _secret_from_env(name: str) -> bytes | None:
    value = os.environ.get(name, "")
    return value.encode("utf-8") if value else None


@dataclass(frozen=True)
class ReceiverConfig:
    """Read-only settings shared by every delivery.

    A missing secret disables signature checking.
    """

    secret: bytes | None = field(default=None, repr=False)
    payload_field: str = DEFAULT_PAYLOAD_FIELD
    signature_headers: tuple[str, ...] = DEFAULT_SIGNATURE_HEADERS

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.secret is not None and not isinstance(self.secret, bytes):
            raise ValueError("secret must be bytes")

        if not isinstance(self.payload_field, str) or not self.payload_field:
            raise ValueError("payload_field must be a non-empty string")

        if not self.signature_headers or not all(
            isinstance(h, str) and h for h in self.signature_headers
        ):
            raise ValueError("signature_headers must be a non-empty list of header names")

    @property
    def verification_enabled(self) -> bool:
        return bool(self.secret)

    def verifier(self) -> SignatureVerifier:
        return SignatureVerifier(self.signature_headers)

    def parser(self) -> PayloadParser:
        return PayloadParser(self.payload_field)

    @classmethod
    def from_env(cls, secret_env: str = DEFAULT_SECRET_ENV) -> ReceiverConfig:
        """Create a configuration from environment variables.

        Args:
            secret_env: Name of the variable holding the webhook secret.

        Returns:
            ReceiverConfig instance.
        """
        return cls(secret=_secret_from_env(secret_env))

    @classmethod
    def from_file_config(cls, config: dict[str, Any]) -> ReceiverConfig:
        """Load configuration from a config file mapping.

        The secret itself is never read from the file, only the name of the
        environment variable that holds it.

        Args:
            config: Configuration dictionary (e.g., from .hubhook.yml).

        Returns:
            ReceiverConfig instance.
        """
        if "secret" in config:
            raise ValueError("Put the secret in an environment variable and set 'secret_env'")

        headers = config.get("signature_headers", list(DEFAULT_SIGNATURE_HEADERS))
        if isinstance(headers, str):
            headers = [headers]
        if not isinstance(headers, list):
            raise ValueError(f"signature_headers must be a list, got {type(headers).__name__}")

        return cls(
            secret=_secret_from_env(config.get("secret_env", DEFAULT_SECRET_ENV)),
            payload_field=config.get("payload_field", DEFAULT_PAYLOAD_FIELD),
            signature_headers=tuple(headers),
        )
