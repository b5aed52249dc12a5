"""Payload decoding by declared content type."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qs

from hubhook.utils.logging import get_logger
from hubhook.webhook.errors import MalformedPayloadError, UnsupportedContentTypeError
from hubhook.webhook.request import RawRequest  # noqa: TC001

logger = get_logger("webhook.parser")

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
DEFAULT_PAYLOAD_FIELD = "payload"


def media_type(content_type: str) -> str:
    """Return the primary type token of a Content-Type value, without parameters."""
    return content_type.split(";", 1)[0].strip()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_json(data: bytes | str) -> Any:
    """Decode a JSON document, failing on anything not well-formed.

    Raises:
        MalformedPayloadError: If the document is not valid JSON.
    """
    try:
        return json.loads(data, parse_constant=_reject_constant)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise MalformedPayloadError(f"Invalid JSON: {e}") from e


class PayloadParser:
    """Turns an authenticated RawRequest into a structured value tree."""

    def __init__(self, payload_field: str = DEFAULT_PAYLOAD_FIELD) -> None:
        if not payload_field:
            raise ValueError("payload_field must not be empty")
        self.payload_field = payload_field

    def parse(self, raw: RawRequest) -> Any:
        """Decode the body of a delivery.

        Args:
            raw: The captured delivery.

        Returns:
            Decoded JSON value (dict, list or scalar).

        Raises:
            UnsupportedContentTypeError: If the content type is not JSON or form data.
            MalformedPayloadError: If the body is not well-formed.
        """
        kind = media_type(raw.content_type)

        if kind == JSON_CONTENT_TYPE:
            return decode_json(raw.body)
        if kind == FORM_CONTENT_TYPE:
            return decode_json(self._form_field(raw.body))

        logger.info("Rejecting unsupported content type", extra={"content_type": raw.content_type})
        raise UnsupportedContentTypeError(raw.content_type)

    def _form_field(self, body: bytes) -> str:
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPayloadError(f"Form body is not valid UTF-8: {e}") from e

        try:
            fields = parse_qs(text, keep_blank_values=True, errors="strict")
        except (ValueError, UnicodeDecodeError) as e:
            raise MalformedPayloadError(f"Invalid form body: {e}") from e

        values = fields.get(self.payload_field)
        if not values:
            raise MalformedPayloadError(f"Missing '{self.payload_field}' field in form body")
        return values[0]
