"""Raw delivery capture."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

CONTENT_TYPE_HEADER = "Content-Type"
EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"


class Headers(Mapping[str, str]):
    """Read-only header map with case-insensitive lookups.

    Iteration yields header names with the casing they were received in.
    """

    __slots__ = ("_items",)

    def __init__(self, headers: Mapping[str, str] | None = None) -> None:
        items: dict[str, tuple[str, str]] = {}
        for name, value in (headers or {}).items():
            items[name.lower()] = (name, value)
        self._items = items

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()][1]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"


def _to_bytes(body: bytes | bytearray | memoryview | str | None) -> bytes:
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


@dataclass(frozen=True)
class RawRequest:
    """The untouched body and headers of one delivery, captured at receipt.

    Signature verification runs over ``body`` exactly as stored here, so it is
    copied to immutable ``bytes`` once and never transformed afterwards.
    """

    body: bytes
    headers: Headers = field(default_factory=Headers)
    content_type: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "body", _to_bytes(self.body))
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))

    @classmethod
    def capture(
        cls,
        body: bytes | bytearray | memoryview | str | None,
        headers: Mapping[str, str] | None = None,
        content_type: str | None = None,
    ) -> RawRequest:
        """Capture a delivery.

        Args:
            body: Request body as received.
            headers: Request headers, any casing.
            content_type: Overrides the ``Content-Type`` header when given.

        Returns:
            RawRequest instance.
        """
        header_map = headers if isinstance(headers, Headers) else Headers(headers)
        if content_type is None:
            content_type = header_map.get(CONTENT_TYPE_HEADER, "")
        return cls(body=_to_bytes(body), headers=header_map, content_type=content_type)

    @classmethod
    def from_lambda_event(cls, event: dict[str, Any]) -> RawRequest:
        """Capture a delivery from an API Gateway proxy event.

        Args:
            event: Lambda event from API Gateway.

        Returns:
            RawRequest instance.

        Raises:
            ValueError: If a base64-encoded body cannot be decoded.
        """
        body = event.get("body") or b""
        if event.get("isBase64Encoded") and body:
            try:
                body = base64.b64decode(body, validate=True)
            except binascii.Error as e:
                raise ValueError(f"Invalid base64 request body: {e}") from e
        return cls.capture(body, event.get("headers") or {})

    @property
    def event_type(self) -> str:
        return self.headers.get(EVENT_HEADER, "")

    @property
    def delivery_id(self) -> str:
        return self.headers.get(DELIVERY_HEADER, "")
