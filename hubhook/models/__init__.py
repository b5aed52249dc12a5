"""Data models for hubhook."""

from hubhook.models.config import DEFAULT_SECRET_ENV, ReceiverConfig

__all__ = [
    "DEFAULT_SECRET_ENV",
    "ReceiverConfig",
]
