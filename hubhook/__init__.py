"""hubhook - signed webhook receiver for GitHub deliveries."""

__version__ = "0.1.0"
