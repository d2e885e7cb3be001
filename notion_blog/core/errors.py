"""Exceptions raised by the Notion blog client.

Not-found lookups are never errors: they return ``None`` or an empty list.
"""

from typing import Any, Dict, Optional


class NotionClientError(Exception):
    """Base exception for the client."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(NotionClientError):
    """Required configuration (API secret, database id) is missing."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class TransportError(NotionClientError):
    """A single page fetch failed: timeout, network, HTTP status or malformed payload."""

    def __init__(
        self,
        message: str = "Notion request failed",
        details: Optional[Dict[str, Any]] = None,
        *,
        status_code: Optional[int] = None,
        retryable: bool = True,
    ):
        self.status_code = status_code
        self.retryable = retryable
        super().__init__("TRANSPORT_ERROR", message, details)


class NormalizationError(NotionClientError):
    """A remote record lacks a required field and cannot be converted."""

    def __init__(self, message: str = "Record normalization failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("NORMALIZATION_ERROR", message, details)
