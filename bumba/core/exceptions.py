"""Custom exceptions for the BUMBA routing framework.

This module defines the exception hierarchy used throughout BUMBA. All
exceptions inherit from BumbaError, enabling catch-all exception handling
while still allowing specific exception types.

Routing itself is fail-open: degenerate task descriptions lower the
confidence of a plan instead of raising. The exceptions below cover the
two places where failing fast is correct: bad configuration and
wrongly-typed input at the API boundary.

Exception Hierarchy:
    BumbaError (base)
    ├── ConfigurationError: Invalid configuration or settings
    │   └── RoutingTableError: Routing table data missing or malformed
    └── InvalidInputError: Wrongly-typed arguments at the routing API boundary

Each exception carries a machine-readable code (INVALID_INPUT,
ROUTING_TABLE_ERROR, ...) and a context dict; to_log_dict() flattens both
for structured log records.
"""

from typing import Any, Optional


class BumbaError(Exception):
    """Base exception for all BUMBA errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        context: Additional context information about the error
        recoverable: Whether the error is potentially recoverable
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "BUMBA_ERROR"
        self.context = context or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_log_dict(self) -> dict[str, Any]:
        """Return structured dict for logging.

        Returns:
            Dictionary with error details suitable for structured logging
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.code,
            "message": self.message,
            "recoverable": self.recoverable,
            "context": self.context,
        }


class ConfigurationError(BumbaError):
    """Raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that caused the error
        validation_details: Details about why validation failed
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        validation_details: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {}) or {}
        if config_key:
            context["config_key"] = config_key
        if validation_details:
            context["validation_details"] = validation_details
        code = kwargs.pop("code", None) or "CONFIG_ERROR"
        super().__init__(message, code=code, context=context, **kwargs)
        self.config_key = config_key
        self.validation_details = validation_details


class RoutingTableError(ConfigurationError):
    """Raised when a routing table cannot be read or fails validation.

    Attributes:
        table: Name of the table that failed (e.g. 'keywords', 'capabilities')
        source: Path or resource the table was loaded from
    """

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        source: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {}) or {}
        if table:
            context["table"] = table
        if source:
            context["source"] = source
        super().__init__(message, code="ROUTING_TABLE_ERROR", context=context, **kwargs)
        self.table = table
        self.source = source


class InvalidInputError(BumbaError):
    """Raised when routing input has the wrong type.

    Only type violations are reported this way; empty or unrecognised
    content is routed with low confidence instead.

    Attributes:
        field: Name of the offending argument (e.g. 'args', 'context.language_hint')
        expected: Description of the expected type
        received: Type name of the value actually received
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {}) or {}
        if field:
            context["field"] = field
        if expected:
            context["expected"] = expected
        if received:
            context["received"] = received
        super().__init__(message, code="INVALID_INPUT", context=context, **kwargs)
        self.field = field
        self.expected = expected
        self.received = received


__all__ = [
    "BumbaError",
    "ConfigurationError",
    "RoutingTableError",
    "InvalidInputError",
]
