from __future__ import annotations

"""Domain-specific exception hierarchy for the plugin SDK."""

from typing import Any

__all__ = [
    "DomainError",
    "ValidationError",
    "ParseError",
    "ConfigurationError",
]


class DomainError(Exception):
    """Base class for recoverable domain-level errors."""

    error_code: str = "domain_error"
    default_message: str = "Domain error"

    def __init__(
        self,
        message: str | None = None,
        *,
        detail: Any | None = None,
    ) -> None:
        final_message = message or self.default_message
        super().__init__(final_message)
        self.message = final_message
        self.detail = detail


class ValidationError(DomainError, ValueError):
    """Raised when caller-provided data fails validation."""

    error_code = "validation_error"
    default_message = "Invalid data"


class ParseError(ValidationError):
    """Raised when a text token cannot be decoded into a unit value."""

    error_code = "invalid_percentage"
    default_message = "Invalid percentage"

    def __init__(self, raw: str, message: str | None = None) -> None:
        super().__init__(
            message or f"invalid percentage: {raw!r}",
            detail={"raw": raw},
        )
        self.raw = raw


class ConfigurationError(DomainError):
    """Raised when runtime configuration is invalid or incomplete."""

    error_code = "configuration_error"
    default_message = "Invalid SDK configuration"
