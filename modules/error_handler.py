"""Error classification for the AI client layer.

All failures surface as subclasses of ``ProcessingError`` carrying a
human-readable message. Provider failures are wrapped into ``APIError`` by
``wrap_provider_error`` so callers only need to handle one hierarchy.
"""

from __future__ import annotations

from typing import Any


# ============================================================================
# Error Classification
# ============================================================================
class ProcessingError(Exception):
    """Base exception for every AI client failure."""


class ConfigurationError(ProcessingError):
    """Exception for configuration-related errors."""


class UnknownProviderError(ConfigurationError):
    """Raised when a provider identifier is not recognized."""


class ProviderNotImplementedError(ConfigurationError):
    """Raised for reserved providers that have no adapter yet."""


class ClientNotInitializedError(ProcessingError):
    """Raised when an adapter is used before ``initialize`` succeeded."""


class APIError(ProcessingError):
    """Exception for API-related errors."""


class EmptyResponseError(APIError):
    """The provider returned no text."""


class MalformedResponseError(APIError):
    """The provider's text could not be parsed into the expected JSON."""


# ============================================================================
# Error Handlers
# ============================================================================
def wrap_provider_error(error: Exception, fallback_message: str) -> ProcessingError:
    """
    Turn an exception raised while talking to a provider into a ProcessingError.

    Errors already in the ProcessingError hierarchy are returned unchanged.
    Anything else becomes an ``APIError`` with the original message, or
    ``fallback_message`` when the original has none.

    Args:
        error: The exception caught around the provider call
        fallback_message: Message used when ``str(error)`` is empty

    Returns:
        The exception to raise (chain it with ``from error``)
    """
    if isinstance(error, ProcessingError):
        return error
    message = str(error).strip()
    return APIError(message or fallback_message)


# ============================================================================
# Validation Helpers
# ============================================================================
def validate_config_value(
    value: Any,
    expected_type: type | tuple[type, ...],
    name: str,
    allow_none: bool = False,
) -> None:
    """Validate a configuration value, raising ConfigurationError on mismatch."""
    if value is None and allow_none:
        return

    if isinstance(value, bool) and bool not in (
        expected_type if isinstance(expected_type, tuple) else (expected_type,)
    ):
        # bool is an int subclass; reject it for numeric settings
        raise ConfigurationError(
            f"Invalid configuration for '{name}': expected "
            f"{_type_names(expected_type)}, got bool"
        )

    if not isinstance(value, expected_type):
        raise ConfigurationError(
            f"Invalid configuration for '{name}': expected {_type_names(expected_type)}, "
            f"got {type(value).__name__}"
        )


def _type_names(expected_type: type | tuple[type, ...]) -> str:
    if isinstance(expected_type, tuple):
        return " or ".join(t.__name__ for t in expected_type)
    return expected_type.__name__


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "ProcessingError",
    "ConfigurationError",
    "UnknownProviderError",
    "ProviderNotImplementedError",
    "ClientNotInitializedError",
    "APIError",
    "EmptyResponseError",
    "MalformedResponseError",
    "wrap_provider_error",
    "validate_config_value",
]
