"""Type definitions and data structures shared by every AI client.

Provides the normalized result schema returned by all providers, the
screenshot value consumed by the update flow and the per-adapter client
configuration.
"""

from __future__ import annotations

import base64
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from modules.error_handler import ConfigurationError, validate_config_value
from modules.logger import setup_logger

logger = setup_logger(__name__)

# Supported image formats and their MIME types
SUPPORTED_IMAGE_FORMATS: Dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

DEFAULT_IMAGE_MIME_TYPE = "image/png"

PROCESSING_RESULT_FIELDS = (
    "problem_statement",
    "constraints",
    "example_input",
    "example_output",
)


# ============================================================================
# Result Data Classes
# ============================================================================
@dataclass
class ProcessingResult:
    """Structured coding problem extracted from screenshots.

    Attributes:
        problem_statement: The task description
        constraints: Input limits and other constraints
        example_input: Sample input as shown in the problem
        example_output: Expected output for the sample input
    """

    problem_statement: str = ""
    constraints: str = ""
    example_input: str = ""
    example_output: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ProcessingResult:
        """Create a ProcessingResult from a parsed provider response.

        Missing fields become empty strings, non-string values are flattened
        to text and unknown keys are ignored.
        """
        missing = [name for name in PROCESSING_RESULT_FIELDS if name not in data]
        if missing:
            logger.warning(f"Provider response is missing fields: {', '.join(missing)}")

        return cls(**{name: _as_text(data.get(name)) for name in PROCESSING_RESULT_FIELDS})

    def to_dict(self) -> Dict[str, str]:
        """Convert to the four-field dictionary."""
        return asdict(self)

    def to_json(self) -> str:
        """Serialize compactly, the form sent back to providers."""
        return json.dumps(self.to_dict(), ensure_ascii=False)


def _as_text(value: Any) -> str:
    """Flatten a JSON value into the free-text form used by ProcessingResult."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "\n".join(_as_text(item) for item in value)
    return json.dumps(value, ensure_ascii=False)


# ============================================================================
# Input Data Classes
# ============================================================================
@dataclass(frozen=True)
class Screenshot:
    """A captured screenshot carried as base64 image data."""

    base64: str
    path: Optional[Path] = None
    mime_type: str = DEFAULT_IMAGE_MIME_TYPE

    @classmethod
    def from_file(cls, image_path: Path | str) -> Screenshot:
        """Read and encode an image file.

        Raises:
            ValueError: If the image format is not supported
        """
        path = Path(image_path)
        mime_type = SUPPORTED_IMAGE_FORMATS.get(path.suffix.lower())
        if not mime_type:
            raise ValueError(f"Unsupported image format: {path.suffix}")

        with open(path, "rb") as f:
            data = base64.b64encode(f.read()).decode("utf-8")

        return cls(base64=data, path=path, mime_type=mime_type)


# ============================================================================
# Configuration Data Classes
# ============================================================================
@dataclass(frozen=True)
class AIClientConfig:
    """Connection settings handed to an adapter's ``initialize``.

    Attributes:
        api_key: Provider API key
        base_url: Optional endpoint override (proxies, compatible gateways)
        timeout: Request timeout in seconds
        max_retries: Retries performed by the underlying client library
    """

    api_key: str
    base_url: Optional[str] = None
    timeout: Optional[float] = None
    max_retries: Optional[int] = None

    def __post_init__(self) -> None:
        validate_config_value(self.api_key, str, "api_key")
        validate_config_value(self.base_url, str, "base_url", allow_none=True)
        validate_config_value(self.timeout, (int, float), "timeout", allow_none=True)
        validate_config_value(self.max_retries, int, "max_retries", allow_none=True)
        if not self.api_key.strip():
            raise ConfigurationError("Invalid configuration for 'api_key': must not be empty")
        if self.timeout is not None and self.timeout < 0:
            raise ConfigurationError("Invalid configuration for 'timeout': must not be negative")
        if self.max_retries is not None and self.max_retries < 0:
            raise ConfigurationError("Invalid configuration for 'max_retries': must not be negative")

    def resolved_timeout(self, default: float) -> float:
        """Timeout to use; unset or zero falls back to ``default``."""
        return self.timeout or default

    def resolved_max_retries(self, default: int) -> int:
        """Retry count to use; unset or zero falls back to ``default``."""
        return self.max_retries or default


@dataclass(frozen=True)
class ProviderModelConfig:
    """Model identifiers and sampling settings for one provider."""

    vision_model: str
    solution_model: str
    extraction_temperature: float = 0.2
    extraction_max_tokens: int = 4000
    solution_temperature: float = 0.7
    solution_max_tokens: Optional[int] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any], defaults: ProviderModelConfig) -> ProviderModelConfig:
        """Overlay a ``model.yaml`` provider section on top of ``defaults``."""
        merged = asdict(defaults)
        for key in merged:
            if config.get(key) is not None:
                merged[key] = config[key]
        return cls(
            vision_model=str(merged["vision_model"]),
            solution_model=str(merged["solution_model"]),
            extraction_temperature=float(merged["extraction_temperature"]),
            extraction_max_tokens=int(merged["extraction_max_tokens"]),
            solution_temperature=float(merged["solution_temperature"]),
            solution_max_tokens=(
                int(merged["solution_max_tokens"])
                if merged["solution_max_tokens"] is not None
                else None
            ),
        )


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "SUPPORTED_IMAGE_FORMATS",
    "DEFAULT_IMAGE_MIME_TYPE",
    "PROCESSING_RESULT_FIELDS",
    "ProcessingResult",
    "Screenshot",
    "AIClientConfig",
    "ProviderModelConfig",
]
