"""Base abstraction shared by every provider adapter.

``AIClient`` defines the contract the host application relies on:

- ``initialize`` / ``reset`` / ``is_initialized`` lifecycle around a single
  LangChain chat-model handle,
- ``extract_problem_info`` (screenshots -> ProcessingResult),
- ``generate_solutions`` (ProcessingResult -> three candidate solutions),
- ``process_extra_screenshots`` (existing result + screenshots -> updated result).

Adapters only decide how requests are shaped for their provider; response
normalization (fence stripping, JSON parsing, text extraction) lives here so
every provider produces the same result shape.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from modules.config_loader import get_config_loader
from modules.error_handler import (
    ClientNotInitializedError,
    EmptyResponseError,
    MalformedResponseError,
    wrap_provider_error,
)
from modules.logger import setup_logger
from modules.types import (
    AIClientConfig,
    ProcessingResult,
    ProviderModelConfig,
    Screenshot,
)

logger = setup_logger(__name__)

SOLUTION_COUNT = 3
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 2

_CODE_FENCE_PATTERN = re.compile(r"```json|```")

# (base64_data, mime_type)
ImagePayload = Tuple[str, str]


def load_client_defaults() -> Tuple[float, int]:
    """Load the default timeout and retry count from client.yaml."""
    cfg = get_config_loader().get_client_config()
    try:
        timeout = float(cfg.get("timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError):
        logger.warning(f"Invalid timeout in client config, using {DEFAULT_TIMEOUT}")
        timeout = DEFAULT_TIMEOUT
    try:
        max_retries = max(0, int(cfg.get("max_retries", DEFAULT_MAX_RETRIES)))
    except (TypeError, ValueError):
        logger.warning(f"Invalid max_retries in client config, using {DEFAULT_MAX_RETRIES}")
        max_retries = DEFAULT_MAX_RETRIES
    return timeout, max_retries


def load_model_config(provider: str, defaults: ProviderModelConfig) -> ProviderModelConfig:
    """Load a provider's model settings from model.yaml on top of ``defaults``."""
    section = get_config_loader().get_provider_model_config(provider)
    try:
        return ProviderModelConfig.from_dict(section, defaults)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid model config for {provider}: {e}. Using defaults.")
        return defaults


class AIClient(ABC):
    """Abstract base class for all provider adapters.

    Subclasses supply the chat-model construction, the provider's image
    content block and the three operations. The adapter holds exactly one
    piece of mutable state: the chat-model handle created by ``initialize``.
    """

    #: Human-readable provider name used in messages ("OpenAI", "Anthropic")
    display_name: str = ""
    #: Built-in model settings, overridden by model.yaml
    default_models: ProviderModelConfig

    def __init__(self, model_config: Optional[ProviderModelConfig] = None) -> None:
        self._llm: Optional[BaseChatModel] = None
        self.models = model_config or load_model_config(self.provider_name, self.default_models)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider identifier (e.g., 'openai', 'anthropic')."""

    @abstractmethod
    def _create_chat_model(self, config: AIClientConfig) -> BaseChatModel:
        """Build the underlying LangChain chat model."""

    def initialize(self, config: AIClientConfig) -> None:
        """Create the chat-model handle.

        On failure the adapter is left uninitialized and the error is re-raised.
        """
        try:
            self._llm = self._create_chat_model(config)
        except Exception as e:
            logger.error(f"Failed to initialize {self.display_name} client: {e}")
            self._llm = None
            raise
        logger.info(f"{self.display_name} client initialized successfully")

    def reset(self) -> None:
        """Discard the chat-model handle."""
        self._llm = None

    def is_initialized(self) -> bool:
        return self._llm is not None

    def _require_client(self) -> BaseChatModel:
        if self._llm is None:
            raise ClientNotInitializedError(f"{self.display_name} client not initialized")
        return self._llm

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    @abstractmethod
    async def extract_problem_info(
        self,
        images: Sequence[str],
        language: str,
    ) -> ProcessingResult:
        """Extract a structured problem from base64-encoded PNG screenshots.

        Args:
            images: Base64-encoded image data, one entry per screenshot
            language: Preferred solution language, passed as a hint

        Returns:
            The normalized ProcessingResult

        Raises:
            ClientNotInitializedError: If ``initialize`` has not succeeded
            EmptyResponseError: If the provider returned no text
            MalformedResponseError: If the text is not a JSON object
            APIError: For any other provider failure
        """

    @abstractmethod
    async def generate_solutions(
        self,
        problem_info: ProcessingResult,
        language: str,
    ) -> List[str]:
        """Generate ``SOLUTION_COUNT`` candidate solutions in ``language``."""

    @abstractmethod
    async def process_extra_screenshots(
        self,
        screenshots: Sequence[Screenshot],
        existing_info: ProcessingResult,
    ) -> ProcessingResult:
        """Merge details from additional screenshots into ``existing_info``."""

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------
    @abstractmethod
    def _image_block(self, base64_data: str, mime_type: str) -> Dict[str, Any]:
        """Return the provider's message content block for one image."""

    def _vision_messages(
        self,
        system_prompt: str,
        user_text: str,
        images: Sequence[ImagePayload],
    ) -> List[BaseMessage]:
        """Build a system message plus a user message of text and images."""
        content: List[Any] = [{"type": "text", "text": user_text}]
        content.extend(self._image_block(data, mime_type) for data, mime_type in images)
        return [
            SystemMessage(content=system_prompt),
            HumanMessage(content=content),
        ]

    async def _request_processing_result(
        self,
        llm: BaseChatModel,
        messages: List[BaseMessage],
    ) -> ProcessingResult:
        """Send a JSON-producing vision request and normalize the answer."""
        response = await llm.ainvoke(
            messages,
            model=self.models.vision_model,
            temperature=self.models.extraction_temperature,
            max_tokens=self.models.extraction_max_tokens,
        )
        self._log_usage(response)
        return self.parse_processing_result(self.message_text(response), self.display_name)

    @contextmanager
    def _provider_errors(self, action: str, fallback_message: str) -> Iterator[None]:
        """Log failures of a provider call and re-raise them as ProcessingError."""
        try:
            yield
        except Exception as e:
            logger.error(f"Error {action} with {self.display_name}: {e}")
            error = wrap_provider_error(e, fallback_message)
            if error is e:
                raise
            raise error from e

    def _log_usage(self, message: Any) -> None:
        usage = getattr(message, "usage_metadata", None)
        if isinstance(usage, dict) and usage.get("total_tokens"):
            logger.debug(
                f"[TOKEN] {self.display_name} call consumed {usage['total_tokens']:,} tokens "
                f"(input={usage.get('input_tokens', 0):,}, output={usage.get('output_tokens', 0):,})"
            )

    # ------------------------------------------------------------------
    # Response normalization
    # ------------------------------------------------------------------
    @staticmethod
    def strip_code_fences(text: str) -> str:
        """Remove markdown ```json / ``` fences and surrounding whitespace."""
        return _CODE_FENCE_PATTERN.sub("", text).strip()

    @staticmethod
    def message_text(message: Any) -> str:
        """Extract plain text from a chat-model message.

        Handles string content and lists of content blocks (text blocks are
        concatenated, other block types are skipped).
        """
        content = getattr(message, "content", message)
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts = []
            for block in content:
                if isinstance(block, str):
                    parts.append(block)
                elif isinstance(block, dict) and block.get("type") == "text":
                    parts.append(str(block.get("text", "")))
            return "".join(parts)
        return str(content)

    @classmethod
    def parse_processing_result(cls, text: Optional[str], provider: str) -> ProcessingResult:
        """Normalize a provider's raw text into a ProcessingResult.

        Raises:
            EmptyResponseError: If ``text`` is empty or whitespace
            MalformedResponseError: If the unfenced text is not a JSON object
        """
        if not text or not text.strip():
            raise EmptyResponseError(f"Empty response from {provider}")

        cleaned = cls.strip_code_fences(text)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"Invalid JSON in {provider} response: {e}") from e

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON object from {provider}, got {type(data).__name__}"
            )
        return ProcessingResult.from_dict(data)

    @staticmethod
    def create_data_url(base64_data: str, mime_type: str) -> str:
        """Create a data URL from base64 data."""
        return f"data:{mime_type};base64,{base64_data}"
