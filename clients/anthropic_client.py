"""Anthropic (Claude) adapter using LangChain's ChatAnthropic.

Screenshots are sent as base64 ``image`` blocks. Claude returns one
completion per request, so candidate solutions are produced by sequential
requests, each asking for a solution that differs from the previous ones.

LangChain handles:
- Retry logic with exponential backoff (max_retries parameter)
- Request timeouts (timeout parameter)
- Token usage reporting (usage_metadata)
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage

from clients import prompts
from clients.base import SOLUTION_COUNT, AIClient, load_client_defaults
from modules.logger import setup_logger
from modules.types import (
    DEFAULT_IMAGE_MIME_TYPE,
    AIClientConfig,
    ProcessingResult,
    ProviderModelConfig,
    Screenshot,
)

logger = setup_logger(__name__)


class AnthropicClient(AIClient):
    """Anthropic (Claude) provider adapter."""

    display_name = "Anthropic"
    default_models = ProviderModelConfig(
        vision_model="claude-sonnet-4-5",
        solution_model="claude-sonnet-4-5",
        extraction_temperature=0.2,
        extraction_max_tokens=4000,
        solution_temperature=0.7,
        solution_max_tokens=4096,
    )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    def _create_chat_model(self, config: AIClientConfig) -> ChatAnthropic:
        default_timeout, default_retries = load_client_defaults()
        llm_kwargs: Dict[str, Any] = {
            "api_key": config.api_key,
            "model": self.models.vision_model,
            "max_tokens": self.models.extraction_max_tokens,
            "timeout": config.resolved_timeout(default_timeout),
            "max_retries": config.resolved_max_retries(default_retries),
        }
        if config.base_url:
            llm_kwargs["base_url"] = config.base_url
        return ChatAnthropic(**llm_kwargs)  # type: ignore[call-arg]

    def _image_block(self, base64_data: str, mime_type: str) -> Dict[str, Any]:
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": mime_type,
                "data": base64_data,
            },
        }

    async def extract_problem_info(
        self,
        images: Sequence[str],
        language: str,
    ) -> ProcessingResult:
        llm = self._require_client()
        messages = self._vision_messages(
            prompts.EXTRACTION_SYSTEM_PROMPT,
            prompts.render(prompts.EXTRACTION_USER_PROMPT, language=language),
            [(data, DEFAULT_IMAGE_MIME_TYPE) for data in images],
        )
        with self._provider_errors("extracting problem info", "Failed to extract problem info with Anthropic"):
            return await self._request_processing_result(llm, messages)

    async def generate_solutions(
        self,
        problem_info: ProcessingResult,
        language: str,
    ) -> List[str]:
        llm = self._require_client()
        messages = [
            SystemMessage(
                content=prompts.render(prompts.SOLUTION_VARIANT_SYSTEM_PROMPT, language=language)
            ),
            HumanMessage(content=problem_info.to_json()),
        ]
        call_kwargs: Dict[str, Any] = {
            "model": self.models.solution_model,
            "temperature": self.models.solution_temperature,
        }
        if self.models.solution_max_tokens is not None:
            call_kwargs["max_tokens"] = self.models.solution_max_tokens

        solutions: List[str] = []
        with self._provider_errors("generating solutions", "Failed to generate solutions with Anthropic"):
            for index in range(SOLUTION_COUNT):
                response = await llm.ainvoke(messages, **call_kwargs)
                self._log_usage(response)
                solutions.append(self.message_text(response))
                logger.debug(f"Generated Anthropic solution {index + 1}/{SOLUTION_COUNT}")
        return solutions

    async def process_extra_screenshots(
        self,
        screenshots: Sequence[Screenshot],
        existing_info: ProcessingResult,
    ) -> ProcessingResult:
        llm = self._require_client()
        messages = self._vision_messages(
            prompts.UPDATE_SYSTEM_PROMPT,
            prompts.render(prompts.UPDATE_USER_PROMPT, existing_info=existing_info.to_json()),
            [(shot.base64, shot.mime_type) for shot in screenshots],
        )
        with self._provider_errors(
            "processing extra screenshots", "Failed to process extra screenshots with Anthropic"
        ):
            return await self._request_processing_result(llm, messages)
