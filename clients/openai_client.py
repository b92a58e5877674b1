"""OpenAI adapter using LangChain's ChatOpenAI.

Screenshots are sent as ``image_url`` parts carrying data URLs. Candidate
solutions come from a single request asking for ``n=3`` completions.

LangChain handles:
- Retry logic with exponential backoff (max_retries parameter)
- Request timeouts (timeout parameter)
- Token usage reporting (usage_metadata)
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from clients import prompts
from clients.base import SOLUTION_COUNT, AIClient, load_client_defaults
from modules.error_handler import APIError
from modules.logger import setup_logger
from modules.types import (
    DEFAULT_IMAGE_MIME_TYPE,
    AIClientConfig,
    ProcessingResult,
    ProviderModelConfig,
    Screenshot,
)

logger = setup_logger(__name__)


class OpenAIClient(AIClient):
    """OpenAI provider adapter."""

    display_name = "OpenAI"
    default_models = ProviderModelConfig(
        vision_model="gpt-4o",
        solution_model="gpt-4o",
        extraction_temperature=0.2,
        extraction_max_tokens=4000,
        solution_temperature=0.7,
    )

    @property
    def provider_name(self) -> str:
        return "openai"

    def _create_chat_model(self, config: AIClientConfig) -> ChatOpenAI:
        default_timeout, default_retries = load_client_defaults()
        llm_kwargs: Dict[str, Any] = {
            "api_key": config.api_key,
            "model": self.models.vision_model,
            "timeout": config.resolved_timeout(default_timeout),
            "max_retries": config.resolved_max_retries(default_retries),
        }
        if config.base_url:
            llm_kwargs["base_url"] = config.base_url
        return ChatOpenAI(**llm_kwargs)

    def _image_block(self, base64_data: str, mime_type: str) -> Dict[str, Any]:
        return {
            "type": "image_url",
            "image_url": {"url": self.create_data_url(base64_data, mime_type)},
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
        with self._provider_errors("extracting problem info", "Failed to extract problem info with OpenAI"):
            return await self._request_processing_result(llm, messages)

    async def generate_solutions(
        self,
        problem_info: ProcessingResult,
        language: str,
    ) -> List[str]:
        llm = self._require_client()
        messages = [
            SystemMessage(content=prompts.render(prompts.SOLUTIONS_SYSTEM_PROMPT, language=language)),
            HumanMessage(content=problem_info.to_json()),
        ]
        with self._provider_errors("generating solutions", "Failed to generate solutions with OpenAI"):
            result = await llm.agenerate(
                [messages],
                model=self.models.solution_model,
                temperature=self.models.solution_temperature,
                n=SOLUTION_COUNT,
            )
            generations = result.generations[0] if result.generations else []
            if len(generations) != SOLUTION_COUNT:
                raise APIError(
                    f"Expected {SOLUTION_COUNT} solutions from OpenAI, got {len(generations)}"
                )
            # Usage covers the whole batch and is repeated on every choice
            self._log_usage(generations[0].message)
            return [self.message_text(generation.message) for generation in generations]

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
            "processing extra screenshots", "Failed to process extra screenshots with OpenAI"
        ):
            return await self._request_processing_result(llm, messages)
