"""Pytest fixtures and configuration for the AI client tests.

Shared data, image and configuration fixtures. No test talks to a real provider.
"""

from __future__ import annotations

import base64
import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Generator
from unittest.mock import patch

import pytest

from modules.types import AIClientConfig, ProcessingResult, Screenshot

# Smallest valid PNG signature plus padding; the clients never decode images
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


# ============================================================================
# Path Fixtures
# ============================================================================
@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_png_file(temp_dir: Path) -> Path:
    """Write a small PNG file and return its path."""
    path = temp_dir / "screenshot.png"
    path.write_bytes(PNG_BYTES)
    return path


# ============================================================================
# Data Fixtures
# ============================================================================
@pytest.fixture
def sample_image_b64() -> str:
    return base64.b64encode(PNG_BYTES).decode("utf-8")


@pytest.fixture
def sample_screenshot(sample_image_b64: str) -> Screenshot:
    return Screenshot(base64=sample_image_b64)


@pytest.fixture
def problem_dict() -> Dict[str, str]:
    """Return a provider answer in the normalized schema."""
    return {
        "problem_statement": "Return the indices of the two numbers that add up to target.",
        "constraints": "2 <= nums.length <= 10^4",
        "example_input": "nums = [2,7,11,15], target = 9",
        "example_output": "[0,1]",
    }


@pytest.fixture
def problem_json(problem_dict: Dict[str, str]) -> str:
    return json.dumps(problem_dict)


@pytest.fixture
def fenced_problem_json(problem_json: str) -> str:
    """The same answer wrapped in a markdown code fence."""
    return f"```json\n{problem_json}\n```"


@pytest.fixture
def sample_problem(problem_dict: Dict[str, str]) -> ProcessingResult:
    return ProcessingResult(**problem_dict)


# ============================================================================
# Configuration Fixtures
# ============================================================================
@pytest.fixture
def client_config() -> AIClientConfig:
    return AIClientConfig(api_key="test-key")


@pytest.fixture
def mock_api_keys():
    """Set up mock API keys for testing."""
    with patch.dict(os.environ, {
        "OPENAI_API_KEY": "test-openai-key",
        "ANTHROPIC_API_KEY": "test-anthropic-key",
    }):
        yield
