"""Prompt templates shared by the provider adapters.

Templates use ``{placeholder}`` fields filled in by ``render``.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "EXTRACTION_SYSTEM_PROMPT",
    "EXTRACTION_USER_PROMPT",
    "SOLUTIONS_SYSTEM_PROMPT",
    "SOLUTION_VARIANT_SYSTEM_PROMPT",
    "UPDATE_SYSTEM_PROMPT",
    "UPDATE_USER_PROMPT",
    "render",
]

EXTRACTION_SYSTEM_PROMPT = (
    "You are a coding challenge interpreter. Analyze the screenshots of the coding "
    "problem and extract all relevant information. Return the information in JSON "
    "format with these fields: problem_statement, constraints, example_input, "
    "example_output. Just return the structured JSON without any other text."
)

EXTRACTION_USER_PROMPT = (
    "Extract the coding problem details from these screenshots. Return in JSON "
    "format. Preferred coding language is {language}."
)

# Single request asking for several completions
SOLUTIONS_SYSTEM_PROMPT = (
    "You are a coding expert. Generate multiple solutions for the given problem "
    "in {language}."
)

# One request per solution
SOLUTION_VARIANT_SYSTEM_PROMPT = (
    "You are a coding expert. Generate a unique solution for the given problem "
    "in {language}. Make this solution different from previous solutions."
)

UPDATE_SYSTEM_PROMPT = (
    "Update the existing problem information with any new details from additional "
    "screenshots. Return the complete, updated information in JSON format with these "
    "fields: problem_statement, constraints, example_input, example_output. Just "
    "return the structured JSON without any other text."
)

UPDATE_USER_PROMPT = (
    "Existing info: {existing_info}\n"
    "Analyze these additional screenshots and update the information."
)


def render(template: str, **values: Any) -> str:
    """Fill a template's placeholders.

    Raises:
        ValueError: If the template is empty or a placeholder has no value
    """
    if not template:
        raise ValueError("template cannot be empty")
    try:
        return template.format(**values)
    except KeyError as e:
        raise ValueError(f"Missing value for prompt placeholder {e}") from e
