"""Tests for clients/prompts.py - Prompt templates."""

from __future__ import annotations

import pytest

from clients import prompts


class TestRender:

    def test_fills_placeholder(self):
        assert prompts.render("Solve in {language}.", language="go") == "Solve in go."

    def test_empty_template(self):
        with pytest.raises(ValueError, match="template cannot be empty"):
            prompts.render("")

    def test_missing_placeholder(self):
        with pytest.raises(ValueError, match="language"):
            prompts.render(prompts.EXTRACTION_USER_PROMPT)

    def test_extra_values_ignored(self):
        assert prompts.render("plain", language="go") == "plain"


class TestTemplates:

    @pytest.mark.parametrize("template", [
        prompts.EXTRACTION_SYSTEM_PROMPT,
        prompts.UPDATE_SYSTEM_PROMPT,
    ])
    def test_json_prompts_name_every_field(self, template):
        for field in ("problem_statement", "constraints", "example_input", "example_output"):
            assert field in template

    @pytest.mark.parametrize("template", [
        prompts.EXTRACTION_USER_PROMPT,
        prompts.SOLUTIONS_SYSTEM_PROMPT,
        prompts.SOLUTION_VARIANT_SYSTEM_PROMPT,
    ])
    def test_language_prompts(self, template):
        assert "kotlin" in prompts.render(template, language="kotlin")

    def test_update_prompt_embeds_existing_info(self):
        rendered = prompts.render(prompts.UPDATE_USER_PROMPT, existing_info='{"constraints": "n <= 5"}')
        assert rendered.startswith('Existing info: {"constraints": "n <= 5"}\n')
