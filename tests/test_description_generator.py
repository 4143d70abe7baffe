"""Tests for guideline description generation."""
from unittest.mock import MagicMock

from langchain_core.messages import AIMessage

from app.core.agents.guidelines.description_generator import DescriptionGenerator
from app.core.agents.guidelines.prompts import FALLBACK_DESCRIPTION


def llm_answering(content: str) -> MagicMock:
    llm = MagicMock()
    llm.invoke.return_value = AIMessage(content=content)
    return llm


class TestDescriptionGenerator:
    """Model-backed description with a fixed fallback."""

    def test_plain_json(self):
        llm = llm_answering('{"description": "Java naming rules."}')

        assert DescriptionGenerator(llm=llm).generate("Classes use PascalCase.") == "Java naming rules."

    def test_fenced_json(self):
        llm = llm_answering('```json\n{"description": "Java naming rules."}\n```')

        assert DescriptionGenerator(llm=llm).generate("Classes use PascalCase.") == "Java naming rules."

    def test_invalid_json_falls_back(self):
        llm = llm_answering("Here is your description: naming rules")

        assert DescriptionGenerator(llm=llm).generate("Classes use PascalCase.") == FALLBACK_DESCRIPTION

    def test_model_failure_falls_back(self):
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("service unavailable")

        assert DescriptionGenerator(llm=llm).generate("Classes use PascalCase.") == FALLBACK_DESCRIPTION

    def test_blank_description_falls_back(self):
        llm = llm_answering('{"description": "  "}')

        assert DescriptionGenerator(llm=llm).generate("Classes use PascalCase.") == FALLBACK_DESCRIPTION

    def test_empty_text_skips_the_model(self):
        llm = MagicMock()

        assert DescriptionGenerator(llm=llm).generate("   ") == FALLBACK_DESCRIPTION
        llm.invoke.assert_not_called()

    def test_long_text_is_truncated(self):
        llm = llm_answering('{"description": "Long page."}')

        DescriptionGenerator(llm=llm).generate("a" * 5000)

        human = llm.invoke.call_args.args[0][1]
        assert human.content.endswith("a" * 4000 + "...")
        assert "a" * 4001 not in human.content
