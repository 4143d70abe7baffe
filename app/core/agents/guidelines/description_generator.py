"""
Short descriptions for guideline documents.
"""
import json
import logging
import re
from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from app.core.agents.guidelines.prompts import (
    DESCRIPTION_SYSTEM_PROMPT,
    DESCRIPTION_USER_PROMPT_TEMPLATE,
    FALLBACK_DESCRIPTION,
)
from app.core.llm_config import LLMFactory

logger = logging.getLogger(__name__)

CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


class DescriptionGenerator:
    """Asks the chat model for a 2-3 sentence summary of a page."""

    MAX_CONTENT_CHARS = 4000

    def __init__(self, llm: Optional[BaseChatModel] = None):
        self._llm = llm

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = LLMFactory.create_llm(
                temperature=0.3,
                json_mode=True,
                tracing_project="guideline-description",
            )
        return self._llm

    def generate(self, text: str) -> str:
        """
        Describe a page's plain text.

        Never raises; the fallback description is returned when the text is
        empty or the model call or its JSON cannot be used.
        """
        content = (text or "").strip()
        if not content:
            logger.warning("No content to describe, using fallback description")
            return FALLBACK_DESCRIPTION

        if len(content) > self.MAX_CONTENT_CHARS:
            content = content[:self.MAX_CONTENT_CHARS] + "..."

        try:
            response = self.llm.invoke([
                SystemMessage(content=DESCRIPTION_SYSTEM_PROMPT),
                HumanMessage(content=DESCRIPTION_USER_PROMPT_TEMPLATE.format(content=content)),
            ])
            payload = json.loads(CODE_FENCE.sub("", str(response.content).strip()))
            description = str(payload.get("description", "")).strip()
        except Exception as e:
            logger.error(f"Error generating description: {e}")
            return FALLBACK_DESCRIPTION

        return description or FALLBACK_DESCRIPTION
