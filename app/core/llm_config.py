import os
from typing import Optional
from langchain_openai import ChatOpenAI
from pydantic import SecretStr
from app.core.config import settings

class LLMFactory:
    """Factory for creating configured LLM instances with tracing."""

    @staticmethod
    def create_llm(
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        json_mode: bool = False,
        tracing_project: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: int = 0,
    ) -> ChatOpenAI:
        """
        Create a configured ChatOpenAI instance.

        Retries are left to callers so each can apply its own policy.

        Args:
            model: The model name to use (defaults to settings.CHAT_MODEL).
            temperature: The temperature for generation.
            json_mode: Whether to enforce JSON output.
            tracing_project: The LangSmith project name for tracing.
            api_key: OpenAI API key (optional, defaults to settings).
            timeout: Per-call timeout in seconds (defaults to settings.API_TIMEOUT_SECONDS).
            max_retries: Client-side retries inside the OpenAI SDK.
        """
        # Set env vars for tracing if provided
        if settings.LANGSMITH_TRACING:
            os.environ["LANGCHAIN_TRACING_V2"] = "true"
            os.environ["LANGCHAIN_ENDPOINT"] = settings.LANGSMITH_ENDPOINT
            os.environ["LANGCHAIN_API_KEY"] = settings.LANGSMITH_API_KEY
            os.environ["LANGCHAIN_PROJECT"] = tracing_project or settings.LANGSMITH_PROJECT

        model_kwargs = {"response_format": {"type": "json_object"}} if json_mode else {}

        return ChatOpenAI(
            model=model or settings.CHAT_MODEL,
            api_key=SecretStr(api_key or settings.OPENAI_API_KEY),
            temperature=settings.CHAT_TEMPERATURE if temperature is None else temperature,
            max_tokens=settings.CHAT_MAX_TOKENS,
            timeout=timeout if timeout is not None else settings.API_TIMEOUT_SECONDS,
            max_retries=max_retries,
            model_kwargs=model_kwargs,
        )
