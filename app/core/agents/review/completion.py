"""
Completion adapter: prompt in, text out, failures tagged at the boundary.
"""
import asyncio
import concurrent.futures
import logging
from typing import Iterator, Optional, Protocol

import httpx
import openai
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage

from app.core.exceptions import CompletionError, CompletionFailureKind
from app.core.llm_config import LLMFactory

logger = logging.getLogger(__name__)

TIMEOUT_ERRORS = (openai.APITimeoutError, httpx.TimeoutException, TimeoutError)
CANCELLED_ERRORS = (InterruptedError, concurrent.futures.CancelledError, asyncio.CancelledError)


class CompletionPort(Protocol):
    """Anything that turns a prompt into generated text."""

    def complete(self, prompt: str) -> Optional[str]:
        ...


def _exception_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield an exception followed by its causes, stopping at a repeat."""
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def classify_failure(error: BaseException) -> CompletionFailureKind:
    """
    Decide whether a transport failure was a timeout, a cancellation or neither.

    Wrapped failures count too: the whole cause chain is inspected.
    """
    chain = list(_exception_chain(error))
    if any(isinstance(e, TIMEOUT_ERRORS) for e in chain):
        return CompletionFailureKind.TIMEOUT
    if any(isinstance(e, CANCELLED_ERRORS) for e in chain):
        return CompletionFailureKind.CANCELLED
    return CompletionFailureKind.OTHER


class ChatCompletionAdapter:
    """
    Sends a single user message to a LangChain chat model.

    Every failure leaves this class as a CompletionError whose kind tells the
    caller whether the call may be retried.
    """

    def __init__(self, llm: Optional[BaseChatModel] = None):
        self.llm = llm or LLMFactory.create_llm(tracing_project="code-review")

    def complete(self, prompt: str) -> Optional[str]:
        """
        Generate text for a prompt.

        Args:
            prompt: Full prompt text

        Returns:
            Generated text, or None when the model returned no content

        Raises:
            CompletionError: Tagged TIMEOUT, CANCELLED or OTHER
        """
        try:
            response = self.llm.invoke([HumanMessage(content=prompt)])
        except (Exception, asyncio.CancelledError) as e:
            kind = classify_failure(e)
            logger.warning(f"Completion call failed ({kind.value}): {e}")
            raise CompletionError(str(e) or type(e).__name__, kind=kind) from e

        content = getattr(response, "content", None)
        if content is None:
            return None
        return str(content)
