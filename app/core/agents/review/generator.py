"""
Review generation with retry on interrupted completion calls.
"""
import logging
import threading
from typing import Optional

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from app.core.agents.review.completion import CompletionPort
from app.core.config import settings
from app.core.exceptions import CompletionError, ModelError, RequestInterruptedError

logger = logging.getLogger(__name__)


def _is_interruption(error: BaseException) -> bool:
    return isinstance(error, CompletionError) and error.is_interruption


class ReviewGenerator:
    """
    Invoke the completion port for one unit of work (a file, a chunk or a
    whole single-file review).

    Timeouts and cancellations are retried with linear backoff
    (backoff_seconds * attempt number); everything else, an exhausted
    attempt budget and an empty answer become ModelError. Setting the cancel
    event while a backoff wait is pending raises RequestInterruptedError.
    """

    def __init__(
        self,
        completion: CompletionPort,
        max_attempts: int = settings.REVIEW_MAX_ATTEMPTS,
        backoff_seconds: float = settings.REVIEW_BACKOFF_SECONDS,
        cancel_event: Optional[threading.Event] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.completion = completion
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.cancel_event = cancel_event or threading.Event()

    def cancel(self) -> None:
        """Abort any pending or future backoff wait."""
        self.cancel_event.set()

    def generate(self, prompt: str, identifier: str = "review") -> str:
        """
        Generate review text for a prompt.

        Args:
            prompt: Prompt to send
            identifier: File path or chunk label used in log lines

        Returns:
            Non-empty review text

        Raises:
            ModelError: Non-retryable failure, attempts exhausted or empty response
            RequestInterruptedError: Cancelled while waiting to retry
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.backoff_seconds, increment=self.backoff_seconds),
            retry=retry_if_exception(_is_interruption),
            sleep=self._sleep,
            before_sleep=lambda retry_state: self._log_retry(identifier, retry_state),
            reraise=True,
        )

        logger.info(f"Generating review for {identifier}")
        try:
            review = retrying(self.completion.complete, prompt)
        except CompletionError as e:
            if e.is_interruption:
                message = f"Model call for {identifier} kept failing after {self.max_attempts} attempts: {e}"
            else:
                message = f"Model call for {identifier} failed: {e}"
            logger.error(message)
            raise ModelError(message, details={"failure": e.kind.value}) from e

        if review is None or not review.strip():
            logger.error(f"Model returned an empty response for {identifier}")
            raise ModelError(f"AI model returned an empty response for {identifier}")

        return review

    def _sleep(self, seconds: float) -> None:
        if self.cancel_event.wait(seconds):
            raise RequestInterruptedError(
                "Review was cancelled while waiting to retry the model call"
            )

    def _log_retry(self, identifier: str, retry_state: RetryCallState) -> None:
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"Model call for {identifier} interrupted on attempt "
            f"{retry_state.attempt_number}/{self.max_attempts}, retrying in {wait}s"
        )
