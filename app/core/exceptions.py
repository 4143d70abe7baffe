"""
Exception hierarchy for the code review service.

Every error that can reach an API caller derives from CodeReviewError and
carries an error_code, so handlers can map it to a response without
inspecting messages.
"""
from enum import Enum
from typing import Any, Dict, Optional


class CodeReviewError(Exception):
    """Base exception for all code review service errors."""

    error_code = "code_review_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class InvalidReviewRequestError(CodeReviewError):
    """Raised when a repository/file reference cannot be understood."""

    error_code = "invalid_request"


class ProviderError(CodeReviewError):
    """Raised when a code host cannot be reached or its answer cannot be parsed."""

    error_code = "provider_error"

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if provider:
            details["provider"] = provider
        super().__init__(message, details)


class RateLimitExceededError(ProviderError):
    """Raised when the code host reports an exhausted API rate limit."""

    error_code = "rate_limit_exceeded"


class InvalidGuidelineError(CodeReviewError):
    """Raised when a guideline document URL is malformed or already registered."""

    error_code = "invalid_guideline"


class ModelError(CodeReviewError):
    """Raised when the completion model gives up or returns nothing."""

    error_code = "model_error"


class RequestInterruptedError(CodeReviewError):
    """Raised when a review is cancelled while waiting to retry."""

    error_code = "request_interrupted"


class ConfluenceError(CodeReviewError):
    """Raised when documentation pages cannot be fetched or processed."""

    error_code = "confluence_error"


class ResourceNotFoundError(CodeReviewError):
    """Raised when a requested entity does not exist."""

    error_code = "not_found"


class CompletionFailureKind(str, Enum):
    """How a completion call failed, decided where the transport error is caught."""

    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    OTHER = "other"


class CompletionError(Exception):
    """
    Tagged failure raised by completion adapters.

    TIMEOUT and CANCELLED are transient and may be retried; OTHER is final.
    """

    def __init__(self, message: str, kind: CompletionFailureKind = CompletionFailureKind.OTHER):
        self.kind = kind
        super().__init__(message)

    @property
    def is_interruption(self) -> bool:
        return self.kind in (CompletionFailureKind.TIMEOUT, CompletionFailureKind.CANCELLED)


class UnsupportedProviderError(InvalidReviewRequestError):
    """Raised when no code host provider recognises a URL."""

    error_code = "unsupported_provider"
