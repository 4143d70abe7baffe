"""
Code review endpoints.
"""
import asyncio
import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from app.core.agents.review.orchestrator import ReviewOrchestrator
from app.core.dependencies import get_review_orchestrator
from app.schemas.common import ErrorResponse
from app.schemas.review import ReviewRequest, ReviewResult

logger = logging.getLogger(__name__)

router = APIRouter()

DISCONNECT_POLL_SECONDS = 1.0


async def review_until_disconnect(
    orchestrator: ReviewOrchestrator,
    repository_url: str,
    is_disconnected: Callable[[], Awaitable[bool]],
    poll_seconds: float = DISCONNECT_POLL_SECONDS,
) -> ReviewResult:
    """
    Run a review in the threadpool, cancelling it once the client goes away.

    After cancellation the review still runs to its next retry wait, where it
    raises RequestInterruptedError.

    Args:
        orchestrator: Review pipeline for this request
        repository_url: Repository, tree or file URL
        is_disconnected: Reports whether the client has disconnected
        poll_seconds: Interval between disconnect checks

    Returns:
        The finished review
    """
    task = asyncio.ensure_future(run_in_threadpool(orchestrator.review, repository_url))
    cancelled = False
    while True:
        done, _ = await asyncio.wait({task}, timeout=poll_seconds)
        if done:
            return task.result()
        if not cancelled and await is_disconnected():
            logger.info(f"Client disconnected, cancelling review of {repository_url}")
            orchestrator.cancel()
            cancelled = True


@router.post(
    "",
    response_model=ReviewResult,
    responses={
        400: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def review_code(
    request: ReviewRequest,
    http_request: Request,
    orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator),
) -> ReviewResult:
    """
    Review a repository or a single file against the stored guidelines.

    Args:
        request: Repository, tree or file URL
        http_request: Raw request, watched for client disconnects
        orchestrator: Review pipeline

    Returns:
        Markdown review with the guideline excerpts used
    """
    return await review_until_disconnect(
        orchestrator, request.repository_url, http_request.is_disconnected
    )
