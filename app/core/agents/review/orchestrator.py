"""
Code review agent: URL in, guideline-grounded review document out.
"""
import logging
import posixpath
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from langgraph.graph import StateGraph, END
from langgraph.graph.state import CompiledStateGraph

from app.core.agents.review.generator import ReviewGenerator
from app.core.agents.review.prompts import (
    CHUNK_ERROR_TEMPLATE,
    CHUNK_HEADING_TEMPLATE,
    CHUNK_LABEL_TEMPLATE,
    CHUNKED_REVIEW_INTRO_TEMPLATE,
    CODE_REVIEW_USER_PROMPT_TEMPLATE,
    DEFAULT_GUIDELINE_TITLE,
    FILE_ERROR_TEMPLATE,
    FILE_HEADING_TEMPLATE,
    FINAL_SUMMARY,
    NO_FILES_MESSAGE,
    PROJECT_REVIEW_INTRO,
    REVIEW_SUMMARY_HEADING,
)
from app.core.agents.review.schemas import (
    GuidelineExcerpt,
    ReviewableFile,
    ReviewResult,
    ReviewState,
)
from app.core.config import settings
from app.core.exceptions import InvalidReviewRequestError, ModelError, ProviderError
from app.core.helpers.code_chunker import CodeChunker
from app.core.helpers.retriever import GuidelineRetriever
from app.services.git.factory import ProviderFactory

logger = logging.getLogger(__name__)

SINGLE_FILE = "single_file"
PROJECT = "project"


def format_guidelines(chunks: List[Dict[str, Any]]) -> str:
    """Render retrieved chunks as the guideline block of a prompt."""
    return "\n\n".join(
        f"# {chunk.get('title') or DEFAULT_GUIDELINE_TITLE}\n{chunk.get('content', '')}"
        for chunk in chunks
    )


def build_review_prompt(repository_url: str, guidelines: str, code: str) -> str:
    return CODE_REVIEW_USER_PROMPT_TEMPLATE.format(
        repository_url=repository_url,
        guidelines=guidelines,
        code=code,
    )


class ReviewOrchestrator:
    """
    Runs one review request through the graph

        classify_url -> fetch_file | fetch_repository_files
                     -> retrieve_guidelines -> generate -> assemble

    Files of a project and chunks of a large file are reviewed one at a time
    in order. Errors raised by a node leave invoke() unchanged, so callers
    see the exception types from app.core.exceptions.
    """

    def __init__(
        self,
        provider_factory: ProviderFactory,
        generator: ReviewGenerator,
        retriever: Optional[GuidelineRetriever] = None,
        code_chunker: Optional[CodeChunker] = None,
        max_files_to_review: int = settings.MAX_FILES_TO_REVIEW,
        content_blocks_limit: int = settings.CONTENT_BLOCKS_LIMIT,
        file_chunk_size: int = settings.FILE_CHUNK_SIZE,
    ):
        self.provider_factory = provider_factory
        self.generator = generator
        self.retriever = retriever
        self.code_chunker = code_chunker or CodeChunker(file_chunk_size)
        self.max_files_to_review = max_files_to_review
        self.content_blocks_limit = content_blocks_limit
        self.file_chunk_size = file_chunk_size
        self.graph = self._build_graph()

    def _build_graph(self) -> CompiledStateGraph:
        """Build the LangGraph workflow."""
        workflow = StateGraph(ReviewState)

        # Add nodes
        workflow.add_node("classify_url", self._classify_url)
        workflow.add_node("fetch_file", self._fetch_file)
        workflow.add_node("fetch_repository_files", self._fetch_repository_files)
        workflow.add_node("retrieve_guidelines", self._retrieve_guidelines)
        workflow.add_node("generate_file_review", self._generate_file_review)
        workflow.add_node("generate_project_review", self._generate_project_review)
        workflow.add_node("assemble", self._assemble)

        # Define routing logic
        workflow.set_entry_point("classify_url")
        workflow.add_conditional_edges(
            "classify_url",
            self._route_by_mode,
            {SINGLE_FILE: "fetch_file", PROJECT: "fetch_repository_files"},
        )
        workflow.add_edge("fetch_file", "retrieve_guidelines")
        workflow.add_conditional_edges(
            "fetch_repository_files",
            self._route_after_enumeration,
            {"has_files": "retrieve_guidelines", "no_files": "assemble"},
        )
        workflow.add_conditional_edges(
            "retrieve_guidelines",
            self._route_by_mode,
            {SINGLE_FILE: "generate_file_review", PROJECT: "generate_project_review"},
        )
        workflow.add_edge("generate_file_review", "assemble")
        workflow.add_edge("generate_project_review", "assemble")
        workflow.add_edge("assemble", END)

        return workflow.compile()

    def review(self, repository_url: str) -> ReviewResult:
        """
        Review a repository or a single file.

        Args:
            repository_url: Repository, tree or blob URL on a supported host

        Returns:
            Assembled review with the guideline excerpts used

        Raises:
            InvalidReviewRequestError: Malformed or unsupported URL
            ProviderError: Code host failure on a non-recoverable step
            ModelError: Single-prompt review or first chunk could not be generated
            RequestInterruptedError: Cancelled during a retry backoff
        """
        if not repository_url or not repository_url.strip():
            raise InvalidReviewRequestError("Repository URL is required")

        repository_url = repository_url.strip()
        logger.info(f"Starting code review for {repository_url}")

        initial_state: ReviewState = {
            "repository_url": repository_url,
            "files": [],
            "guideline_chunks": [],
            "formatted_guidelines": "",
            "sections": [],
            "layout": None,
            "review": None,
            "status": "started",
        }
        final_state = self.graph.invoke(initial_state)

        guidelines = [
            GuidelineExcerpt(
                title=chunk.get("title") or DEFAULT_GUIDELINE_TITLE,
                excerpt=chunk.get("content", ""),
            )
            for chunk in final_state.get("guideline_chunks", [])
        ]

        logger.info(f"Code review for {repository_url} finished ({final_state.get('status')})")
        return ReviewResult(
            review=final_state["review"],
            guidelines=guidelines,
            timestamp=datetime.now(timezone.utc),
            repository_url=repository_url,
        )

    def cancel(self) -> None:
        """
        Interrupt a review that is waiting to retry a model call.

        The review endpoint calls this when the client disconnects.
        """
        self.generator.cancel()

    def _classify_url(self, state: ReviewState) -> ReviewState:
        """Resolve the provider and decide between single-file and project review."""
        url = state["repository_url"]
        provider = self.provider_factory.get_provider(url)

        try:
            info = provider.extract_repository_info(url)
        except ProviderError as e:
            raise InvalidReviewRequestError(str(e), details={"url": url}) from e

        if not info.owner or not info.repo:
            raise InvalidReviewRequestError(
                "Could not extract owner and repository from URL", details={"url": url}
            )

        mode = SINGLE_FILE if info.path else PROJECT
        logger.info(
            f"{provider.get_provider_name()} {mode} review of {info.owner}/{info.repo}@{info.branch}"
        )
        return {**state, "provider": provider, "repository": info, "mode": mode, "status": "classified"}

    def _route_by_mode(self, state: ReviewState) -> str:
        return str(state["mode"])

    def _fetch_file(self, state: ReviewState) -> ReviewState:
        info = state["repository"]
        content = state["provider"].fetch_file_content(state["repository_url"])

        file = ReviewableFile(
            name=posixpath.basename(info.path),
            path=info.path,
            content=content,
            url=state["repository_url"],
        )
        logger.info(f"Fetched {file.path} ({len(content)} characters)")
        return {**state, "files": [file], "status": "fetched"}

    def _fetch_repository_files(self, state: ReviewState) -> ReviewState:
        info = state["repository"]
        files = state["provider"].fetch_repository_files(
            info.owner, info.repo, info.branch, self.max_files_to_review
        )

        if len(files) > self.max_files_to_review:
            logger.info(f"Limiting review to {self.max_files_to_review} of {len(files)} files")
            files = files[:self.max_files_to_review]

        return {**state, "files": files, "status": "fetched"}

    def _route_after_enumeration(self, state: ReviewState) -> str:
        return "has_files" if state["files"] else "no_files"

    def _retrieve_guidelines(self, state: ReviewState) -> ReviewState:
        """Retrieve guideline chunks once for the whole request."""
        query = "\n\n".join(file.content for file in state["files"])

        chunks: List[Dict[str, Any]] = []
        if self.retriever is not None:
            chunks = self.retriever.retrieve(query, self.content_blocks_limit)

        return {
            **state,
            "guideline_chunks": chunks,
            "formatted_guidelines": format_guidelines(chunks),
            "status": "guidelines_retrieved",
        }

    def _generate_file_review(self, state: ReviewState) -> ReviewState:
        file = state["files"][0]
        url = state["repository_url"]
        guidelines = state["formatted_guidelines"]

        if len(file.content) <= self.file_chunk_size:
            review = self.generator.generate(
                build_review_prompt(url, guidelines, file.content), identifier=file.path
            )
            return {**state, "layout": "single", "sections": [review], "status": "generated"}

        chunks = self.code_chunker.split(file.content)
        total = len(chunks)
        logger.info(
            f"Reviewing {file.path} in {total} chunks "
            f"(estimated {self.code_chunker.estimate_total_chunks(file.content)})"
        )

        sections: List[str] = []
        for index, chunk in enumerate(chunks, 1):
            label = CHUNK_LABEL_TEMPLATE.format(repository_url=url, index=index, total=total)
            logger.info(f"Processing chunk {index} of {total}")
            try:
                sections.append(
                    self.generator.generate(build_review_prompt(label, guidelines, chunk), identifier=label)
                )
            except ModelError as e:
                if index == 1:
                    raise
                logger.warning(f"Chunk {index} of {total} failed: {e}")
                sections.append(CHUNK_ERROR_TEMPLATE.format(message=e))

        return {**state, "layout": "chunked", "sections": sections, "status": "generated"}

    def _generate_project_review(self, state: ReviewState) -> ReviewState:
        files = state["files"]
        guidelines = state["formatted_guidelines"]

        sections: List[str] = []
        for index, file in enumerate(files, 1):
            logger.info(f"Reviewing file {index} of {len(files)}: {file.path}")
            prompt = build_review_prompt(state["repository_url"], guidelines, file.content)
            try:
                sections.append(self.generator.generate(prompt, identifier=file.path))
            except ModelError as e:
                logger.warning(f"Review of {file.path} failed: {e}")
                sections.append(FILE_ERROR_TEMPLATE.format(message=e))

        return {**state, "layout": "project", "sections": sections, "status": "generated"}

    def _assemble(self, state: ReviewState) -> ReviewState:
        """Join generated sections into the final markdown document."""
        layout = state.get("layout")
        sections = state.get("sections", [])

        if layout is None:
            logger.info("No reviewable files found")
            return {**state, "review": NO_FILES_MESSAGE, "guideline_chunks": [], "status": "no_files"}

        if layout == "single":
            return {**state, "review": sections[0], "status": "completed"}

        parts = [REVIEW_SUMMARY_HEADING]
        if layout == "chunked":
            total = len(sections)
            parts.append(CHUNKED_REVIEW_INTRO_TEMPLATE.format(total=total))
            for index, section in enumerate(sections, 1):
                parts.append(CHUNK_HEADING_TEMPLATE.format(index=index, total=total))
                parts.append(f"{section}\n\n")
            parts.append(FINAL_SUMMARY)
        else:
            parts.append(PROJECT_REVIEW_INTRO)
            for file, section in zip(state["files"], sections):
                parts.append(FILE_HEADING_TEMPLATE.format(path=file.path))
                parts.append(f"{section}\n\n")

        return {**state, "review": "".join(parts), "status": "completed"}
