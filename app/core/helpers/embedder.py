"""
Embedding service for generating vector embeddings using OpenAI.
"""
import logging
from typing import List, Optional, Protocol
from openai import OpenAI
from app.core.config import settings

logger = logging.getLogger(__name__)


class EmbeddingPort(Protocol):
    """Anything that turns text into a fixed-length vector."""

    def embed_query(self, query: str) -> List[float]:
        ...


class EmbeddingService:
    """
    Service for generating text embeddings using OpenAI.
    Used both for guideline chunks at ingestion and for code at review time.
    """

    DEFAULT_MODEL = settings.EMBEDDING_MODEL
    EMBEDDING_DIMENSION = settings.EMBEDDING_DIMENSION

    def __init__(self, api_key: Optional[str] = None, timeout: float = settings.HTTP_TIMEOUT_SECONDS):
        """
        Initialize embedding service.

        Args:
            api_key: OpenAI API key (defaults to settings.OPENAI_API_KEY)
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If no API key is configured
        """
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.timeout = timeout
        self._client: Optional[OpenAI] = None

        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not configured")

    @property
    def client(self) -> OpenAI:
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)
            logger.info("OpenAI client initialized")
        return self._client

    def embed_query(
        self,
        query: str,
        model: str = DEFAULT_MODEL,
        dimensions: int = EMBEDDING_DIMENSION
    ) -> List[float]:
        """
        Generate embedding for a single text.

        Args:
            query: Text to embed
            model: OpenAI embedding model to use
            dimensions: Output dimension

        Returns:
            Embedding vector as list of floats

        Raises:
            ValueError: If the text is blank
        """
        if not query.strip():
            raise ValueError("Cannot embed empty query")

        logger.debug(f"Generating embedding ({len(query)} characters) using {model}")

        response = self.client.embeddings.create(
            input=[query.strip()],
            model=model,
            dimensions=dimensions
        )

        return [float(val) for val in response.data[0].embedding]
