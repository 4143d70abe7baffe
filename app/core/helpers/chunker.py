"""
Text chunking for guideline documents.

Splits plain text on paragraph boundaries first, then on sentence
boundaries, and only hard-splits a sentence that cannot fit on its own.
"""
import logging
import re
from typing import List

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
SENTENCE_END = re.compile(r"(?<=[.!?])\s+")
MAX_TITLE_LENGTH = 100
TITLE_WORD_COUNT = 10


class TextChunker:
    """Split text into bounded chunks for embedding and retrieval."""

    DEFAULT_CHUNK_SIZE = 1000

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize text chunker.

        Args:
            chunk_size: Maximum size of each chunk in characters
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        logger.info(f"TextChunker initialized with chunk_size={chunk_size}")

    def chunk_text(self, text: str) -> List[str]:
        """
        Split text into chunks.

        Short chunks are kept; dropping them is up to the caller.

        Args:
            text: Input text to split

        Returns:
            List of text chunks, each at most chunk_size characters
        """
        chunks: List[str] = []
        for paragraph in split_paragraphs(text):
            if len(paragraph) <= self.chunk_size:
                chunks.append(paragraph)
            else:
                chunks.extend(self._split_paragraph(paragraph))

        logger.debug(f"Split text into {len(chunks)} chunks")
        return chunks

    def _split_paragraph(self, paragraph: str) -> List[str]:
        """Accumulate sentences of an oversized paragraph into chunks."""
        chunks: List[str] = []
        buffer = ""

        for sentence in split_sentences(paragraph):
            candidate = f"{buffer} {sentence}" if buffer else sentence
            if len(candidate) <= self.chunk_size:
                buffer = candidate
                continue

            if buffer:
                chunks.append(buffer)
                buffer = ""

            if len(sentence) > self.chunk_size:
                chunks.extend(self._hard_split(sentence))
            else:
                buffer = sentence

        if buffer:
            chunks.append(buffer)
        return chunks

    def _hard_split(self, sentence: str) -> List[str]:
        return [
            sentence[i:i + self.chunk_size]
            for i in range(0, len(sentence), self.chunk_size)
        ]


def split_paragraphs(text: str) -> List[str]:
    """Split on blank lines; single newlines inside a paragraph become spaces."""
    if not text:
        return []
    paragraphs = []
    for block in PARAGRAPH_BREAK.split(text):
        paragraph = " ".join(line.strip() for line in block.splitlines() if line.strip())
        if paragraph:
            paragraphs.append(paragraph)
    return paragraphs


def split_sentences(text: str) -> List[str]:
    """Split on ., ! or ? followed by whitespace."""
    return [s.strip() for s in SENTENCE_END.split(text) if s.strip()]


def extract_title(chunk: str) -> str:
    """
    Derive a short label for a chunk.

    Returns the first sentence when it is at most 100 characters, otherwise
    the first ten words followed by an ellipsis.
    """
    text = chunk.strip()
    match = re.search(r"[.!?](?=\s)", text)
    first_sentence = text[:match.end()] if match else text

    if len(first_sentence) <= MAX_TITLE_LENGTH:
        return first_sentence

    words = text.split()
    return " ".join(words[:TITLE_WORD_COUNT]) + "..."
