"""
Source code chunking for files too large for a single review prompt.
"""
import logging
import math
from typing import Iterator, List

logger = logging.getLogger(__name__)


class CodeChunker:
    """
    Split source code into bounded chunks without losing characters.

    Cut points prefer a blank line or a line ending in a closing brace close
    to the size limit, so a chunk rarely ends inside a block.
    """

    DEFAULT_CHUNK_SIZE = 5000
    SEARCH_WINDOW_RATIO = 0.15
    MIN_SEARCH_WINDOW = 5
    ESTIMATE_HEADROOM = 0.9

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    def split(self, code: str) -> List[str]:
        """
        Split code into chunks.

        Args:
            code: Source text

        Returns:
            Chunks whose concatenation is exactly the input
        """
        return list(self.iter_chunks(code))

    def iter_chunks(self, code: str) -> Iterator[str]:
        """Yield chunks one at a time."""
        start = 0
        while start < len(code):
            end = self._chunk_end(code, start)
            yield code[start:end]
            start = end

    def estimate_total_chunks(self, code: str) -> int:
        """Rough chunk count for progress reporting; may differ from len(split(code))."""
        if len(code) <= self.chunk_size:
            return 1
        return math.ceil(len(code) / (self.chunk_size * self.ESTIMATE_HEADROOM))

    def _chunk_end(self, code: str, start: int) -> int:
        approximate_end = min(start + self.chunk_size, len(code))
        if approximate_end >= len(code):
            return len(code)
        return self._find_boundary(code, start, approximate_end)

    def _find_boundary(self, code: str, start: int, approximate_end: int) -> int:
        """
        Scan backward from approximate_end for the nearest blank line or
        closing-brace line, returning the offset just past its newline.
        """
        window = max(self.MIN_SEARCH_WINDOW, int((approximate_end - start) * self.SEARCH_WINDOW_RATIO))
        search_start = max(start, approximate_end - window)

        pos = approximate_end
        while pos >= search_start:
            line_start = code.rfind("\n", 0, pos) + 1
            line_end = code.find("\n", pos)
            if line_end == -1:
                line_end = len(code)

            cut = min(line_end + 1, len(code))
            if start < cut <= approximate_end:
                if not code[line_start:line_end].strip():
                    return cut
                brace = line_end - 1
                if (
                    line_end < len(code)
                    and max(search_start, 1) <= brace <= approximate_end
                    and code[brace] == "}"
                ):
                    return cut

            # step onto the previous line's newline
            pos = line_start - 1

        return approximate_end
