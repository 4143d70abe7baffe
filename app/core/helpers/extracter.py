"""
Plain text extraction from Confluence storage-format HTML.
"""
import logging
import re
from typing import List

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

BLOCK_TAGS = [
    "p", "div", "section", "article", "header", "footer", "blockquote", "pre",
    "h1", "h2", "h3", "h4", "h5", "h6", "li", "ul", "ol", "table", "tr",
    "ac:structured-macro", "ac:layout-section", "ac:layout-cell",
]
DROP_TAGS = ["script", "style", "ac:parameter"]
PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
WHITESPACE = re.compile(r"\s+")


class GuidelineTextExtractor:
    """Turn page HTML into paragraphs separated by blank lines."""

    def extract_text(self, html: str) -> str:
        """
        Extract readable text from HTML.

        Block-level elements become paragraph breaks, entities are decoded
        and runs of whitespace inside a paragraph collapse to one space.

        Args:
            html: Storage-format or plain HTML

        Returns:
            Plain text with paragraphs separated by a blank line
        """
        if not html or not html.strip():
            return ""

        soup = BeautifulSoup(html, "html.parser")

        for tag in soup.find_all(DROP_TAGS):
            tag.decompose()

        for br in soup.find_all("br"):
            br.replace_with("\n")

        for tag in soup.find_all(BLOCK_TAGS):
            tag.insert_before("\n\n")
            tag.insert_after("\n\n")

        paragraphs = self._paragraphs(soup.get_text())
        logger.debug(f"Extracted {len(paragraphs)} paragraphs from {len(html)} characters of HTML")
        return "\n\n".join(paragraphs)

    @staticmethod
    def _paragraphs(text: str) -> List[str]:
        paragraphs = []
        for block in PARAGRAPH_BREAK.split(text):
            paragraph = WHITESPACE.sub(" ", block).strip()
            if paragraph:
                paragraphs.append(paragraph)
        return paragraphs
