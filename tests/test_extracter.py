"""Tests for HTML to plain text extraction."""
import pytest

from app.core.helpers.extracter import GuidelineTextExtractor


@pytest.fixture
def extractor():
    return GuidelineTextExtractor()


class TestGuidelineTextExtractor:
    """Paragraph structure and cleanup."""

    def test_block_elements_become_paragraphs(self, extractor):
        html = "<h1>Naming</h1><p>Use  camelCase\n   for methods.</p><p>Line one<br/>Line two</p>"

        assert extractor.extract_text(html) == (
            "Naming\n\nUse camelCase for methods.\n\nLine one Line two"
        )

    def test_list_items_are_separate_paragraphs(self, extractor):
        assert extractor.extract_text("<ul><li>One</li><li>Two</li></ul>") == "One\n\nTwo"

    def test_scripts_and_styles_are_dropped(self, extractor):
        html = "<p>Keep</p><script>alert(1)</script><style>p { color: red; }</style>"

        assert extractor.extract_text(html) == "Keep"

    def test_entities_are_decoded(self, extractor):
        assert extractor.extract_text("<p>a &amp; b &lt;T&gt;</p>") == "a & b <T>"

    def test_macro_parameters_are_dropped(self, extractor):
        html = (
            '<ac:structured-macro ac:name="info">'
            '<ac:parameter ac:name="title">Note</ac:parameter>'
            "<ac:rich-text-body><p>Be careful.</p></ac:rich-text-body>"
            "</ac:structured-macro>"
        )

        assert extractor.extract_text(html) == "Be careful."

    @pytest.mark.parametrize("html", ["", "   ", "<div>  </div>"])
    def test_empty_input(self, extractor, html):
        assert extractor.extract_text(html) == ""
