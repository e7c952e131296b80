"""Tests for HTML text extraction."""

from __future__ import annotations

from bs4 import BeautifulSoup

from webfinder.ingestion.html_extractor import extract_text, is_boilerplate


def _tag(html: str):
    return BeautifulSoup(html, "html.parser").find(True)


class TestExtractText:
    """Test extract_text function."""

    def test_removes_scripts_styles_and_chrome(self) -> None:
        html = """
        <html><head><style>p { color: red }</style></head>
        <body>
          <header><h1>Site header</h1></header>
          <nav><li>Home</li></nav>
          <script>var x = "<p>hidden</p>";</script>
          <p>Visible paragraph</p>
          <footer><p>Copyright</p></footer>
        </body></html>
        """
        text = extract_text(html)

        assert text == "Visible paragraph"

    def test_removes_boilerplate_classes_and_ids(self) -> None:
        html = """
        <body>
          <div class="top-menu"><p>Menu item</p></div>
          <div id="site-banner"><p>Sale!</p></div>
          <div class="ad"><p>Buy now</p></div>
          <div class="sidebar-ads"><p>More ads</p></div>
          <p class="shadow">Kept text</p>
        </body>
        """
        assert extract_text(html) == "Kept text"

    def test_prefers_main_content(self) -> None:
        html = """
        <body>
          <p>Outside</p>
          <main><h2>Title</h2><p>Inside   main
          content</p></main>
        </body>
        """
        assert extract_text(html) == "Title\n\nInside main content"

    def test_multiple_landmarks_in_document_order(self) -> None:
        html = """
        <body>
          <article><p>First article</p></article>
          <p>Loose</p>
          <div class="docs-content"><p>Docs</p></div>
        </body>
        """
        assert extract_text(html) == "First article\n\nDocs"

    def test_nested_landmarks_not_duplicated(self) -> None:
        html = "<main><article><p>Once</p></article></main>"
        assert extract_text(html) == "Once"

    def test_nested_blocks_not_duplicated(self) -> None:
        html = "<body><pre><code>x = 1</code></pre><li><p>Item</p></li></body>"
        assert extract_text(html) == "x = 1\n\nItem"

    def test_collects_all_block_types(self) -> None:
        html = """
        <body>
          <h3>Heading</h3>
          <ul><li>One</li><li>Two</li></ul>
          <table><tr><th>Key</th><td>Value</td></tr></table>
          <blockquote>Quote</blockquote>
          <div>Plain div text is ignored</div>
        </body>
        """
        assert extract_text(html) == "Heading\n\nOne\n\nTwo\n\nKey\n\nValue\n\nQuote"

    def test_role_main_landmark(self) -> None:
        html = '<body><p>Skip</p><div role="main"><p>Keep</p></div></body>'
        assert extract_text(html) == "Keep"

    def test_empty_and_malformed_input(self) -> None:
        assert extract_text("") == ""
        assert extract_text("<p>Unclosed <b>bold") == "Unclosed bold"
        assert extract_text("<div><p>a</div></span>") == "a"

    def test_deterministic(self) -> None:
        html = "<main><p>A</p><p>B</p></main>"
        assert extract_text(html) == extract_text(html)

    def test_extraction_is_idempotent_on_plain_blocks(self) -> None:
        assert extract_text("<p>Already clean</p>") == "Already clean"


class TestIsBoilerplate:
    """Test is_boilerplate marker matching."""

    def test_matches_markers(self) -> None:
        assert is_boilerplate(_tag('<div class="navbar"></div>'))
        assert is_boilerplate(_tag('<div id="mainMenu"></div>'))
        assert is_boilerplate(_tag('<div class="page-footer"></div>'))
        assert is_boilerplate(_tag('<div class="advertisement"></div>'))
        assert is_boilerplate(_tag('<div class="ad-slot"></div>'))

    def test_ignores_ordinary_words(self) -> None:
        assert not is_boilerplate(_tag('<div class="shadow load"></div>'))
        assert not is_boilerplate(_tag('<div class="content"></div>'))
        assert not is_boilerplate(_tag("<div></div>"))
