"""Markdown rendering helpers shared by the Qt console and the web page.

Question text and recommendations are authored as Markdown. Raw HTML in the
source is not passed through, so text typed by an administrator can be shown
to users without further escaping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts Markdown into HTML fragments or small standalone documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_full_document(self, markdown_text: str, title: str = "Question", font_size: int = 14) -> str:
        """Render markdown and wrap it in a minimal HTML page for previews."""

        fragment = self.render_fragment(markdown_text)
        return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{escape(title)}</title>
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; color: #1f2937; }}
      .question-html {{ font-size: {font_size}pt; line-height: 1.5; }}
      img {{ max-width: 100%; max-height: 14rem; object-fit: contain; }}
    </style>
  </head>
  <body>
    <div class="question-html">{fragment}</div>
  </body>
</html>"""


# Shared instance; MarkdownIt is safe for concurrent read-only renders.
renderer = MarkdownRenderer()
