"""Question rendering utilities for the admin console preview."""

from __future__ import annotations

from assessment_app.core.markdown_renderer import renderer


def render_question_with_options(
    question_text: str,
    options: list[str],
    *,
    category: str = "",
    level: str = "",
    correct_index: int | None = None,
    image_path: str | None = None,
    font_size: int = 14,
) -> str:
    """Render a question, its options and the marked correct answer as an HTML page.

    ``image_path`` is a local file URL; the preview is rendered outside the web server.
    """
    markdown_lines = []
    if category or level:
        markdown_lines.append(f"*{category or '(no category)'} | {level or '(no level)'}*")
    if image_path:
        markdown_lines.append(f"![question image]({image_path})")
    markdown_lines.append(question_text.strip() or "(No question text)")
    for idx, option in enumerate(options):
        letter = chr(ord("A") + idx)
        marker = " ✔" if idx == correct_index else ""
        markdown_lines.append(f"**{letter}.** {option or '(empty)'}{marker}")
    markdown = "\n\n".join(markdown_lines)
    return renderer.render_full_document(markdown, font_size=font_size)
