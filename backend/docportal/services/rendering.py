"""Markdown to HTML rendering for documents and the landing page."""

import markdown

MD_EXTENSIONS = [
    "fenced_code",
    "tables",
    "toc",
    "sane_lists",
    "nl2br",
]


def render_markdown(content: str) -> str:
    """Render Markdown content to HTML. Raw HTML in the source is kept."""
    if not content:
        return ""
    md = markdown.Markdown(extensions=MD_EXTENSIONS)
    return md.convert(content)
