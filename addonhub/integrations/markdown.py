# addonhub/integrations/markdown.py
from typing import Optional

import markdown


class MarkdownRenderer:
    def render(self, text: str, context: Optional[str] = None) -> str:
        """
        Convert markdown source to HTML. ``context`` is an ``owner/repo``
        hint renderers may use to resolve forge shorthand such as #123.
        """
        raise NotImplementedError


class LocalMarkdownRenderer(MarkdownRenderer):
    """Offline renderer built on Python-Markdown; ignores the context hint."""

    EXTENSIONS = ["fenced_code", "tables", "sane_lists"]

    def render(self, text: str, context: Optional[str] = None) -> str:
        return markdown.markdown(text, extensions=self.EXTENSIONS, output_format="html")
