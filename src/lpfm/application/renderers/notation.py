"""Notation renderer: Document → Markdown with one fenced Ruby block."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lpfm.application.renderers._base import BaseRenderer

if TYPE_CHECKING:
    from lpfm.domain.model.document import Document

FENCE = "```"


class MarkdownRenderer(BaseRenderer):
    """Renders every unit into one shared fenced code block.

    Requires are emitted once, at the top of the block.
    """

    def render(self, document: Document) -> str:
        """Render document as Markdown.

        Args:
            document: Document to render

        Returns:
            Fenced block ending with a newline, empty string for an empty document

        Raises:
            TypeError: If document is None
        """
        if document is None:
            raise TypeError("document must not be None")

        code = self.render_code(document)
        if not code:
            return ""
        return f"{FENCE}{self._config.fence_language}\n{code}{FENCE}\n"
