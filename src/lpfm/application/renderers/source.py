"""Source renderer: Document → Ruby source."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lpfm.application.renderers._base import BaseRenderer

if TYPE_CHECKING:
    from lpfm.domain.model.document import Document


class RubyRenderer(BaseRenderer):
    """Renders a Document as a Ruby file.

    Deterministic: identical documents render byte-identical text.
    """

    def render(self, document: Document) -> str:
        """Render document as Ruby source.

        Args:
            document: Document to render

        Returns:
            Ruby source ending with a newline, empty string for an empty document

        Raises:
            TypeError: If document is None
        """
        if document is None:
            raise TypeError("document must not be None")
        return self.render_code(document)
