"""Renderer protocol: contract for all renderers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from lpfm.domain.model.document import Document


class RendererProtocol(Protocol):
    """Protocol for document renderers.

    Output is str, never written anywhere. Caller decides destination.
    """

    def render(self, document: Document) -> str:
        """Render document as text.

        Args:
            document: Document to render.

        Returns:
            Rendered text, empty string for an empty document.
        """
        ...
