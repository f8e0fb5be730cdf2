"""Renderers turning a Document into text.

RubyRenderer and MarkdownRenderer share the section and method
ordering of BaseRenderer; LiterateRenderer writes LPFM notation.
"""

from lpfm.application.renderers._base import BaseRenderer
from lpfm.application.renderers.literate import LiterateRenderer
from lpfm.application.renderers.notation import MarkdownRenderer
from lpfm.application.renderers.protocol import RendererProtocol
from lpfm.application.renderers.source import RubyRenderer

__all__ = [
    "BaseRenderer",
    "LiterateRenderer",
    "MarkdownRenderer",
    "RendererProtocol",
    "RubyRenderer",
]
