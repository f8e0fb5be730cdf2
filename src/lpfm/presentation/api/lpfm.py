"""LPFM facade: load notation or Ruby, render any supported format.

Example:
    doc = LPFM("# Greeter\\n\\n## hello\\nputs 'hi'")
    doc.to_ruby()
    LPFM(ruby_source, input_format="ruby").to_markdown()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lpfm.application.builder.document_builder import DocumentBuilder
from lpfm.application.renderers.literate import LiterateRenderer
from lpfm.application.renderers.notation import MarkdownRenderer
from lpfm.application.renderers.source import RubyRenderer
from lpfm.application.reporters.outline import OutlineReporter
from lpfm.domain.exceptions.validation import ValidationError
from lpfm.domain.model.configuration import RenderConfig
from lpfm.domain.model.document import Document
from lpfm.infrastructure.logger import get_logger
from lpfm.infrastructure.parsers.notation import NotationParser
from lpfm.infrastructure.parsers.source import RubySourceParser

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from lpfm.application.reporters.outline import OutlineConfig
    from lpfm.domain.model.unit import ClassDef, ModuleDef

LOGGER = get_logger(__name__)

_NOTATION_FORMATS = frozenset({"lpfm", "markdown", "md"})
_SOURCE_FORMATS = frozenset({"ruby", "rb"})


class LPFM:
    """Holds the Document of the most recent load.

    Every load() builds a new Document with a fresh builder and parser;
    nothing from a previous load is reused.

    Attributes:
        _document: Current document (empty until something is loaded)
        _config: Rendering options
    """

    def __init__(
        self,
        text: str | None = None,
        *,
        input_format: str = "lpfm",
        filename: str | None = None,
        config: RenderConfig | None = None,
    ) -> None:
        """Initialize, optionally loading text.

        Args:
            text: Content to load. None = start with an empty document
            input_format: "lpfm"/"markdown"/"md" or "ruby"/"rb"
            filename: Filename hint for unit-name inference
            config: Rendering options. Uses defaults if None.

        Raises:
            ValidationError: If the format is unknown or the content is invalid
            SourceParseError: If Ruby content has syntax errors
        """
        self._config = config or RenderConfig()
        self._document = Document.empty()
        if text is not None:
            self.load(text, input_format=input_format, filename=filename)

    def load(
        self,
        text: str,
        *,
        input_format: str = "lpfm",
        filename: str | None = None,
    ) -> LPFM:
        """Parse text and replace the held document.

        Args:
            text: Content to parse
            input_format: "lpfm"/"markdown"/"md" or "ruby"/"rb"
            filename: Filename hint for unit-name inference

        Returns:
            self, for chaining

        Raises:
            TypeError: If text is None
            ValidationError: If the format is unknown or the content is invalid
            MetadataError: If the front matter is malformed
            SourceParseError: If Ruby content has syntax errors
        """
        if text is None:
            raise TypeError("Cannot load nil content")

        normalized_format = input_format.strip().lower()
        builder = DocumentBuilder(filename=filename)
        if normalized_format in _NOTATION_FORMATS:
            document = NotationParser().parse(text, builder, filename=filename)
        elif normalized_format in _SOURCE_FORMATS:
            document = RubySourceParser().parse(text, builder, filename=filename)
        else:
            raise ValidationError(f"Unknown input format: {input_format}")

        LOGGER.debug(
            "loaded %d unit(s) from %s input", len(document.units), normalized_format
        )
        self._document = document
        return self

    @property
    def document(self) -> Document:
        """Access the current document."""
        return self._document

    @property
    def classes(self) -> Mapping[str, ClassDef]:
        return self._document.classes

    @property
    def modules(self) -> Mapping[str, ModuleDef]:
        return self._document.modules

    @property
    def requires(self) -> tuple[str, ...]:
        return self._document.requires

    @property
    def metadata(self) -> Mapping[str, object]:
        return self._document.metadata

    def to_ruby(self) -> str:
        """Render the document as Ruby source."""
        return RubyRenderer(self._config).render(self._document)

    def to_markdown(self) -> str:
        """Render the document as Markdown with one fenced Ruby block."""
        return MarkdownRenderer(self._config).render(self._document)

    to_md = to_markdown

    def to_lpfm(self) -> str:
        """Render the document as LPFM heading notation."""
        return LiterateRenderer(self._config).render(self._document)

    def outline(self, config: OutlineConfig | None = None) -> str:
        """Describe the document structure as a rich formatted tree."""
        return OutlineReporter(config).report(self._document)

    def render(self, output_format: str) -> str:
        """Render the document in a named format.

        Args:
            output_format: "ruby"/"rb", "markdown"/"md" or "lpfm"

        Raises:
            ValidationError: If the format is unknown
        """
        renderers: dict[str, Callable[[], str]] = {
            "ruby": self.to_ruby,
            "rb": self.to_ruby,
            "markdown": self.to_markdown,
            "md": self.to_markdown,
            "lpfm": self.to_lpfm,
        }
        renderer = renderers.get(output_format.strip().lower())
        if renderer is None:
            raise ValidationError(f"Unknown output format: {output_format}")
        return renderer()


def convert(
    text: str,
    *,
    source: str,
    target: str,
    filename: str | None = None,
    config: RenderConfig | None = None,
) -> str:
    """Convert text between formats in one call.

    Args:
        text: Content to convert
        source: Input format ("lpfm"/"markdown"/"md" or "ruby"/"rb")
        target: Output format ("ruby"/"rb", "markdown"/"md" or "lpfm")
        filename: Filename hint for unit-name inference
        config: Rendering options

    Returns:
        Converted text

    Raises:
        ValidationError: If a format is unknown or the content is invalid
        SourceParseError: If Ruby content has syntax errors
    """
    return LPFM(text, input_format=source, filename=filename, config=config).render(target)
