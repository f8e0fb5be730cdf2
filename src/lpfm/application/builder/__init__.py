"""Document builder."""

from lpfm.application.builder.document_builder import DocumentBuilder

__all__ = ["DocumentBuilder"]
