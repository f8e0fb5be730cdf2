"""Parsers turning LPFM notation and Ruby source into a Document."""

from lpfm.infrastructure.parsers.notation import NotationParser
from lpfm.infrastructure.parsers.source import RubySourceParser

__all__ = ["NotationParser", "RubySourceParser"]
