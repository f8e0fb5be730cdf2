"""tree-sitter Ruby grammar access."""

from __future__ import annotations

from functools import cache

import tree_sitter_ruby
from tree_sitter import Language, Parser


@cache
def ruby_language() -> Language:
    """Load the Ruby grammar once. Language objects are immutable."""
    return Language(tree_sitter_ruby.language())


def make_parser() -> Parser:
    """Create a new Ruby parser. Parsers are not shared between calls."""
    return Parser(ruby_language())
