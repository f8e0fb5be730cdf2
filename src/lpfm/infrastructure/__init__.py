"""Infrastructure layer: parsers backed by PyYAML and tree-sitter."""
