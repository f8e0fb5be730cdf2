"""Application layer: document builder, renderers, reporters."""
