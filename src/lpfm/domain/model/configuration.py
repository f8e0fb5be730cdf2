"""Rendering configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Options shared by all renderers.

    Immutable configuration object with FAIL-FIRST validation.
    Defaults reproduce conventional Ruby formatting.

    Attributes:
        indent: One indentation level. Whitespace only.
        fence_language: Info string of the fenced block in notation output.
        include_prose_as_comments: Emit method prose as `#` comments
            above the definition line.
    """

    indent: str = "  "
    fence_language: str = "ruby"
    include_prose_as_comments: bool = False

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.indent:
            raise ValueError("indent must not be empty")

        if self.indent.strip(" \t"):
            raise ValueError(f"indent must contain only spaces or tabs, got {self.indent!r}")

        if any(ch.isspace() or ch == "`" for ch in self.fence_language):
            raise ValueError(
                f"fence_language must not contain whitespace or backticks, got {self.fence_language!r}"
            )
