"""Validation exceptions."""

from lpfm.domain.exceptions.base import LPFMError


class ValidationError(LPFMError):
    """Structural error in the input.

    Raised for empty content, a missing level-1 heading,
    unknown unit types or unknown conversion formats.
    No partial document is ever produced.

    Attributes:
        reason: Human-readable description (must not be empty)
    """

    def __init__(self, reason: str) -> None:
        # FAIL-FIRST validation
        if not reason:
            raise ValueError("reason must not be empty")

        self.reason = reason
        super().__init__(reason)


class MetadataError(ValidationError):
    """Malformed YAML front matter.

    Attributes:
        reason: Underlying decode message
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid YAML frontmatter: {reason}")
