"""Domain exceptions."""

from lpfm.domain.exceptions.base import LPFMError
from lpfm.domain.exceptions.parsing import SourceParseError
from lpfm.domain.exceptions.validation import MetadataError, ValidationError

__all__ = [
    "LPFMError",
    "ValidationError",
    "MetadataError",
    "SourceParseError",
]
