"""lpfm - convert between literate LPFM Markdown and Ruby source."""

__version__ = "0.1.0"

from lpfm.domain.exceptions import LPFMError, MetadataError, SourceParseError, ValidationError
from lpfm.presentation.api.lpfm import LPFM, convert

__all__ = [
    "LPFM",
    "LPFMError",
    "MetadataError",
    "SourceParseError",
    "ValidationError",
    "__version__",
    "convert",
]
