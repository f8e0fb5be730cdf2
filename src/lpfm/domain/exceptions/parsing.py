"""Parsing exceptions."""

from lpfm.domain.exceptions.base import LPFMError


class SourceParseError(LPFMError):
    """Error reported while parsing Ruby source.

    Carries every diagnostic collected from the syntax tree,
    or the message of the exception that aborted the walk.

    Attributes:
        diagnostics: Diagnostic messages in source order
    """

    def __init__(self, diagnostics: tuple[str, ...]) -> None:
        # FAIL-FIRST: validate required parameters
        if diagnostics is None:
            raise TypeError("diagnostics must not be None")
        if not diagnostics:
            raise ValueError("diagnostics must not be empty")

        self.diagnostics = diagnostics
        super().__init__(f"Failed to parse Ruby code: {'; '.join(diagnostics)}")
