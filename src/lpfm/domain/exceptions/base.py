"""Base exceptions for lpfm domain."""


class LPFMError(Exception):
    """Root exception for all lpfm errors.

    All domain exceptions inherit from this.
    Allows catching all lpfm-specific errors.
    """
