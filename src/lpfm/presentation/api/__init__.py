"""Public API for converting between LPFM notation and Ruby."""

from lpfm.presentation.api.lpfm import LPFM, convert

__all__ = ["LPFM", "convert"]
