"""Domain ports (interfaces)."""

from lpfm.domain.ports.model_builder import ModelBuilderPort

__all__ = ["ModelBuilderPort"]
