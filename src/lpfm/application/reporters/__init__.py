"""Reporters describing a Document for humans."""

from lpfm.application.reporters.outline import OutlineConfig, OutlineReporter

__all__ = ["OutlineConfig", "OutlineReporter"]
