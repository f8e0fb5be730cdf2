"""Tests for domain/model/configuration.py."""

import pytest

from lpfm.domain.model.configuration import RenderConfig


class TestRenderConfig:
    """Tests for RenderConfig defaults and validation."""

    def test_default_values(self) -> None:
        config = RenderConfig()
        assert config.indent == "  "
        assert config.fence_language == "ruby"
        assert config.include_prose_as_comments is False

    def test_custom_values(self) -> None:
        config = RenderConfig(indent="\t", fence_language="rb", include_prose_as_comments=True)
        assert config.indent == "\t"
        assert config.fence_language == "rb"

    def test_empty_indent_raises(self) -> None:
        with pytest.raises(ValueError, match="indent must not be empty"):
            RenderConfig(indent="")

    def test_non_whitespace_indent_raises(self) -> None:
        with pytest.raises(ValueError, match="only spaces or tabs"):
            RenderConfig(indent="--")

    def test_fence_language_with_backtick_raises(self) -> None:
        with pytest.raises(ValueError, match="fence_language"):
            RenderConfig(fence_language="ru`by")
