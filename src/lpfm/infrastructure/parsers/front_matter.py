"""YAML front matter: splitting, decoding, value extraction."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

import yaml

from lpfm.domain.exceptions.validation import MetadataError
from lpfm.domain.model.value import ConstantValue, RawExpression
from lpfm.infrastructure.logger import get_logger

LOGGER = get_logger(__name__)

_DELIMITER = re.compile(r"^---[ \t]*$")
_IDENTIFIER_KEY = re.compile(r"^[a-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True, slots=True)
class FrontMatter:
    """Decoded front matter and the text that follows it.

    Attributes:
        metadata: Decoded mapping, empty when absent
        body: Remaining text after the closing delimiter
        present: A front matter block was found
    """

    metadata: Mapping[str, object]
    body: str
    present: bool


def split_front_matter(text: str) -> FrontMatter:
    """Split a leading `---` delimited YAML block from the text.

    Args:
        text: Normalized, trimmed notation text

    Returns:
        FrontMatter with decoded metadata

    Raises:
        MetadataError: If the block is unclosed, undecodable or not a mapping
    """
    lines = text.split("\n")
    if not lines or not _DELIMITER.match(lines[0]):
        return FrontMatter(metadata=MappingProxyType({}), body=text, present=False)

    closing = next((i for i in range(1, len(lines)) if _DELIMITER.match(lines[i])), None)
    if closing is None:
        raise MetadataError("missing closing '---' line")

    block = "\n".join(lines[1:closing])
    try:
        decoded = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise MetadataError(str(e)) from e

    if decoded is None:
        decoded = {}
    if not isinstance(decoded, dict):
        raise MetadataError(f"expected a mapping, got {type(decoded).__name__}")

    metadata = {str(key): value for key, value in decoded.items()}
    return FrontMatter(
        metadata=MappingProxyType(metadata),
        body="\n".join(lines[closing + 1 :]),
        present=True,
    )


def string_list(metadata: Mapping[str, object], key: str) -> tuple[str, ...]:
    """Read a key holding one name or a list of names.

    Non-string scalars are converted with str(); null items are skipped.
    """
    value = metadata.get(key)
    if value is None:
        return ()
    if isinstance(value, list | tuple):
        return tuple(str(item) for item in value if item is not None)
    if isinstance(value, dict):
        LOGGER.warning("front matter key '%s' should be a list, got a mapping", key)
        return tuple(str(item) for item in value)
    return (str(value),)


def string_pairs(metadata: Mapping[str, object], key: str) -> tuple[tuple[str, str], ...]:
    """Read a key holding a name → name mapping, in document order."""
    value = metadata.get(key)
    if value is None:
        return ()
    if not isinstance(value, dict):
        LOGGER.warning("front matter key '%s' should be a mapping, ignoring it", key)
        return ()
    return tuple((str(k), str(v)) for k, v in value.items())


def value_pairs(metadata: Mapping[str, object], key: str) -> tuple[tuple[str, ConstantValue], ...]:
    """Read a key holding a name → value mapping, values typed for rendering."""
    value = metadata.get(key)
    if value is None:
        return ()
    if not isinstance(value, dict):
        LOGGER.warning("front matter key '%s' should be a mapping, ignoring it", key)
        return ()
    return tuple((str(k), to_constant_value(v)) for k, v in value.items())


def to_constant_value(value: object) -> ConstantValue:
    """Convert a decoded YAML value into a constant value.

    Scalars keep their type. Lists and mappings become Ruby literals
    kept as raw expressions. Other values (dates) become strings.
    """
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, list | dict):
        return RawExpression(_ruby_literal(value))
    return str(value)


def _ruby_literal(value: object) -> str:
    match value:
        case None:
            return "nil"
        case bool():
            return "true" if value else "false"
        case int() | float():
            return repr(value)
        case str():
            return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
        case list():
            return "[" + ", ".join(_ruby_literal(item) for item in value) + "]"
        case dict():
            if not value:
                return "{}"
            entries = []
            for key, item in value.items():
                if isinstance(key, str) and _IDENTIFIER_KEY.match(key):
                    entries.append(f"{key}: {_ruby_literal(item)}")
                else:
                    entries.append(f"{_ruby_literal(key)} => {_ruby_literal(item)}")
            return "{ " + ", ".join(entries) + " }"
        case _:
            return _ruby_literal(str(value))
