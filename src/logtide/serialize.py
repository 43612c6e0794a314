"""
Metadata serialization.

Metadata is dumped as an indented YAML block under the log line. Values
pass through `prepare()` first:

  - exceptions become plain mappings (name, message, stack, attributes)
  - functions and classes become `<hl python>` signature spans
  - strings are always double-quoted
  - anything YAML cannot represent is dropped, never raised

The dumped block is then rendered by the caller's markup function
(strip for plain output, styled for the colorful console).
"""

import dataclasses
import inspect
import traceback
from collections.abc import Callable, Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

import yaml
from pydantic import BaseModel

from logtide.markup import strip_markup
from logtide.signatures import function_header

INDENT = "  "
LINE_WIDTH = 120
HOST_LANGUAGE = "python"


class _Skip:
    """Marker for values the encoder cannot represent."""

    def __repr__(self) -> str:
        return "<skip>"


SKIP = _Skip()


class QuotedStr(str):
    """A string scalar that is always emitted double-quoted."""


class MetadataDumper(yaml.SafeDumper):
    """SafeDumper without anchors, with forced double quotes for values."""

    def ignore_aliases(self, data: Any) -> bool:
        return True

    def write_double_quoted(self, text: str, split: bool = True) -> None:
        # Folding would break magic tags and signatures across lines.
        super().write_double_quoted(text, split=False)


def _represent_quoted(dumper: yaml.SafeDumper, data: QuotedStr) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(data), style='"')


MetadataDumper.add_representer(QuotedStr, _represent_quoted)


# ── Value transform ───────────────────────────────────────────────

def expand_error(error: BaseException) -> dict[str, Any]:
    """Expose an exception's fields so they survive serialization."""
    expanded: dict[str, Any] = {
        "name": type(error).__name__,
        "message": str(error),
    }
    if error.__traceback__ is not None:
        expanded["stack"] = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ).rstrip()
    expanded.update(public_attributes(error))
    return expanded


def public_attributes(obj: Any) -> dict[str, Any]:
    """An object's own attributes, without the underscore-prefixed ones."""
    return {key: value for key, value in vars(obj).items() if not key.startswith("_")}


def is_function_like(value: Any) -> bool:
    return inspect.isroutine(value) or inspect.isclass(value)


def prepare(value: Any, _active: frozenset[int] = frozenset()) -> Any:
    """
    Transform a metadata value into something SafeDumper can encode.

    Errors, models, dataclasses and plain objects become mappings of their
    fields; other scalars fall back to their string form. Returns SKIP for
    raw bytes and for references back into an object that is still being
    visited.
    """
    if value is None or isinstance(value, (bool, float, datetime, date)):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, str):
        return QuotedStr(value)
    if isinstance(value, Enum):
        return prepare(value.value, _active)
    if is_function_like(value):
        return QuotedStr(f"<hl {HOST_LANGUAGE}>{function_header(value)}</hl>")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return SKIP

    # Checked on the original object, before it is converted to a dict.
    if id(value) in _active:
        return SKIP
    active = _active | {id(value)}

    if isinstance(value, BaseException):
        value = expand_error(value)
    elif isinstance(value, BaseModel):
        value = value.model_dump()
    elif dataclasses.is_dataclass(value):
        value = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    elif not isinstance(value, (Mapping, list, tuple, set, frozenset)) and hasattr(value, "__dict__"):
        value = public_attributes(value)

    if isinstance(value, Mapping):
        result = {}
        for key, item in value.items():
            prepared = prepare(item, active)
            if prepared is not SKIP:
                result[str(key)] = prepared
        return result
    if isinstance(value, (list, tuple, set, frozenset)):
        items = (prepare(item, active) for item in value)
        return [item for item in items if item is not SKIP]
    return QuotedStr(str(value))


# ── Block rendering ───────────────────────────────────────────────

def dump_block(value: Any) -> str:
    """Encode `value` as YAML, indented two spaces, trailing whitespace trimmed."""
    prepared = prepare(value)
    if prepared is SKIP:
        return ""
    dumped = yaml.dump(
        prepared,
        Dumper=MetadataDumper,
        width=LINE_WIDTH,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    if dumped.endswith("\n...\n"):
        dumped = dumped[: -len("...\n")]
    return "\n".join(f"{INDENT}{line}" for line in dumped.split("\n")).rstrip()


def serialize(value: Any, render: Callable[[str], str] = strip_markup) -> str:
    """Dump `value` as an indented YAML block and render its magic tags."""
    return render(dump_block(value))


def merge_message(message: Any, metadata: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Fold a non-text message into its metadata under `msg`.

    The message keeps the first position and wins over a `msg` key
    supplied in the metadata.
    """
    merged: dict[str, Any] = {"msg": message}
    if metadata:
        for key, value in metadata.items():
            if key != "msg":
                merged[key] = value
    return merged
