"""
One-line signature approximations for callables found in log metadata.

Pattern matching over source text, not a parser: a header that the
patterns cannot make sense of degrades to a generic placeholder.
"""

import inspect
import re
import textwrap
from typing import Any

_RETURNS = r"(?:\s*->\s*[^:]+?)?"

# Plain and async functions
MATCH_FUNCTION_HEADER = re.compile(rf"^(?:async\s+)?def\s+\w+\s*\([^)]*\){_RETURNS}\s*:")
# Lambda expressions, anywhere on the defining line
MATCH_LAMBDA_HEADER = re.compile(r"\blambda\b[^:]*:")
# Decorated methods: static, class and bound methods, properties
MATCH_METHOD_HEADER = re.compile(
    rf"^(?:@[^\n]*\n\s*)+((?:async\s+)?def\s+\w+\s*\([^)]*\){_RETURNS}\s*:)"
)
# Class declarations, with or without decorators
MATCH_CLASS_HEADER = re.compile(r"^(?:@[^\n]*\n\s*)*(class\s+\w+\s*(?:\([^)]*\))?\s*:)")
# Constructor inside a class body
MATCH_CONSTRUCTOR_HEADER = re.compile(rf"def\s+__init__\s*\([^)]*\){_RETURNS}\s*:")

ELLIPSIS = "..."


def prettify(source: str) -> str:
    """Normalize whitespace in an extracted header."""
    source = re.sub(r"\s+", " ", source)
    source = re.sub(r"\{\s+\}", "{}", source)
    source = re.sub(r"\(\s+\)", "()", source)
    source = re.sub(r"\(\s+", "(", source)
    source = re.sub(r"\s+\)", ")", source)
    source = re.sub(r"\s*,\s*", ", ", source)
    source = re.sub(r",\s*\)", ")", source)
    return source.strip()


def _source(fn: Any) -> str | None:
    try:
        return textwrap.dedent(inspect.getsource(fn))
    except (OSError, TypeError):
        return None


def fallback_header(fn: Any) -> str:
    name = getattr(fn, "__name__", None) or "function"
    return f"def {name}(...): {ELLIPSIS}"


def function_header(fn: Any) -> str:
    """
    Extract a pretty one-line header for a function, lambda, method or class.

        def add(a, b): ...
        async def fetch(url, *, timeout=10): ...
        lambda x: ...
        class Point: def __init__(self, x, y): ...
    """
    source = _source(fn)
    if source is None:
        return fallback_header(fn)

    if getattr(fn, "__name__", None) == "<lambda>":
        match = MATCH_LAMBDA_HEADER.search(source)
        if match:
            return prettify(f"{match.group(0)} {ELLIPSIS}")

    match = MATCH_FUNCTION_HEADER.match(source)
    if match:
        return prettify(f"{match.group(0)} {ELLIPSIS}")

    match = MATCH_METHOD_HEADER.match(source)
    if match:
        return prettify(f"{match.group(1)} {ELLIPSIS}")

    match = MATCH_CLASS_HEADER.match(source)
    if match:
        header = match.group(1)
        ctor = MATCH_CONSTRUCTOR_HEADER.search(source)
        if ctor:
            return prettify(f"{header} {ctor.group(0)} {ELLIPSIS}")
        return prettify(f"{header} {ELLIPSIS}")

    return fallback_header(fn)
