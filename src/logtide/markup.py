"""
Magic tags.

Log messages and metadata strings may embed inline markup:

    <hl sql>SELECT * FROM users</hl>     syntax-highlighted snippet
    <chalk green-bold>done</chalk>       styled span

Tags are matched in a single non-greedy pass over the original text.
They do not nest, and a tag only matches when its closing marker names
the same tag. Anything that does not match is left as literal text.

Plain destinations strip the markup down to the tag body; the colorful
console resolves each tag into ANSI-styled text.
"""

import re
from collections.abc import Callable

from logtide.styles import highlight_code, resolve_style

MAGIC_TAG = re.compile(r"<(hl|chalk) +([\w-]+) *>(.+?)</\1 *>", re.DOTALL)

# (tag name, parameter, body) -> replacement text
Resolver = Callable[[str, str, str], str]


def substitute(text: str, resolver: Resolver) -> str:
    """Replace every magic tag in `text` with `resolver(tag, param, body)`."""
    return MAGIC_TAG.sub(lambda m: resolver(m.group(1), m.group(2), m.group(3)), text)


def strip_tags(tag: str, param: str, body: str) -> str:
    return body


def strip_markup(text: str) -> str:
    """Plain rendering: keep tag bodies, drop the markup."""
    return substitute(text, strip_tags)


class StyledResolver:
    """
    Resolves tags into ANSI-styled text.

    `hl` treats its parameter as a language name; `chalk` treats it as a
    hyphen-delimited style path.
    """

    def __call__(self, tag: str, param: str, body: str) -> str:
        if tag == "hl":
            return highlight_code(body, param)
        return resolve_style(param)(body)


# Private-use code points, so placeholders cannot collide with log text.
_PLACEHOLDER_OPEN = "\ue000"
_PLACEHOLDER_CLOSE = "\ue001"
_PLACEHOLDER = re.compile(
    f"{_PLACEHOLDER_OPEN}((?:\033\\[[0-9;]*m|\\d)+){_PLACEHOLDER_CLOSE}"
)
_ANSI = re.compile(r"\033\[[0-9;]*m")


def highlight_markup(text: str, resolver: Resolver | None = None, language: str = "yaml") -> str:
    """
    Two-pass styled rendering.

    1. Resolve each magic tag and swap it for a numbered placeholder.
    2. Highlight the remaining text as `language`.
    3. Put the resolved spans back in place of the placeholders.
    """
    resolver = resolver or StyledResolver()
    resolved: list[str] = []

    def stash(match: re.Match) -> str:
        resolved.append(resolver(match.group(1), match.group(2), match.group(3)))
        return f"{_PLACEHOLDER_OPEN}{len(resolved) - 1}{_PLACEHOLDER_CLOSE}"

    partially = highlight_code(MAGIC_TAG.sub(stash, text), language)
    if not resolved:
        return partially

    # The highlighter may have wrapped colour codes around the index digits.
    def restore(match: re.Match) -> str:
        return resolved[int(_ANSI.sub("", match.group(1)))]

    return _PLACEHOLDER.sub(restore, partially)
