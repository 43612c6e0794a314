"""
Terminal styling.

ANSI SGR styles addressable by name (the `<chalk green-bold>` namespace),
the syntax-highlighting theme and the per-level colours used by the
colorful console formatter.
"""

import warnings
from dataclasses import dataclass
from functools import lru_cache

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.token import Comment, Keyword, Literal, Name, Number, String, _TokenType
from pygments.util import ClassNotFound

from logtide.levels import LogLevel


def _sgr(code: int) -> str:
    return f"\033[{code}m"


@dataclass(frozen=True)
class Style:
    """
    A chain of (open, close) SGR code pairs.

    Calling a style wraps text in its codes. Inner close codes are turned
    back into this style's open codes so nested spans resume the outer
    style, and styles are closed before and re-opened after each newline.
    """
    codes: tuple[tuple[int, int], ...] = ()

    def then(self, other: "Style") -> "Style":
        return Style(self.codes + other.codes)

    def __call__(self, text: str) -> str:
        if not self.codes or not text:
            return text
        open_all = "".join(_sgr(o) for o, _ in self.codes)
        close_all = "".join(_sgr(c) for _, c in reversed(self.codes))
        if "\033" in text:
            for o, c in reversed(self.codes):
                text = text.replace(_sgr(c), _sgr(o))
        if "\n" in text:
            text = text.replace("\n", f"{close_all}\n{open_all}")
        return f"{open_all}{text}{close_all}"


PLAIN = Style()

# ── Named styles ──────────────────────────────────────────────────

_MODIFIERS: dict[str, tuple[int, int]] = {
    "reset": (0, 0),
    "bold": (1, 22),
    "dim": (2, 22),
    "italic": (3, 23),
    "underline": (4, 24),
    "overline": (53, 55),
    "inverse": (7, 27),
    "hidden": (8, 28),
    "strikethrough": (9, 29),
}

_COLOR_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")


def _build_styles() -> dict[str, Style]:
    styles = {name: Style((pair,)) for name, pair in _MODIFIERS.items()}
    for offset, color in enumerate(_COLOR_NAMES):
        bg = "bg" + color.capitalize()
        styles[color] = Style(((30 + offset, 39),))
        styles[f"{color}Bright"] = Style(((90 + offset, 39),))
        styles[bg] = Style(((40 + offset, 49),))
        styles[f"{bg}Bright"] = Style(((100 + offset, 49),))
    for alias in ("gray", "grey"):
        styles[alias] = styles["blackBright"]
        styles["bg" + alias.capitalize()] = styles["bgBlackBright"]
    return styles


STYLES: dict[str, Style] = _build_styles()
_STYLES_FOLDED: dict[str, Style] = {name.lower(): style for name, style in STYLES.items()}


def lookup_style(name: str) -> Style | None:
    """Exact match first, then case-insensitive."""
    return STYLES.get(name) or _STYLES_FOLDED.get(name.lower())


def resolve_style(path: str) -> Style:
    """
    Resolve a hyphen-delimited style path such as "green-bold".

    Unknown segments are reported as a RuntimeWarning and skipped; the
    remaining segments still apply.
    """
    style = PLAIN
    for segment in path.split("-"):
        if not segment:
            continue
        found = lookup_style(segment)
        if found is None:
            warnings.warn(f"Unknown style: {segment}", RuntimeWarning, stacklevel=2)
            continue
        style = style.then(found)
    return style


# ── Level and header colours ──────────────────────────────────────

LEVEL_STYLES: dict[LogLevel, Style] = {
    LogLevel.DEBUG: STYLES["cyan"],
    LogLevel.INFO: STYLES["blue"],
    LogLevel.WARN: STYLES["yellow"],
    LogLevel.ERROR: STYLES["red"],
}

TIME_STYLE = STYLES["blueBright"]
NAME_STYLE = STYLES["magenta"]

# ── Syntax highlighting ───────────────────────────────────────────

THEME: dict[str, Style] = {
    "keyword": STYLES["blueBright"],
    "type": STYLES["magentaBright"],
    "built_in": STYLES["magentaBright"],
    "comment": STYLES["gray"],
    "string": STYLES["green"],
    "regexp": STYLES["blueBright"],
    "literal": STYLES["yellowBright"],
    "number": STYLES["yellowBright"],
}

# Most specific token types first.
_TOKEN_CLASSES: tuple[tuple[_TokenType, str], ...] = (
    (Keyword.Type, "type"),
    (Keyword.Constant, "literal"),
    (Keyword, "keyword"),
    (Name.Builtin, "built_in"),
    (Name.Class, "type"),
    (Comment, "comment"),
    (String.Regex, "regexp"),
    (String, "string"),
    (Number, "number"),
    (Literal, "literal"),
)


def token_style(ttype: _TokenType) -> Style | None:
    for token_class, theme_key in _TOKEN_CLASSES:
        if ttype in token_class:
            return THEME[theme_key]
    return None


@lru_cache(maxsize=64)
def _lexer(language: str) -> Lexer | None:
    try:
        return get_lexer_by_name(language, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return None


def highlight_code(code: str, language: str) -> str:
    """Highlight `code` as `language`. Unknown languages come back unchanged."""
    lexer = _lexer(language.lower())
    if lexer is None:
        return code
    parts = []
    for ttype, value in lexer.get_tokens(code):
        style = token_style(ttype)
        parts.append(style(value) if style is not None else value)
    return "".join(parts)
