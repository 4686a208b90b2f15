"""Text formatting utilities for the TUI.

Hides the details of code-fence extraction, syntax highlighting and
terminal escape cleanup.
"""

import re
from dataclasses import dataclass

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

FENCE = "```"

_LANGUAGE_TAG = re.compile(r"[A-Za-z0-9_+#.-]+")
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")

# Keep code layout exactly as written
_LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}


class HighlightError(Exception):
    """A code segment could not be highlighted."""


@dataclass(frozen=True)
class Segment:
    """A run of answer text, either plain prose or fenced code."""

    text: str
    is_code: bool = False
    language: str = ""


def _split_language(body: str) -> tuple[str, str]:
    """Separate an optional language tag line from fenced code."""
    first_line, newline, rest = body.partition("\n")
    if not newline:
        return "", body
    tag = first_line.strip()
    if not tag:
        return "", rest
    if _LANGUAGE_TAG.fullmatch(tag):
        return tag, rest
    return "", body


def split_code_fences(text: str) -> list[Segment]:
    """Split text into plain and code segments on triple-backtick fences.

    Segments are non-overlapping and in original order; concatenating the
    plain segments with the fenced bodies reproduces the input minus the
    fence markers and language tags. An unclosed fence leaves the rest of
    the text (fence included) as a plain segment.
    """
    segments: list[Segment] = []
    start = 0

    while True:
        open_index = text.find(FENCE, start)
        if open_index == -1:
            segments.append(Segment(text[start:]))
            break

        segments.append(Segment(text[start:open_index]))

        close_index = text.find(FENCE, open_index + len(FENCE))
        if close_index == -1:
            segments.append(Segment(text[open_index:]))
            break

        language, code = _split_language(text[open_index + len(FENCE):close_index])
        segments.append(Segment(code, is_code=True, language=language))
        start = close_index + len(FENCE)

    return segments


def _select_lexer(code: str, language: str) -> Lexer:
    if language:
        try:
            return get_lexer_by_name(language, **_LEXER_OPTIONS)
        except ClassNotFound:
            pass
    try:
        return guess_lexer(code, **_LEXER_OPTIONS)
    except ClassNotFound:
        return TextLexer(**_LEXER_OPTIONS)


def highlight_code(code: str, language: str = "", style: str = "friendly") -> str:
    """Highlight one code snippet with 256-colour terminal escapes.

    Uses the language hint when Pygments knows it, otherwise guesses the
    language from the code, otherwise falls back to plain text.

    Raises:
        HighlightError: If the style is unknown or formatting fails
    """
    try:
        formatter = Terminal256Formatter(style=style)
    except ClassNotFound as e:
        raise HighlightError(f"No highlight style named '{style}'") from e

    lexer = _select_lexer(code, language)
    try:
        return highlight(code, lexer, formatter)
    except Exception as e:
        raise HighlightError(f"Failed to highlight {lexer.name} code: {e}") from e


def highlight_answer(text: str, style: str = "friendly") -> str:
    """Highlight every fenced code block of an answer.

    Plain segments are kept byte for byte; text without fences is
    returned unchanged.

    Raises:
        HighlightError: If any code segment cannot be highlighted
    """
    parts = []
    for segment in split_code_fences(text):
        if segment.is_code:
            parts.append(highlight_code(segment.text, segment.language, style))
        else:
            parts.append(segment.text)
    return "".join(parts)


def strip_ansi(text: str) -> str:
    """Remove terminal colour and formatting escape sequences."""
    return _ANSI_ESCAPE.sub("", text)
