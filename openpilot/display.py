"""Terminal text helpers for the transcript view: widths, wrapping and dividers."""

from __future__ import annotations

import os
import re
import unicodedata
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple

_DIVIDER_PREFIX = "[[pilot-divider:"
_DIVIDER_SUFFIX = "]]"
_ELLIPSIS = "…"
_ANSI = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")
_FUNCTION_KEYS = {f"f{n}": n - 1 for n in range(1, 13)}


def osc8_link(label: str, url: str) -> str:
    """Wrap ``label`` in an OSC 8 hyperlink to ``url``."""
    esc = "\x1b"
    st = esc + "\\"
    url = url.strip()
    if not url:
        return label
    return f"{esc}]8;;{url}{st}{label}{esc}]8;;{st}"


def can_use_osc8(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Whether the terminal described by ``environ`` should get OSC 8 links."""
    env = os.environ if environ is None else environ
    if env.get("OPEN_PILOT_DISABLE_OSC8") == "1":
        return False
    return env.get("TERM") != "dumb"


def function_key_index(key: str) -> Optional[int]:
    """Map ``f1``..``f12`` to 0..11; anything else gives ``None``."""
    return _FUNCTION_KEYS.get(key.strip().lower())


def parse_divider_title(content: str) -> Optional[str]:
    """Return the title of a ``[[pilot-divider:...]]`` token, or ``None``."""
    if not (content.startswith(_DIVIDER_PREFIX) and content.endswith(_DIVIDER_SUFFIX)):
        return None
    return content[len(_DIVIDER_PREFIX): len(content) - len(_DIVIDER_SUFFIX)].strip()


def _char_width(ch: str) -> int:
    if ord(ch) < 32 or ord(ch) == 0x7F:
        return 0
    if unicodedata.combining(ch) or unicodedata.category(ch) in ("Mn", "Me", "Cf"):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _tokens(text: str) -> Iterator[Tuple[str, int]]:
    pos = 0
    for match in _ANSI.finditer(text):
        for ch in text[pos:match.start()]:
            yield ch, _char_width(ch)
        yield match.group(0), 0
        pos = match.end()
    for ch in text[pos:]:
        yield ch, _char_width(ch)


def display_width(text: str) -> int:
    """Cells ``text`` occupies on a terminal, ignoring escape sequences."""
    return max((sum(w for _, w in _tokens(line)) for line in text.split("\n")), default=0)


def truncate_visible(text: str, width: int) -> str:
    """Shorten ``text`` to ``width`` cells, ending with an ellipsis if cut."""
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    if width == 1:
        return _ELLIPSIS
    return text[: width - 1] + _ELLIPSIS


def render_divider_line(title: str, width: int) -> str:
    """Draw a ``width``-cell rule with ``title`` centred in it."""
    if width <= 0:
        return ""
    title = title.strip()
    line_char = "═" if title.casefold() == "development work complete" else "─"
    if not title:
        return line_char * width
    label = f" {title} "
    label_width = display_width(label)
    if label_width >= width:
        return truncate_visible(label, width)
    left = (width - label_width) // 2
    right = width - label_width - left
    return line_char * left + label + line_char * right


def leading_spaces(text: str) -> int:
    """Number of space characters at the start of ``text``."""
    return len(text) - len(text.lstrip(" "))


def hardwrap(text: str, width: int) -> str:
    """Break ``text`` so no line exceeds ``width`` cells, dropping spaces at the breaks."""
    if width < 1:
        return text
    out: List[str] = []
    column = 0
    skip_spaces = False
    for piece, cells in _tokens(text):
        if piece == "\n":
            out.append(piece)
            column = 0
            skip_spaces = False
            continue
        if cells and column > 0 and column + cells > width:
            out.append("\n")
            column = 0
            skip_spaces = True
        if skip_spaces and piece == " ":
            continue
        if cells:
            skip_spaces = False
        out.append(piece)
        column += cells
    return "".join(out)


def wrap_transcript_lines(lines: Sequence[str], width: int) -> List[str]:
    """Wrap transcript lines to ``width``, keeping each line's indent and drawing dividers."""
    if width < 1:
        return list(lines)
    out: List[str] = []
    for line in lines:
        indent = leading_spaces(line)
        content = line.lstrip(" ")
        if not content:
            out.append(line)
            continue
        content_width = max(width - indent, 1)
        prefix = " " * indent
        title = parse_divider_title(content)
        if title is not None:
            out.append(prefix + render_divider_line(title, content_width))
            continue
        out.extend(prefix + part for part in hardwrap(content, content_width).split("\n"))
    return out