"""
ANSI escape decoding: one raw line in, styled text segments out.

Only Select Graphic Rendition (CSI ... m) changes the style. Every other
escape sequence (cursor movement, erase, OSC titles/hyperlinks, charset
selection) is consumed and dropped.

The full parameter list of an SGR sequence is parsed as one unit, so
extended colors (38;5;N, 38;2;R;G;B and their 48;... background forms) are
consumed atomically. A single-code parser would see the trailing 9 of
38;5;9 as "strikethrough on"; parsing the list as a whole removes that
ambiguity, which is why SGR 9 is honored here.

Style never carries over from one line to the next: each call to decode()
starts from AnsiStyle().
"""

from __future__ import annotations

import re
from dataclasses import replace

from logtree.types import AnsiStyle, Color, NamedColor, Palette256, Rgb, StyledSegment

# CSI with parameters, intermediates and a final byte; OSC terminated by
# BEL or ST (or running to end of line); charset designation; any other
# two-byte escape; a CSI cut off by the end of the line; a lone ESC.
_ESCAPE = re.compile(
    r"\x1b(?:"
    r"\[(?P<params>[0-?]*)[ -/]*(?P<final>[@-~])"
    r"|\][^\x07\x1b]*(?:\x07|\x1b\\)?"
    r"|[()*+][A-Za-z0-9]?"
    r"|[0-Z\\^-~]"
    r"|\[[0-?]*[ -/]*$"
    r"|"
    r")"
)

_EXTENDED_FG = 38
_EXTENDED_BG = 48
_EXTENDED_UNDERLINE = 58

# code -> (attribute, value)
_FLAG_CODES: dict[int, tuple[str, bool]] = {
    1: ("bold", True),
    2: ("faint", True),
    3: ("italic", True),
    23: ("italic", False),
    4: ("underline", True),
    24: ("underline", False),
    5: ("blink", True),
    6: ("blink", True),
    25: ("blink", False),
    7: ("reversed", True),
    27: ("reversed", False),
    8: ("hidden", True),
    28: ("hidden", False),
    9: ("strikethrough", True),
    29: ("strikethrough", False),
}


def decode(line: str) -> list[StyledSegment]:
    """Split *line* into runs of text that share one style.

    A line without escape sequences comes back as a single unstyled
    segment holding the whole line. The result is never empty: a line
    made only of escapes yields one empty unstyled segment.
    """
    segments: list[StyledSegment] = []
    style = AnsiStyle()
    pending: list[str] = []
    pos = 0

    for m in _ESCAPE.finditer(line):
        if m.start() > pos:
            pending.append(line[pos:m.start()])
        pos = m.end()

        if pending:
            segments.append(StyledSegment("".join(pending), style))
            pending = []

        if m.group("final") == "m":
            style = apply_sgr(style, m.group("params"))

    if pos < len(line):
        pending.append(line[pos:])
    if pending:
        segments.append(StyledSegment("".join(pending), style))

    if not segments:
        return [StyledSegment("")]
    return segments


def strip_ansi(text: str) -> str:
    """Remove every escape sequence from *text*."""
    return _ESCAPE.sub("", text)


def slice_segments(
    segments: list[StyledSegment] | tuple[StyledSegment, ...],
    start: int,
    end: int,
) -> list[StyledSegment]:
    """Cut the plain-text range [start, end) out of *segments*, keeping styles.

    Offsets index the concatenated segment texts. An empty range yields a
    single empty unstyled segment.
    """
    result: list[StyledSegment] = []
    offset = 0
    for seg in segments:
        seg_end = offset + len(seg.text)
        lo = max(start, offset)
        hi = min(end, seg_end)
        if lo < hi:
            result.append(StyledSegment(seg.text[lo - offset:hi - offset], seg.style))
        offset = seg_end
        if offset >= end:
            break
    if not result:
        return [StyledSegment("")]
    return result


# ---------------------------------------------------------------------------
# SGR
# ---------------------------------------------------------------------------

def apply_sgr(style: AnsiStyle, params: str) -> AnsiStyle:
    """Return *style* updated by one SGR parameter string (e.g. "1;38;5;9").

    Private-mode parameter strings (leading < = > ?) are not SGR and leave
    the style untouched. Unknown codes are ignored.
    """
    if params and params[0] in "<=>?":
        return style
    if not params:
        return AnsiStyle()

    tokens = params.split(";")
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1

        # Colon sub-parameters (38:2::R:G:B) describe one color on their own
        if ":" in token:
            parts = token.split(":")
            code = _to_int(parts[0])
            if code in (_EXTENDED_FG, _EXTENDED_BG):
                color = _colon_color(parts[1:])
                style = _set_extended(style, code, color)
            elif code == 4:
                # 4:0 is "no underline", any other style is some underline
                style = replace(style, underline=_to_int(parts[1]) not in (0, None))
            continue

        code = 0 if token == "" else _to_int(token)
        if code is None:
            continue

        if code in (_EXTENDED_FG, _EXTENDED_BG, _EXTENDED_UNDERLINE):
            color, consumed = _semicolon_color(tokens, i)
            i += consumed
            style = _set_extended(style, code, color)
            continue

        style = _apply_code(style, code)

    return style


def _apply_code(style: AnsiStyle, code: int) -> AnsiStyle:
    if code == 0:
        return AnsiStyle()
    if code == 22:
        return replace(style, bold=False, faint=False)
    if code in _FLAG_CODES:
        attr, value = _FLAG_CODES[code]
        return replace(style, **{attr: value})
    if 30 <= code <= 37:
        return replace(style, fg_color=NamedColor(code - 30))
    if 90 <= code <= 97:
        return replace(style, fg_color=NamedColor(code - 90 + 8))
    if code == 39:
        return replace(style, fg_color=None)
    if 40 <= code <= 47:
        return replace(style, bg_color=NamedColor(code - 40))
    if 100 <= code <= 107:
        return replace(style, bg_color=NamedColor(code - 100 + 8))
    if code == 49:
        return replace(style, bg_color=None)
    return style


def _set_extended(style: AnsiStyle, code: int, color: Color | None) -> AnsiStyle:
    # 58 (underline color) has no slot in AnsiStyle; it is consumed only
    if color is None or code == _EXTENDED_UNDERLINE:
        return style
    if code == _EXTENDED_FG:
        return replace(style, fg_color=color)
    return replace(style, bg_color=color)


def _semicolon_color(tokens: list[str], i: int) -> tuple[Color | None, int]:
    """Read the color that follows 38/48 in a ';' list.

    Returns the color (None when malformed) and how many tokens it used.
    """
    if i >= len(tokens):
        return None, 0
    mode = _to_int(tokens[i])
    if mode == 5:
        if i + 1 >= len(tokens):
            return None, len(tokens) - i
        return _palette(_to_int(tokens[i + 1])), 2
    if mode == 2:
        if i + 3 >= len(tokens):
            return None, len(tokens) - i
        return _rgb([_to_int(t) for t in tokens[i + 1:i + 4]]), 4
    return None, 1


def _colon_color(parts: list[str]) -> Color | None:
    if not parts:
        return None
    mode = _to_int(parts[0])
    if mode == 5 and len(parts) >= 2:
        return _palette(_to_int(parts[1]))
    if mode == 2 and len(parts) >= 4:
        # 38:2:<colorspace>:R:G:B or the common 38:2:R:G:B
        channels = parts[-3:]
        return _rgb([_to_int(t) for t in channels])
    return None


def _palette(index: int | None) -> Color | None:
    if index is None or not 0 <= index <= 255:
        return None
    return Palette256(index)


def _rgb(values: list[int | None]) -> Color | None:
    if any(v is None or not 0 <= v <= 255 for v in values):
        return None
    r, g, b = values
    return Rgb(r, g, b)


def _to_int(token: str) -> int | None:
    return int(token) if token.isascii() and token.isdigit() else None
