"""Color & style helpers for the printed task listing.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Palette overrides come from Settings.colors (ADO_PRIMARY, ADO_WONTDO,
  ADO_TODO, ADO_DONE).
"""
from __future__ import annotations
import os, sys
from typing import Dict, Mapping

from models import Status

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))


def _code(part: str) -> str:
    return f"\033[{part}m" if _ENABLE else ''


def _hex_to_rgb(hex_code: str) -> tuple[int, int, int]:
    h = hex_code.lstrip('#')
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    idx = 16 + 36 * to_6(r) + 6 * to_6(g) + to_6(b)
    return f"\033[38;5;{idx}m"


def from_hex(hex_code: str) -> str:
    """ANSI foreground sequence for a hex color ('' when color is off)."""
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)


RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')

DEFAULT_HEX: Dict[str, str] = {
    'PRIMARY': '#476EAE',
    'WONTDO': '#9A9A9A',
    'TODO': '#48B3AF',
    'DONE': '#A7E399',
}


class Palette:
    """Resolved ANSI sequences for headers and each status."""

    def __init__(self, overrides: Mapping[str, str] | None = None):
        hexes = dict(DEFAULT_HEX)
        hexes.update(overrides or {})
        self.header = from_hex(hexes['PRIMARY'])
        self.empty = DIM + self.header
        self.status: Dict[Status, str] = {
            Status.WONTDO: from_hex(hexes['WONTDO']) + DIM,
            Status.TODO: from_hex(hexes['TODO']),
            Status.DONE: from_hex(hexes['DONE']),
        }


def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET
