"""
X11 colour name table.

Parses the bundled ``assets/rgb.txt`` (the classic X11 colour database)
into an immutable name → 0xRRGGBB lookup.

File format (one colour per line)::

    ! comment
    240 248 255		alice blue
    240 248 255		AliceBlue

The first three whitespace-separated fields are decimal red/green/blue;
the remaining fields, joined by single spaces and lowercased, are the name.
Names are kept exactly as the source lists them, so "alice blue" and
"aliceblue" are separate keys with the same value.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional

log = logging.getLogger(__name__)

_THIS_DIR = os.path.dirname(os.path.abspath(__file__))  # src/g213cols/
ASSETS_DIR = os.path.join(_THIS_DIR, 'assets')
RGB_TXT_PATH = os.path.join(ASSETS_DIR, 'rgb.txt')

COMMENT_PREFIXES = ('!', '#')


def pack_rgb(r: int, g: int, b: int) -> int:
    """Pack 8-bit components into a 24-bit 0xRRGGBB value."""
    return r * 256 * 256 + g * 256 + b


def normalize_name(name: str) -> str:
    """Lowercase a colour name and turn underscores into spaces."""
    return name.lower().replace('_', ' ')


class ColorTable(Mapping):
    """Read-only mapping of lowercase colour names to 24-bit values."""

    def __init__(self, entries: Dict[str, int]):
        self._colors = MappingProxyType(dict(entries))

    def __getitem__(self, name: str) -> int:
        return self._colors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._colors)

    def __len__(self) -> int:
        return len(self._colors)

    def __repr__(self) -> str:
        return f"ColorTable({len(self)} colours)"

    def lookup(self, name: str) -> Optional[int]:
        """Case- and underscore-insensitive lookup. None if unknown."""
        return self._colors.get(normalize_name(name))

    def names(self) -> List[str]:
        """Colour names in source order."""
        return list(self._colors)


def parse_color_table(text: str) -> ColorTable:
    """Parse rgb.txt-formatted text into a ColorTable.

    Raises:
        ValueError: On a line without a name or with bad RGB fields.
    """
    entries: Dict[str, int] = {}

    for lineno, line in enumerate(text.splitlines(), 1):
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue

        parts = line.split()
        if len(parts) < 4:
            raise ValueError(f"rgb.txt line {lineno}: expected 'R G B name', got {line!r}")

        try:
            r, g, b = (int(p) for p in parts[:3])
        except ValueError:
            raise ValueError(f"rgb.txt line {lineno}: bad RGB value in {line!r}") from None

        if not all(0 <= c <= 255 for c in (r, g, b)):
            raise ValueError(f"rgb.txt line {lineno}: RGB out of range in {line!r}")

        name = ' '.join(parts[3:]).lower()
        entries[name] = pack_rgb(r, g, b)

    return ColorTable(entries)


# Module-level cached table
_COLOR_TABLE: Optional[ColorTable] = None


def load_color_table() -> ColorTable:
    """Get the bundled X11 colour table, parsing it on first use."""
    global _COLOR_TABLE
    if _COLOR_TABLE is None:
        with open(RGB_TXT_PATH, 'r', encoding='ascii') as f:
            _COLOR_TABLE = parse_color_table(f.read())
        log.debug("Loaded %d X11 colours from %s", len(_COLOR_TABLE), RGB_TXT_PATH)
    return _COLOR_TABLE
