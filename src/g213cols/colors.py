"""
Colour argument resolution.

Turns command-line tokens into 24-bit colours:

    []                      → DEFAULT_COLOR
    ["random"]              → any 24-bit value
    ["randomx11"]           → any X11 table colour
    ["ff0055"], ["0xf05"]   → hex (3 digits expand: f05 → ff0055)
    ["AliceBlue"]           → X11 name (case/underscore insensitive)
    ["medium", "violet red"]→ 2-3 tokens joined with spaces, name only

``resolve_n`` fills N region slots from one flat token list, matching
multi-word names by concatenating tokens until they form a known
single-token colour ("alice" + "blue" → "aliceblue").
"""

from __future__ import annotations

import logging
import random
import re
from typing import List, Optional, Sequence

from .x11_colors import ColorTable, load_color_table, normalize_name

log = logging.getLogger(__name__)

COLOR_MASK = 0xFFFFFF

DEFAULT_COLOR = 0xFFD0C0  # warm white, looks neutral on the G213 LEDs
ERROR_COLOR = 0xFF1010    # shown when a colour argument is not understood

MAX_NAME_TOKENS = 3

_HEX_RE = re.compile(r'[0-9a-fA-F]+')


def parse_hex_color(token: str) -> Optional[int]:
    """Parse ``[0x]hex`` into a 24-bit colour, or None if not hex.

    Exactly three digits are CSS-style shorthand: each nibble is doubled.
    Any other digit count is taken as a plain number, masked to 24 bits.
    """
    digits = token[2:] if token[:2] in ('0x', '0X') else token
    if not _HEX_RE.fullmatch(digits):
        return None

    value = int(digits, 16) & COLOR_MASK

    if len(digits) == 3:
        r, g, b = (value >> 8) & 0xF, (value >> 4) & 0xF, value & 0xF
        value = (r * 17) << 16 | (g * 17) << 8 | (b * 17)

    return value


class ColorResolver:
    """Resolve colour tokens against an X11 table.

    Args:
        table: Colour table; defaults to the bundled X11 table.
        rng: Random source for ``random``/``randomx11``; defaults to the
            process-wide ``random`` module.
    """

    def __init__(self, table: Optional[ColorTable] = None, rng=None):
        self.table = table if table is not None else load_color_table()
        self._rng = rng if rng is not None else random
        self._values = None

    def resolve(self, tokens: Sequence[str]) -> Optional[int]:
        """Resolve 0-3 tokens to one colour. None when unresolved."""
        if not tokens:
            return DEFAULT_COLOR

        if len(tokens) == 1:
            return self._resolve_single(tokens[0])

        if len(tokens) <= MAX_NAME_TOKENS:
            return self.table.lookup(' '.join(tokens))

        log.debug("Too many colour tokens (%d): %s", len(tokens), ' '.join(tokens))
        return None

    def _resolve_single(self, token: str) -> Optional[int]:
        keyword = token.lower()
        if keyword == 'random':
            return self._rng.randint(0, COLOR_MASK)
        if keyword == 'randomx11':
            if self._values is None:
                self._values = list(self.table.values())
            return self._rng.choice(self._values)

        value = parse_hex_color(token)
        if value is not None:
            return value

        return self.table.get(normalize_name(token))

    def resolve_n(self, tokens: Sequence[str], n: int) -> Optional[List[int]]:
        """Resolve a flat token list into exactly ``n`` colours.

        Tokens are concatenated (no separator) until the accumulated string
        resolves as a single token; the match is recorded and accumulation
        restarts. Once ``n`` colours are found the rest is ignored. If fewer
        were found, the last matched string is resolved again to fill the
        remaining slots.

        Returns None if nothing matched.
        """
        if n < 1:
            raise ValueError(f"need at least one colour slot, got {n}")

        if not tokens:
            return [DEFAULT_COLOR] * n

        colors: List[int] = []
        last_match = ''
        accumulated = ''

        for token in tokens:
            accumulated += token
            color = self._resolve_single(accumulated)
            if color is None:
                continue

            colors.append(color)
            last_match = accumulated
            accumulated = ''
            if len(colors) == n:
                break

        if not colors:
            log.debug("No colour found in: %s", ' '.join(tokens))
            return None

        while len(colors) < n:
            colors.append(self._resolve_single(last_match))

        if accumulated:
            log.debug("Ignoring unmatched colour tokens: %r", accumulated)

        return colors
