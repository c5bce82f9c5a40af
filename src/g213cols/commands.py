"""
Lighting commands — argument tokens in, G213 packets out.

``build_command(name, tokens)`` turns a sub-command name and its raw tokens
into one of the ``LightingCommand`` variants plus a ``Status``.  Colour
tokens that can't be resolved are replaced by ERROR_COLOR so the keyboard
still visibly reacts, but the status reports the failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple, Union

from .colors import ERROR_COLOR, ColorResolver
from .device_g213 import send_packets
from .g213_protocol import (
    NUM_REGIONS,
    G213PacketBuilder,
    KeyboardRegion,
    limit_speed,
)

log = logging.getLogger(__name__)


class Status(IntEnum):
    """Command outcome, also the process exit code on failure."""
    SUCCESS = 0
    FAILURE = 1
    SUCCESS_NO_SAVE = 2  # worked, but not worth remembering (informational)

    @property
    def successful(self) -> bool:
        return self is not Status.FAILURE

    def exit_code(self) -> int:
        return 0 if self.successful else int(self)


class InvalidNumericArgument(ValueError):
    """A region or speed argument is not a valid unsigned integer."""


# =========================================================================
# Command variants
# =========================================================================

@dataclass(frozen=True)
class SetWholeKeyboard:
    color: int

    def packets(self) -> List[bytes]:
        return [G213PacketBuilder.build_keyboard_packet(self.color)]


@dataclass(frozen=True)
class SetRegion:
    region: KeyboardRegion
    color: int

    def packets(self) -> List[bytes]:
        return [G213PacketBuilder.build_region_packet(self.region, self.color)]


@dataclass(frozen=True)
class SetAllRegions:
    colors: Tuple[int, ...]

    def packets(self) -> List[bytes]:
        return [
            G213PacketBuilder.build_region_packet(region, color)
            for region, color in enumerate(self.colors, start=1)
        ]


@dataclass(frozen=True)
class Breathe:
    speed: int
    color: int

    def packets(self) -> List[bytes]:
        return [G213PacketBuilder.build_breathe_packet(self.speed, self.color)]


@dataclass(frozen=True)
class Cycle:
    speed: int

    def packets(self) -> List[bytes]:
        return [G213PacketBuilder.build_cycle_packet(self.speed)]


LightingCommand = Union[SetWholeKeyboard, SetRegion, SetAllRegions, Breathe, Cycle]


# =========================================================================
# Argument parsing
# =========================================================================

def parse_uint(token: str, bits: int, what: str) -> int:
    """Parse a decimal unsigned integer that fits in ``bits`` bits."""
    token = token.strip()
    if not token.isdecimal():
        raise InvalidNumericArgument(f"{what} must be a whole number, got {token!r}")
    value = int(token)
    if value >= 1 << bits:
        raise InvalidNumericArgument(f"{what} must be below {1 << bits}, got {value}")
    return value


def _color_or_error(resolver: ColorResolver, tokens: Sequence[str]) -> Tuple[int, Status]:
    color = resolver.resolve(tokens)
    if color is None:
        log.warning("Unknown colour: '%s'", ' '.join(tokens))
        return ERROR_COLOR, Status.FAILURE
    return color, Status.SUCCESS


def build_command(name: str, tokens: Sequence[str],
                  resolver: Optional[ColorResolver] = None,
                  ) -> Tuple[LightingCommand, Status]:
    """Build a lighting command from its name and argument tokens.

    Raises:
        InvalidNumericArgument: Region/speed token is not a valid number.
        ValueError: Missing required argument or unknown command name.
    """
    resolver = resolver or ColorResolver()
    name = name.lower()

    if name in ('colour', 'color'):
        color, status = _color_or_error(resolver, tokens)
        return SetWholeKeyboard(color), status

    if name == 'region':
        if not tokens:
            raise ValueError("At least one - 'region' ['colour'] - argument needed for 'region' command")
        region = KeyboardRegion.from_index(parse_uint(tokens[0], 8, "Region"))
        color, status = _color_or_error(resolver, tokens[1:])
        return SetRegion(region, color), status

    if name == 'regions':
        colors = resolver.resolve_n(tokens, NUM_REGIONS)
        if colors is None:
            log.warning("No colours found in: '%s'", ' '.join(tokens))
            return SetAllRegions((ERROR_COLOR,) * NUM_REGIONS), Status.FAILURE
        return SetAllRegions(tuple(colors)), Status.SUCCESS

    if name == 'breathe':
        if not tokens:
            raise ValueError("At least one - 'speed' ['colour'] - argument needed for 'breathe' command")
        speed = limit_speed(parse_uint(tokens[0], 16, "Speed"))
        color, status = _color_or_error(resolver, tokens[1:])
        return Breathe(speed, color), status

    if name == 'cycle':
        if len(tokens) != 1:
            raise ValueError("One 'speed' argument needed for 'cycle' command")
        return Cycle(limit_speed(parse_uint(tokens[0], 16, "Speed"))), Status.SUCCESS

    raise ValueError(f"Unknown command: '{name}'")


def run_command(device, command: LightingCommand, status: Status,
                timeout_ms: Optional[int] = None) -> Status:
    """Send a command's packets to the keyboard and pass its status through."""
    log.info("Running %s", command)
    send_packets(device, command.packets(), timeout_ms)
    return status
