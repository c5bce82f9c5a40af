"""
Logitech G213 lighting protocol — constants and packet builders.

Every lighting command is a single 20-byte HID output report sent with a
SET_REPORT control transfer.  Layout (hex, lowercase)::

    11 ff 0c 3a  <mode fields ...>  00 ... 00
    ^^^^^ report id / device index
          ^^ feature (lighting)
             ^^ function (set effect)

Mode fields:
    Whole keyboard:  00 01 RR GG BB 02
    Region 1-5:      rr 01 RR GG BB 02
    Breathe:         00 02 RR GG BB SS SS 00 64
    Cycle:           00 03 ff ff ff 00 00 SS SS 64

SS SS is the effect period in milliseconds, big-endian.
"""

from __future__ import annotations

import logging
from enum import IntEnum

log = logging.getLogger(__name__)

# =========================================================================
# USB identifiers and transfer parameters
# =========================================================================

LOGITECH_VID = 0x046D
G213_PID = 0xC336

G213_INTERFACE = 1
EP_INTERRUPT_IN = 0x82

REQ_TYPE = 0x21       # host→device, class, interface
REQ_SET_REPORT = 0x09
REPORT_VALUE = 0x0211  # output report, id 0x11
REPORT_INDEX = 0x0001  # interface 1

CMD_LEN = 20
DEFAULT_TIMEOUT_MS = 200

# =========================================================================
# Packet fields
# =========================================================================

HEADER = bytes([0x11, 0xFF, 0x0C, 0x3A])

EFFECT_STATIC = 0x01
EFFECT_BREATHE = 0x02
EFFECT_CYCLE = 0x03

STATIC_TRAILER = 0x02
EFFECT_BRIGHTNESS = 0x64  # 100%

MIN_SPEED = 32       # ms, anything faster is clamped
MAX_SPEED = 0xFFFF

NUM_REGIONS = 5


class KeyboardRegion(IntEnum):
    """Lighting zones, left to right. 0 addresses the whole keyboard."""
    WHOLE_KEYBOARD = 0
    REGION_1 = 1
    REGION_2 = 2
    REGION_3 = 3
    REGION_4 = 4
    REGION_5 = 5

    @classmethod
    def from_index(cls, index: int) -> KeyboardRegion:
        """Map an index to a region; anything outside 0-5 is the whole keyboard."""
        if 0 <= index <= NUM_REGIONS:
            return cls(index)
        log.debug("Region %d out of range, using whole keyboard", index)
        return cls.WHOLE_KEYBOARD


def limit_speed(speed: int) -> int:
    """Clamp an effect period to MIN_SPEED..MAX_SPEED."""
    return max(MIN_SPEED, min(MAX_SPEED, speed))


def packet_hex(packet: bytes) -> str:
    """Render a packet as lowercase hex for logs."""
    return packet.hex()


def _rgb(color: int) -> bytes:
    color &= 0xFFFFFF
    return bytes([(color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF])


def _build(fields: bytes) -> bytes:
    """Header + fields, zero-padded to CMD_LEN."""
    f = bytearray(CMD_LEN)
    f[0:4] = HEADER
    f[4:4 + len(fields)] = fields
    return bytes(f)


class G213PacketBuilder:
    """Builds the 20-byte G213 lighting packets."""

    @staticmethod
    def build_region_packet(region: int, color: int) -> bytes:
        """Static colour for one region, or the whole keyboard for region 0."""
        return _build(bytes([region, EFFECT_STATIC]) + _rgb(color) + bytes([STATIC_TRAILER]))

    @staticmethod
    def build_keyboard_packet(color: int) -> bytes:
        """Static colour for the whole keyboard."""
        return G213PacketBuilder.build_region_packet(KeyboardRegion.WHOLE_KEYBOARD, color)

    @staticmethod
    def build_breathe_packet(speed: int, color: int) -> bytes:
        """Pulse one colour with a period of ``speed`` ms."""
        return _build(
            bytes([KeyboardRegion.WHOLE_KEYBOARD, EFFECT_BREATHE])
            + _rgb(color)
            + speed.to_bytes(2, 'big')
            + bytes([0x00, EFFECT_BRIGHTNESS])
        )

    @staticmethod
    def build_cycle_packet(speed: int) -> bytes:
        """Sweep through the colour wheel with a period of ``speed`` ms."""
        return _build(
            bytes([KeyboardRegion.WHOLE_KEYBOARD, EFFECT_CYCLE])
            + _rgb(0xFFFFFF)
            + bytes([0x00, 0x00])
            + speed.to_bytes(2, 'big')
            + bytes([EFFECT_BRIGHTNESS])
        )
