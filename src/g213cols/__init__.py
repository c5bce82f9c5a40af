"""
g213-cols - Logitech G213 keyboard backlight control

Sets the five lighting zones of a Logitech G213 Prodigy keyboard over USB,
with colours given as hex values, X11 colour names or 'random'.

Usage:
    # As a library
    from g213cols import ColorResolver, G213PacketBuilder, send_packets
    from g213cols import find_g213_keyboard

    color = ColorResolver().resolve(["dodger", "blue"])
    send_packets(find_g213_keyboard(),
                 [G213PacketBuilder.build_keyboard_packet(color)])

    # Command line
    g213-cols colour alice blue
    g213-cols regions red orange yellow green blue
"""

from g213cols.__version__ import __version__

from g213cols.colors import DEFAULT_COLOR, ERROR_COLOR, ColorResolver
from g213cols.device_g213 import (
    DeviceNotFoundError,
    DriverControlError,
    G213Error,
    G213Session,
    TransferError,
    TransferTimeoutError,
    find_g213_keyboard,
    send_packets,
)
from g213cols.g213_protocol import G213PacketBuilder, KeyboardRegion, limit_speed
from g213cols.x11_colors import ColorTable, load_color_table

__all__ = [
    # Version
    "__version__",
    # Colours
    "ColorResolver",
    "ColorTable",
    "load_color_table",
    "DEFAULT_COLOR",
    "ERROR_COLOR",
    # Protocol
    "G213PacketBuilder",
    "KeyboardRegion",
    "limit_speed",
    # Device
    "G213Session",
    "find_g213_keyboard",
    "send_packets",
    "G213Error",
    "DeviceNotFoundError",
    "DriverControlError",
    "TransferError",
    "TransferTimeoutError",
]
