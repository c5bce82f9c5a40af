"""
USB session handling for the Logitech G213 keyboard.

The lighting interface (1) is normally bound to the kernel's usbhid driver.
A ``G213Session`` takes it over for the duration of one command::

    FOUND → OPENED → (driver detached) → CLAIMED
          → RELEASED → (driver reattached) → CLOSED

and always gives it back, including when a transfer fails, so the keyboard
never stays detached from its kernel driver.

Each packet is sent as a SET_REPORT control transfer; the keyboard
acknowledges on the interrupt IN endpoint, which is read and discarded.

Requires: ``pip install pyusb`` + ``apt install libusb-1.0-0``
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Iterable, Optional

import usb.core
import usb.util

from .g213_protocol import (
    CMD_LEN,
    DEFAULT_TIMEOUT_MS,
    EP_INTERRUPT_IN,
    G213_INTERFACE,
    G213_PID,
    LOGITECH_VID,
    REPORT_INDEX,
    REPORT_VALUE,
    REQ_SET_REPORT,
    REQ_TYPE,
    packet_hex,
)

log = logging.getLogger(__name__)


# =========================================================================
# Errors
# =========================================================================

class G213Error(RuntimeError):
    """Base class for keyboard communication failures."""


class DeviceNotFoundError(G213Error):
    """No G213 keyboard is connected (or libusb is unavailable)."""


class DriverControlError(G213Error):
    """Kernel driver detach/attach or interface claim/release failed."""


class TransferError(G213Error):
    """A control write or interrupt read failed."""


class TransferTimeoutError(TransferError):
    """A control write or interrupt read did not complete in time."""


# =========================================================================
# Discovery
# =========================================================================

def find_g213_keyboard():
    """Return the first connected G213 as a pyusb device.

    Raises:
        DeviceNotFoundError: If none is connected or libusb is missing.
    """
    try:
        device = usb.core.find(idVendor=LOGITECH_VID, idProduct=G213_PID)
    except usb.core.NoBackendError as e:
        raise DeviceNotFoundError(
            f"No libusb backend available ({e}). "
            "Install libusb: apt install libusb-1.0-0 (Debian/Ubuntu) "
            "or dnf install libusb1 (Fedora)"
        ) from e

    if device is None:
        raise DeviceNotFoundError(
            f"No G213 keyboard found (VID={LOGITECH_VID:#06x} PID={G213_PID:#06x})"
        )

    log.info("Found G213 on bus %s address %s", device.bus, device.address)
    return device


def _usb_string(device, index: int) -> str:
    if not index:
        return ""
    try:
        return usb.util.get_string(device, index) or ""
    except (usb.core.USBError, ValueError) as e:
        log.debug("Could not read string descriptor %d: %s", index, e)
        return ""


def describe_device(device) -> dict:
    """Identification details for display (ids, bus position, strings)."""
    return {
        'vid': device.idVendor,
        'pid': device.idProduct,
        'bus': device.bus,
        'address': device.address,
        'manufacturer': _usb_string(device, device.iManufacturer),
        'product': _usb_string(device, device.iProduct),
        'serial': _usb_string(device, device.iSerialNumber),
    }


# =========================================================================
# Session
# =========================================================================

class SessionState(Enum):
    FOUND = auto()
    OPENED = auto()
    CLAIMED = auto()
    RELEASED = auto()
    CLOSED = auto()


class G213Session:
    """Exclusive ownership of the G213 lighting interface.

    Use as a context manager; the interface is released and the kernel
    driver reattached on every exit path::

        with G213Session(find_g213_keyboard()) as session:
            session.send(packet)
    """

    def __init__(self, device, timeout_ms: int = DEFAULT_TIMEOUT_MS):
        self.device = device
        self.timeout_ms = timeout_ms
        self.state = SessionState.FOUND
        self.driver_detached = False

    def _set_state(self, state: SessionState) -> None:
        log.debug("G213 session: %s → %s", self.state.name, state.name)
        self.state = state

    def open(self) -> None:
        """Detach the kernel driver if bound, then claim the interface.

        Raises:
            DriverControlError: If any step fails.  Whatever was already
                done is undone before raising.
        """
        if self.state is not SessionState.FOUND:
            raise RuntimeError(f"Session already used (state {self.state.name})")

        self._set_state(SessionState.OPENED)
        try:
            if self.device.is_kernel_driver_active(G213_INTERFACE):
                self.device.detach_kernel_driver(G213_INTERFACE)
                self.driver_detached = True
                log.info("Detached kernel driver from interface %d", G213_INTERFACE)

            usb.util.claim_interface(self.device, G213_INTERFACE)
        except usb.core.USBError as e:
            try:
                self.close()
            except DriverControlError as cleanup_err:
                log.warning("Cleanup after failed open also failed: %s", cleanup_err)
            raise DriverControlError(
                f"Could not claim G213 interface {G213_INTERFACE}: {e}"
            ) from e

        self._set_state(SessionState.CLAIMED)

    def send(self, packet: bytes) -> bytes:
        """Write one packet and wait for the interrupt acknowledgement.

        Returns:
            The acknowledgement bytes (not validated).

        Raises:
            TransferTimeoutError: If either transfer timed out.
            TransferError: On any other USB failure.
        """
        if self.state is not SessionState.CLAIMED:
            raise RuntimeError("Session not open")
        if len(packet) != CMD_LEN:
            raise ValueError(f"G213 packets are {CMD_LEN} bytes, got {len(packet)}")

        log.debug("→ %s", packet_hex(packet))
        self._transfer(
            "control write",
            self.device.ctrl_transfer,
            REQ_TYPE, REQ_SET_REPORT, REPORT_VALUE, REPORT_INDEX, packet,
            timeout=self.timeout_ms,
        )
        ack = bytes(self._transfer(
            "interrupt read",
            self.device.read,
            EP_INTERRUPT_IN, CMD_LEN,
            timeout=self.timeout_ms,
        ))
        log.debug("← %s", packet_hex(ack))
        return ack

    def _transfer(self, what: str, fn, *args, timeout: int):
        try:
            return fn(*args, timeout=timeout)
        except usb.core.USBTimeoutError as e:
            raise TransferTimeoutError(f"G213 {what} timed out after {timeout} ms") from e
        except usb.core.USBError as e:
            raise TransferError(f"G213 {what} failed: {e}") from e

    def close(self) -> None:
        """Release the interface and reattach the kernel driver.

        Every step is attempted even if an earlier one fails.

        Raises:
            DriverControlError: With the first failure, after all steps ran.
        """
        if self.state is SessionState.CLOSED:
            return

        errors = []

        if self.state is SessionState.CLAIMED:
            try:
                usb.util.release_interface(self.device, G213_INTERFACE)
            except usb.core.USBError as e:
                errors.append(e)
            self._set_state(SessionState.RELEASED)

        if self.driver_detached:
            try:
                self.device.attach_kernel_driver(G213_INTERFACE)
                self.driver_detached = False
                log.info("Reattached kernel driver to interface %d", G213_INTERFACE)
            except usb.core.USBError as e:
                errors.append(e)

        try:
            usb.util.dispose_resources(self.device)
        except usb.core.USBError as e:
            errors.append(e)

        self._set_state(SessionState.CLOSED)

        if errors:
            raise DriverControlError(
                f"Could not restore G213 interface {G213_INTERFACE}: {errors[0]}"
            ) from errors[0]

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
            return
        try:
            self.close()
        except DriverControlError as cleanup_err:
            log.warning("Cleanup after failed command also failed: %s", cleanup_err)


def send_packets(device, packets: Iterable[bytes],
                 timeout_ms: Optional[int] = None) -> None:
    """Send packets to the keyboard within a single session."""
    with G213Session(device, timeout_ms or DEFAULT_TIMEOUT_MS) as session:
        for packet in packets:
            session.send(packet)
