"""
USB barcode scanner input device.

The scanner acts as a keyboard and is exposed as an evdev node, e.g.
/dev/input/by-id/usb-...-event-kbd. The device is grabbed (EVIOCGRAB) so
scanned keystrokes are not delivered to any other process.

Reads block in select() until the kernel has events; that wait is the only
place the relay loop suspends.
"""

import errno
import logging
import os
import select
from typing import List, Optional

from evdev import InputDevice, InputEvent

from .errors import DeviceOpenError, DeviceGrabError, DeviceReadError


logger = logging.getLogger(__name__)


class ScannerDevice:
    """Exclusive, blocking access to one scanner input device."""

    def __init__(self, device: InputDevice, path: Optional[str] = None):
        self._device = device
        self._path = path or device.path
        self._grabbed = False

    @classmethod
    def open(cls, path: str) -> 'ScannerDevice':
        """
        Open a scanner input device.

        Args:
            path: Path to the evdev node

        Returns:
            Opened device session.

        Raises:
            DeviceOpenError: If the path does not exist, is not accessible
                or is not an input device.
        """
        logger.info("Attempting to open scanner device: %s", path)

        if not os.path.exists(path):
            raise DeviceOpenError(path, "No such device")

        try:
            device = InputDevice(path)
        except PermissionError as e:
            raise DeviceOpenError(path, f"Permission denied ({e})") from e
        except OSError as e:
            if e.errno == errno.ENOTTY:
                raise DeviceOpenError(path, "Not an input device") from e
            raise DeviceOpenError(path, str(e)) from e

        logger.info("Scanner opened successfully: %s", device.name)
        return cls(device, path)

    @property
    def path(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        return self._device.name

    @property
    def grabbed(self) -> bool:
        return self._grabbed

    def grab(self) -> None:
        """
        Acquire exclusive access to the device.

        Raises:
            DeviceGrabError: If the grab fails, e.g. another process holds it.
        """
        logger.info("Attempting to grab scanner device: %s", self._path)
        try:
            self._device.grab()
        except OSError as e:
            if e.errno == errno.EBUSY:
                raise DeviceGrabError(self._path, "Device is grabbed by another process") from e
            raise DeviceGrabError(self._path, str(e)) from e

        self._grabbed = True
        logger.info("Scanner grabbed successfully")

    def read_events(self) -> List[InputEvent]:
        """
        Block until events are available and return the whole batch.

        Returns:
            Non-empty list of input events in kernel order.

        Raises:
            DeviceReadError: If the device fails or disappears.
        """
        while True:
            try:
                select.select([self._device.fd], [], [])
                events = list(self._device.read())
            except BlockingIOError:
                continue
            except OSError as e:
                raise DeviceReadError(self._path, str(e)) from e

            if events:
                return events

    def close(self) -> None:
        """Release the grab and close the device."""
        if self._grabbed:
            try:
                self._device.ungrab()
            except OSError as e:
                logger.debug("Ungrab failed for %s: %s", self._path, e)
            self._grabbed = False

        self._device.close()

    def __enter__(self) -> 'ScannerDevice':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
