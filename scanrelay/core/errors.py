"""
Exception hierarchy for the barcode relay.

Device and configuration errors are fatal and are handled once, in main().
Decode and dispatch errors are reported and absorbed where they occur.
"""

from typing import Optional, List


class ScanRelayError(Exception):
    """Base class for all relay errors."""


# === Device layer (fatal) ===
class DeviceError(ScanRelayError):
    """Scanner input device failure."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class DeviceOpenError(DeviceError):
    """Device path missing, inaccessible or not an input device."""


class DeviceGrabError(DeviceError):
    """Exclusive access could not be acquired."""


class DeviceReadError(DeviceError):
    """Reading events from the device failed."""


# === Configuration (fatal at startup) ===
class ConfigError(ScanRelayError):
    """Invalid configuration."""


class MissingConfigurationError(ConfigError):
    """One or more required settings are missing."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__("Missing required setting(s): " + ", ".join(self.missing))


# === Decode layer (reported, never raised out of the decoder) ===
class DecodeError(ScanRelayError):
    """A key event could not be folded into the barcode."""


class UnmappedKeycodeError(DecodeError):
    """Key-down code with no character mapping."""

    def __init__(self, code: int, name: Optional[str] = None):
        self.code = code
        self.name = name
        label = f"{code} ({name})" if name else str(code)
        super().__init__(f"Could not find char for code: {label}")


class BufferOverflowError(DecodeError):
    """Barcode exceeded the configured maximum length."""

    def __init__(self, max_length: int):
        self.max_length = max_length
        super().__init__(f"Barcode exceeds maximum length of {max_length} characters")


# === Dispatch (reported, loop continues) ===
class DispatchError(ScanRelayError):
    """Barcode could not be delivered to the HTTP server."""

    def __init__(self, barcode: str, reason: str, status_code: Optional[int] = None):
        self.barcode = barcode
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to send barcode {barcode!r}: {reason}")
