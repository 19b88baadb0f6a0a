"""
Core modules for the barcode relay.

Provides scanner device access, keycode translation, barcode decoding,
HTTP dispatch and the relay loop tying them together.
"""

from .scanner import ScannerDevice
from .decoder import BarcodeDecoder, UnmappedPolicy, OverflowPolicy, KeyTransition
from .dispatcher import BarcodeDispatcher
from .relay import ScanRelay

__all__ = [
    'ScannerDevice',
    'BarcodeDecoder',
    'UnmappedPolicy',
    'OverflowPolicy',
    'KeyTransition',
    'BarcodeDispatcher',
    'ScanRelay',
]
