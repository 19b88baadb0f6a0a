"""
Scan relay loop.

Reads event batches from the scanner, folds them through the decoder and
sends each completed barcode before reading again. Dispatch failures are
logged and the loop continues; device failures propagate to the caller.
"""

import logging
import time
from typing import Optional, List, Dict, Any

from .decoder import BarcodeDecoder
from .dispatcher import BarcodeDispatcher
from .errors import DispatchError
from .scanner import ScannerDevice


logger = logging.getLogger(__name__)


class ScanRelay:
    """
    Forwards barcodes from one scanner to one HTTP server.

    Keeps simple scan statistics for status reporting.
    """

    MAX_HISTORY = 20

    def __init__(self, device: ScannerDevice, decoder: BarcodeDecoder,
                 dispatcher: BarcodeDispatcher):
        self._device = device
        self._decoder = decoder
        self._dispatcher = dispatcher

        # Scan statistics
        self._scan_count = 0
        self._dispatch_failures = 0
        self._last_scan: Optional[str] = None
        self._last_scan_time: Optional[float] = None
        self._scan_history: List[dict] = []

    @property
    def scan_count(self) -> int:
        return self._scan_count

    @property
    def dispatch_failures(self) -> int:
        return self._dispatch_failures

    @property
    def last_scan(self) -> Optional[str]:
        return self._last_scan

    def get_status(self) -> Dict[str, Any]:
        """Get relay status as dict."""
        return {
            'device_path': self._device.path,
            'server_address': self._dispatcher.server_address,
            'scan_count': self._scan_count,
            'dispatch_failures': self._dispatch_failures,
            'last_scan': self._last_scan,
            'last_scan_time': self._last_scan_time,
            'history': list(self._scan_history),
        }

    def run(self) -> None:
        """
        Relay scans forever.

        Raises:
            DeviceReadError: If reading from the scanner fails.
        """
        logger.info("All ready! Listening for scanner input...")
        while True:
            self.process_batch(self._device.read_events())

    def process_batch(self, events) -> List[str]:
        """Decode a batch of events and dispatch every completed barcode."""
        completed = []
        for event in events:
            barcode = self._decoder.feed(event)
            if barcode is not None:
                self.handle_scan(barcode)
                completed.append(barcode)
        return completed

    def handle_scan(self, barcode: str) -> bool:
        """
        Record and send one completed barcode.

        Returns:
            True if the barcode was delivered.
        """
        logger.info("Scanned barcode: %s", barcode)

        now = time.time()
        self._scan_count += 1
        self._last_scan = barcode
        self._last_scan_time = now

        delivered = True
        try:
            self._dispatcher.send(barcode)
        except DispatchError as e:
            self._dispatch_failures += 1
            delivered = False
            logger.error("An error occurred while sending the barcode to the HTTP server: %s",
                         e.reason)

        self._scan_history.append({
            'value': barcode,
            'time': now,
            'delivered': delivered,
        })
        if len(self._scan_history) > self.MAX_HISTORY:
            self._scan_history = self._scan_history[-self.MAX_HISTORY:]

        return delivered
