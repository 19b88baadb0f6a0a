"""
HTTP dispatch of completed barcodes.

Each barcode is sent as GET <server_address>?barcode=<value>. Only HTTP 200
counts as delivered; the barcode is never retried or queued.
"""

import logging

import requests

from .errors import DispatchError


logger = logging.getLogger(__name__)


class BarcodeDispatcher:
    """Sends completed barcodes to the HTTP server."""

    DEFAULT_TIMEOUT = 5.0

    def __init__(self, server_address: str, timeout: float = DEFAULT_TIMEOUT,
                 session: requests.Session = None):
        """
        Initialize dispatcher.

        Args:
            server_address: URL the barcode query parameter is appended to
            timeout: Request timeout in seconds
            session: Optional requests session (module-level get if None)
        """
        self._server_address = server_address
        self._timeout = timeout
        self._session = session

    @property
    def server_address(self) -> str:
        return self._server_address

    def send(self, barcode: str) -> None:
        """
        Send one barcode.

        Raises:
            DispatchError: On transport failure or a non-200 response.
        """
        get = self._session.get if self._session is not None else requests.get
        try:
            r = get(self._server_address, params={'barcode': barcode}, timeout=self._timeout)
        except (requests.RequestException, ValueError) as e:
            raise DispatchError(barcode, str(e)) from e

        if r.status_code != requests.codes.ok:
            raise DispatchError(barcode, f"HTTP {r.status_code} from {r.url}", r.status_code)

        logger.info("Barcode %r successfully sent to HTTP server", barcode)
