"""
Barcode decoder.

Folds raw evdev key events into completed barcode strings. A scan is the
sequence of digit key-downs typed by the scanner, terminated by Enter.

Rules, applied per event in arrival order:
- Non-key events (EV_SYN, EV_MSC, ...) are ignored.
- Only key-down transitions count; key-up and auto-repeat are ignored.
- Enter emits the buffer (possibly empty) and resets it.
- Any other key is translated; unmapped keys are reported and handled
  according to the unmapped policy.
"""

import logging
from enum import Enum, IntEnum
from typing import Optional, List, Iterable

from evdev import ecodes

from .errors import DecodeError, UnmappedKeycodeError, BufferOverflowError
from .keymap import keycode_to_char, is_terminator, key_name


logger = logging.getLogger(__name__)

# Default buffer capacity in characters
MAX_BARCODE_LENGTH = 64


class KeyTransition(IntEnum):
    """evdev key event values."""
    UP = 0
    DOWN = 1
    REPEAT = 2


class UnmappedPolicy(str, Enum):
    """What to do with a key-down that has no character mapping."""
    DROP = "drop"               # Lose the character, keep scanning
    INVALIDATE = "invalidate"   # Discard the whole scan at the next Enter


class OverflowPolicy(str, Enum):
    """What to do with a character that would exceed the maximum length."""
    INVALIDATE = "invalidate"   # Discard the whole scan at the next Enter
    REJECT = "reject"           # Keep the first max_length characters


class BarcodeDecoder:
    """
    Stateful key event to barcode decoder.

    The buffer is the only state: empty means idle. An invalidated scan
    keeps its flag until the next terminator, which then emits nothing.
    """

    def __init__(self,
                 max_length: int = MAX_BARCODE_LENGTH,
                 unmapped_policy: UnmappedPolicy = UnmappedPolicy.DROP,
                 overflow_policy: OverflowPolicy = OverflowPolicy.INVALIDATE):
        """
        Initialize decoder.

        Args:
            max_length: Buffer capacity in characters
            unmapped_policy: Handling of unmapped key codes
            overflow_policy: Handling of characters beyond max_length
        """
        if max_length < 1:
            raise ValueError(f"max_length must be positive, got {max_length}")

        self._max_length = max_length
        self._unmapped_policy = UnmappedPolicy(unmapped_policy)
        self._overflow_policy = OverflowPolicy(overflow_policy)
        self._buffer: List[str] = []
        self._invalid: Optional[DecodeError] = None

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def unmapped_policy(self) -> UnmappedPolicy:
        return self._unmapped_policy

    @property
    def overflow_policy(self) -> OverflowPolicy:
        return self._overflow_policy

    @property
    def buffer(self) -> str:
        """Characters collected so far for the scan in progress."""
        return ''.join(self._buffer)

    @property
    def invalidated(self) -> bool:
        return self._invalid is not None

    def reset(self) -> None:
        """Drop the scan in progress."""
        self._buffer.clear()
        self._invalid = None

    def feed(self, event) -> Optional[str]:
        """
        Fold one event into the decoder state.

        Args:
            event: evdev InputEvent (anything with type, code and value)

        Returns:
            Completed barcode when the terminator was seen, otherwise None.
            An empty string is a valid completed barcode.
        """
        if event.type != ecodes.EV_KEY:
            return None

        if event.value != KeyTransition.DOWN:
            return None

        if is_terminator(event.code):
            return self._complete()

        char = keycode_to_char(event.code)
        if char is None:
            self._unmapped(event.code)
            return None

        self._append(char)
        return None

    def feed_batch(self, events: Iterable) -> List[str]:
        """
        Fold a batch of events, returning completed barcodes in order.

        Convenience for callers that only need the barcodes, e.g. tests.
        ScanRelay.process_batch folds event by event instead, so each
        barcode is dispatched before the next event is decoded.
        """
        completed = []
        for event in events:
            barcode = self.feed(event)
            if barcode is not None:
                completed.append(barcode)
        return completed

    def _complete(self) -> Optional[str]:
        barcode = ''.join(self._buffer)
        invalid = self._invalid
        self.reset()

        if invalid is not None:
            logger.warning("Discarding invalidated scan %r: %s", barcode, invalid)
            return None

        return barcode

    def _append(self, char: str) -> None:
        if self._invalid is not None:
            return

        if len(self._buffer) >= self._max_length:
            error = BufferOverflowError(self._max_length)
            if self._overflow_policy == OverflowPolicy.INVALIDATE:
                logger.error("%s, scan invalidated", error)
                self._invalid = error
            else:
                logger.warning("%s, rejecting %r", error, char)
            return

        self._buffer.append(char)

    def _unmapped(self, code: int) -> None:
        error = UnmappedKeycodeError(code, key_name(code))
        logger.warning(str(error))

        if self._unmapped_policy == UnmappedPolicy.INVALIDATE and self._invalid is None:
            self._invalid = error
