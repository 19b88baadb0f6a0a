"""
Keycode translation table for numeric barcode scanners.

Scanners in keyboard-emulation mode type each digit on the top number row
and finish the scan with Enter. Only those keys are mapped; every other
key code is unmapped.
"""

from typing import Optional

from evdev import ecodes


# Enter key ends a scan
TERMINATOR_CODE = ecodes.KEY_ENTER

# Keycode to character mapping (number row only)
KEYCODE_MAP = {
    ecodes.KEY_0: '0', ecodes.KEY_1: '1', ecodes.KEY_2: '2',
    ecodes.KEY_3: '3', ecodes.KEY_4: '4', ecodes.KEY_5: '5',
    ecodes.KEY_6: '6', ecodes.KEY_7: '7', ecodes.KEY_8: '8',
    ecodes.KEY_9: '9',
}


def keycode_to_char(code: int) -> Optional[str]:
    """Return the character for a key code, or None if unmapped."""
    return KEYCODE_MAP.get(code)


def is_terminator(code: int) -> bool:
    return code == TERMINATOR_CODE


def key_name(code: int) -> Optional[str]:
    """
    Symbolic evdev name for a key code, e.g. 'KEY_A'.

    Some codes have several aliases in ecodes.KEY; the first one is used.
    """
    name = ecodes.KEY.get(code)
    if isinstance(name, (list, tuple)):
        name = name[0] if name else None
    return name
