"""Event builders shared by the test modules."""

from evdev import InputEvent, ecodes

DIGIT_CODES = {
    '0': ecodes.KEY_0, '1': ecodes.KEY_1, '2': ecodes.KEY_2, '3': ecodes.KEY_3,
    '4': ecodes.KEY_4, '5': ecodes.KEY_5, '6': ecodes.KEY_6, '7': ecodes.KEY_7,
    '8': ecodes.KEY_8, '9': ecodes.KEY_9,
}


def key(code, value):
    return InputEvent(0, 0, ecodes.EV_KEY, code, value)


def key_down(code):
    return key(code, 1)


def key_up(code):
    return key(code, 0)


def key_repeat(code):
    return key(code, 2)


def syn():
    return InputEvent(0, 0, ecodes.EV_SYN, ecodes.SYN_REPORT, 0)


def scan(digits, terminate=True):
    """Events a scanner produces when typing the given digits."""
    events = []
    for ch in digits:
        code = DIGIT_CODES[ch]
        events += [key_down(code), syn(), key_up(code), syn()]
    if terminate:
        events += [key_down(ecodes.KEY_ENTER), syn(), key_up(ecodes.KEY_ENTER), syn()]
    return events
