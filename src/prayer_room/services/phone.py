"""Phone number formatting for the submission form."""

import re

_NON_DIGITS = re.compile(r"\D")
_MAX_DIGITS = 11


def format_phone(value: str) -> str:
    """Reshape free-form input into ``DDD-DDDD-DDDD``.

    Non-digits are dropped and anything past the eleventh digit is cut off.
    Partial input keeps as many groups as it has digits for, so the function
    can run on every keystroke.
    """
    digits = _NON_DIGITS.sub("", value)[:_MAX_DIGITS]
    if len(digits) <= 3:
        return digits
    if len(digits) <= 7:
        return f"{digits[:3]}-{digits[3:]}"
    return f"{digits[:3]}-{digits[3:7]}-{digits[7:]}"
