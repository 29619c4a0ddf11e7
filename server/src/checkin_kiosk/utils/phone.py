"""Phone number canonicalization shared by the kiosk and the lookup service"""

import re

_NON_DIGITS = re.compile(r"\D")

# Shortest national number accepted after an international prefix
MIN_NATIONAL_DIGITS = 8


def strip_non_digits(value: str) -> str:
    """Remove spaces, dashes, parentheses and anything else that is not 0-9"""
    return _NON_DIGITS.sub("", value)


def cell_to_str(value) -> str:
    """Render a table cell as text.

    Spreadsheets hand back numeric-looking cells as numbers, so a phone typed
    as 0912345678 may come back as 912345678 or 912345678.0.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def canonical_phone(value, country_code: str = "886") -> str:
    """
    Reduce a phone number to the form used for matching.

    Non-digits are dropped, an international prefix for ``country_code``
    (optionally written with a leading "00") is removed when a full national
    number follows it, and leading zeros are stripped so that numbers stored
    without their trunk zero still match.

    Args:
        value: Phone number as typed or as stored (str, int or float)
        country_code: Calling code to strip, without "+"

    Returns:
        Digit string, empty when the input holds no digits
    """
    digits = strip_non_digits(cell_to_str(value))
    if country_code:
        for prefix in (f"00{country_code}", country_code):
            if not digits.startswith(prefix):
                continue
            national = digits[len(prefix) :].lstrip("0")
            if len(national) >= MIN_NATIONAL_DIGITS:
                digits = national
                break
    return digits.lstrip("0")
