"""
Record identity generation.

An id is a base-36 timestamp followed by a base-36 random part.
The timestamp keeps ids roughly time-ordered; the random part keeps
two ids created in the same instant apart.
"""

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def new_id() -> str:
    """Create a new collision-resistant record id."""
    timestamp = _base36(time.time_ns())
    # Fixed width so the split between the two parts never shifts.
    random_part = _base36(secrets.randbits(64)).rjust(13, "0")
    return timestamp + random_part
