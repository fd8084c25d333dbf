"""Base42 booking codes.

Codes use a 42 character alphabet without visually confusing characters
(0, 1, I, O, i), e.g. ``TH-Bh7kQ2gN9``.
"""

import random
import re
import time

ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789abcdefghjk"
BASE = len(ALPHABET)

BOOKING_PREFIX = "TH-"
PROPERTY_PREFIX = "P-"
SERVICE_PREFIX = "S-"

# Booking code payload = timestamp_ms * RANDOM_SPACE + random part
RANDOM_SPACE = 1_000_000

_VALID_BODY = re.compile(f"^[{ALPHABET}]+$")


def encode_number(num: int) -> str:
    """Encode a non-negative integer in Base42."""
    if num < 0:
        raise ValueError("Cannot encode negative numbers")
    if num == 0:
        return ALPHABET[0]

    digits = []
    while num > 0:
        num, remainder = divmod(num, BASE)
        digits.append(ALPHABET[remainder])
    return "".join(reversed(digits))


def decode_number(encoded: str) -> int:
    """
    Decode a Base42 string.

    Raises:
        ValueError: On characters outside the alphabet
    """
    result = 0
    for char in encoded:
        value = ALPHABET.find(char)
        if value == -1:
            raise ValueError(f"Invalid Base42 character: {char}")
        result = result * BASE + value
    return result


def is_valid_code_body(value: str) -> bool:
    """Check a string only uses Base42 characters."""
    return bool(_VALID_BODY.match(value))


def generate_booking_code(now_ms: int | None = None, rand: int | None = None) -> str:
    """
    Generate a unique booking code from the current time and a random part.

    Args:
        now_ms: Timestamp in milliseconds (defaults to now)
        rand: Random part in [0, 1_000_000) (defaults to a random draw)
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    if rand is None:
        rand = random.randrange(RANDOM_SPACE)

    return BOOKING_PREFIX + encode_number(now_ms * RANDOM_SPACE + rand)


def decode_booking_code(code: str) -> tuple[int, int] | None:
    """Extract (timestamp_ms, random) from a booking code, None if malformed."""
    if not code.startswith(BOOKING_PREFIX):
        return None

    body = code[len(BOOKING_PREFIX):]
    if not body:
        return None

    try:
        payload = decode_number(body)
    except ValueError:
        return None
    return divmod(payload, RANDOM_SPACE)


def _uuid_prefix_number(uuid_str: str) -> int:
    return int(uuid_str.replace("-", "")[:12], 16)


def generate_property_code(property_id: str) -> str:
    """Short property code derived from a UUID."""
    return PROPERTY_PREFIX + encode_number(_uuid_prefix_number(property_id))


def generate_service_code(service_id: str) -> str:
    """Short service provider code derived from a UUID."""
    return SERVICE_PREFIX + encode_number(_uuid_prefix_number(service_id))
