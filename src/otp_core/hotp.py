"""RFC 4226 HOTP and RFC 6238 TOTP code generation."""

import logging
from typing import Union

from otp_core.algorithms import HashAlgorithm
from otp_core.counter import DEFAULT_STEP_SECONDS, DEFAULT_T0, Timestamp, derive_counter
from otp_core.errors import InvalidCounter, InvalidDigitCount


logger = logging.getLogger(__name__)

DEFAULT_DIGITS = 6
DEFAULT_ALGORITHM = HashAlgorithm.SHA1

MAX_COUNTER = 2**64 - 1
# A 31-bit truncated value has at most 10 decimal digits
MAX_NATURAL_DIGITS = 10

Algorithm = Union[HashAlgorithm, str]
Secret = Union[bytes, str]


def generate(
    algorithm: Algorithm, secret: Secret, counter: int, digits: int
) -> str:
    """
    Generate a one-time password for an explicit counter.

    Args:
        algorithm: Hash function for the HMAC (SHA1, SHA256 or SHA512).
        secret: The shared secret as bytes. A string is encoded as UTF-8.
            The secret is used as-is, without padding or truncation.
        counter: The moving factor, an unsigned 64-bit integer.
        digits: Number of digits in the output code.

    Returns:
        The code as a string of exactly ``digits`` characters, zero-padded.

    Raises:
        UnsupportedAlgorithm: If the algorithm is not SHA1, SHA256 or SHA512.
        InvalidDigitCount: If digits is not a positive integer.
        InvalidCounter: If the counter does not fit in 64 unsigned bits.
    """
    algorithm = HashAlgorithm.parse(algorithm)
    _check_digits(digits)
    counter_bytes = counter_to_bytes(counter)

    if isinstance(secret, str):
        secret = secret.encode("utf-8")

    hmac_digest = algorithm.compute_hmac(secret, counter_bytes)

    code = dynamic_truncate(hmac_digest) % (10**digits)
    return f"{code:0{digits}d}"


def counter_to_bytes(counter: int) -> bytes:
    """
    Encode a counter as the 8-byte big-endian HMAC message.

    Raises:
        InvalidCounter: If the counter is not an integer in [0, 2**64 - 1].
    """
    if isinstance(counter, bool) or not isinstance(counter, int):
        raise InvalidCounter(f"Counter must be an integer, got {counter!r}")
    if not 0 <= counter <= MAX_COUNTER:
        raise InvalidCounter(f"Counter {counter} is outside the unsigned 64-bit range")

    return counter.to_bytes(8, byteorder="big")


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Apply RFC 4226 dynamic truncation (section 5.3).

    The low nibble of the last digest byte selects a 4-byte window, read
    big-endian with the sign bit cleared.

    Args:
        hmac_digest: HMAC output, at least 20 bytes.

    Returns:
        A non-negative 31-bit integer.
    """
    offset = hmac_digest[-1] & 0x0F
    binary = int.from_bytes(hmac_digest[offset : offset + 4], byteorder="big")
    return binary & 0x7FFFFFFF


def hotp(
    secret: Secret,
    counter: int,
    digits: int = DEFAULT_DIGITS,
    algorithm: Algorithm = DEFAULT_ALGORITHM,
) -> str:
    """Generate an HOTP code (default: 6 digits, HMAC-SHA1)."""
    return generate(algorithm, secret, counter, digits)


def totp(
    secret: Secret,
    timestamp: Timestamp = None,
    step_seconds: int = DEFAULT_STEP_SECONDS,
    digits: int = DEFAULT_DIGITS,
    algorithm: Algorithm = DEFAULT_ALGORITHM,
    t0: int = DEFAULT_T0,
) -> str:
    """
    Generate a TOTP code for a point in time.

    Args:
        secret: The shared secret.
        timestamp: Point in time (default: now); see derive_counter().
        step_seconds: Time step in seconds (default: 30).
        digits: Number of digits in the code (default: 6).
        algorithm: Hash function for the HMAC (default: SHA1).
        t0: Unix time at which counting starts (default: 0).

    Returns:
        The zero-padded TOTP code.
    """
    # Validate cheap inputs before touching the clock or the HMAC
    algorithm = HashAlgorithm.parse(algorithm)
    _check_digits(digits, warn=False)

    counter = derive_counter(timestamp, step_seconds, t0=t0)
    return generate(algorithm, secret, counter, digits)


def _check_digits(digits: int, warn: bool = True) -> None:
    if isinstance(digits, bool) or not isinstance(digits, int):
        raise InvalidDigitCount(f"Digit count must be an integer, got {digits!r}")
    if digits <= 0:
        raise InvalidDigitCount(f"Digit count must be positive, got {digits}")
    if warn and digits > MAX_NATURAL_DIGITS:
        logger.warning(
            "Requested %d digits; codes carry at most %d significant digits, "
            "the rest are leading zeros",
            digits,
            MAX_NATURAL_DIGITS,
        )
