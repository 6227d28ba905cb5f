"""Hash algorithms supported for HOTP/TOTP and the HMAC primitive behind them."""

import enum
import logging
from typing import Union

from cryptography.hazmat.primitives import hashes, hmac

from otp_core.errors import UnsupportedAlgorithm


logger = logging.getLogger(__name__)


class HashAlgorithm(enum.Enum):
    """The closed set of hash functions an OTP can be computed with."""

    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @classmethod
    def parse(cls, value: Union["HashAlgorithm", str]) -> "HashAlgorithm":
        """
        Resolve an algorithm selector to a HashAlgorithm member.

        Args:
            value: A HashAlgorithm member or a name such as "sha1", "SHA-256"
                or "sha_512" (case-insensitive).

        Returns:
            The matching HashAlgorithm.

        Raises:
            UnsupportedAlgorithm: If the selector names anything else.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnsupportedAlgorithm(
                f"Hash algorithm must be a name or HashAlgorithm, got {type(value).__name__}"
            )

        name = value.strip().lower().replace("-", "").replace("_", "")
        try:
            algorithm = cls(name)
        except ValueError as e:
            raise UnsupportedAlgorithm(
                f"Unsupported hash algorithm {value!r}; expected one of SHA1, SHA256, SHA512"
            ) from e

        logger.debug("Resolved hash algorithm %r to %s", value, algorithm.name)
        return algorithm

    @property
    def digest_size(self) -> int:
        """Length in bytes of the HMAC output."""
        return _HASHES[self].digest_size

    @property
    def key_length(self) -> int:
        """Conventional secret length in bytes (RFC 6238 errata 5132)."""
        return self.digest_size

    def compute_hmac(self, key: bytes, message: bytes) -> bytes:
        """Compute HMAC(key, message) with this hash function."""
        h = hmac.HMAC(key, _HASHES[self])
        h.update(message)
        return h.finalize()


_HASHES = {
    HashAlgorithm.SHA1: hashes.SHA1(),
    HashAlgorithm.SHA256: hashes.SHA256(),
    HashAlgorithm.SHA512: hashes.SHA512(),
}


def fit_secret(secret: Union[bytes, str], algorithm: Union[HashAlgorithm, str]) -> bytes:
    """
    Repeat or cut a secret to the conventional key length of an algorithm.

    This is how the RFC 6238 test vectors derive their SHA-256 and SHA-512
    keys from the 20-byte seed "12345678901234567890". generate() never does
    this on its own; callers that follow the convention opt in here.

    Args:
        secret: The shared secret. A string is encoded as UTF-8.
        algorithm: Algorithm whose key length to match.

    Returns:
        A secret of exactly ``algorithm.key_length`` bytes.

    Raises:
        ValueError: If the secret is empty.
        UnsupportedAlgorithm: If the algorithm is not supported.
    """
    algorithm = HashAlgorithm.parse(algorithm)
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    if not secret:
        raise ValueError("Cannot extend an empty secret")

    length = algorithm.key_length
    repeats = -(-length // len(secret))
    return (secret * repeats)[:length]
