"""Tests for hash algorithm selection."""

import pytest

from otp_core.algorithms import HashAlgorithm, fit_secret
from otp_core.errors import UnsupportedAlgorithm


@pytest.mark.parametrize(
    "name, expected",
    [
        ("sha1", HashAlgorithm.SHA1),
        ("SHA1", HashAlgorithm.SHA1),
        ("SHA-1", HashAlgorithm.SHA1),
        ("sha256", HashAlgorithm.SHA256),
        ("SHA_256", HashAlgorithm.SHA256),
        (" sha512 ", HashAlgorithm.SHA512),
        (HashAlgorithm.SHA512, HashAlgorithm.SHA512),
    ],
)
def test_parse(name, expected):
    """Test that algorithm names resolve case-insensitively."""
    assert HashAlgorithm.parse(name) is expected


@pytest.mark.parametrize("name", ["md5", "sha384", "", None, 1])
def test_parse_unsupported(name):
    """Test that anything outside SHA1/SHA256/SHA512 fails fast."""
    with pytest.raises(UnsupportedAlgorithm):
        HashAlgorithm.parse(name)


def test_digest_sizes():
    """Test HMAC output lengths per algorithm."""
    assert HashAlgorithm.SHA1.digest_size == 20
    assert HashAlgorithm.SHA256.digest_size == 32
    assert HashAlgorithm.SHA512.digest_size == 64

    for algorithm in HashAlgorithm:
        digest = algorithm.compute_hmac(b"key", b"\x00" * 8)
        assert len(digest) == algorithm.digest_size


def test_compute_hmac_rfc2202():
    """Test HMAC-SHA1 against RFC 2202 test case 2."""
    digest = HashAlgorithm.SHA1.compute_hmac(b"Jefe", b"what do ya want for nothing?")
    assert digest.hex() == "effcdf6ae5eb2fa2d27416d5f184df9c259a7c79"


def test_fit_secret():
    """Test that secrets are repeated and cut to the conventional length."""
    seed = b"12345678901234567890"

    assert fit_secret(seed, "sha1") == seed
    assert fit_secret(seed, HashAlgorithm.SHA256) == b"12345678901234567890123456789012"
    assert fit_secret(seed, "sha512") == (seed * 4)[:64]
    assert len(fit_secret(b"x" * 100, "sha256")) == 32


def test_fit_secret_empty():
    """Test that an empty secret cannot be extended."""
    with pytest.raises(ValueError, match="empty"):
        fit_secret(b"", "sha256")


def test_fit_secret_unsupported_algorithm():
    """Test that fit_secret validates the algorithm."""
    with pytest.raises(UnsupportedAlgorithm):
        fit_secret(b"secret", "md5")


def test_fit_secret_encodes_string():
    """Test that string secrets are UTF-8 encoded before fitting."""
    fitted = fit_secret("é" * 20, "sha256")

    assert isinstance(fitted, bytes)
    assert len(fitted) == 32
    assert fitted == ("é" * 20).encode("utf-8")[:32]
