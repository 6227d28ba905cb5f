"""Exceptions raised by OTP generation and counter derivation."""


class OTPError(ValueError):
    """Base class for invalid OTP inputs."""


class InvalidTimestamp(OTPError):
    """The point in time cannot be turned into a counter."""


class InvalidTimeStep(OTPError):
    """The time step is not a positive whole number of seconds."""


class UnsupportedAlgorithm(OTPError):
    """The hash algorithm is not one of SHA1, SHA256 or SHA512."""


class InvalidDigitCount(OTPError):
    """The requested number of digits is not a positive integer."""


class InvalidCounter(OTPError):
    """The counter does not fit in an unsigned 64-bit integer."""
