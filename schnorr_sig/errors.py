"""Exceptions raised by the Schnorr signature package."""


class SchnorrError(Exception):
    """Base class for all errors raised by schnorr_sig"""


class EntropyError(SchnorrError, RuntimeError):
    """The secure random source could not produce a value"""


class SerializationError(SchnorrError, ValueError):
    """A group element or scalar could not be encoded or decoded"""
