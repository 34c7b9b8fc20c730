"""Schnorr signatures over a prime-order elliptic-curve group."""

from .errors import EntropyError, SchnorrError, SerializationError
from .group import DEFAULT_GROUP, Group
from .schnorr import KeyPair, Signature, derive_challenge, keygen, sign, verify

__all__ = [
    'DEFAULT_GROUP',
    'EntropyError',
    'Group',
    'KeyPair',
    'SchnorrError',
    'SerializationError',
    'Signature',
    'derive_challenge',
    'keygen',
    'sign',
    'verify',
]
