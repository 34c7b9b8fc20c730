"""
Schnorr Signature Scheme

Key generation: sk ∈ Zq, pk = g^sk
Signing: (R, s) where R = g^r and s = r + H(m || R) * sk
Verification: Check g^s = R · pk^H(m || R)

The challenge H(m || R) is the Fiat-Shamir transform of the interactive
identification protocol: the digest of the message followed by the
compressed commitment, reduced mod q.
"""

import argparse
import hashlib
import logging
import os
from typing import NamedTuple

from .errors import SerializationError
from .group import DEFAULT_GROUP, Group

logger = logging.getLogger(__name__)

DEFAULT_HASH = os.environ.get('SCHNORR_SIG_HASH', 'sha256')


class KeyPair(NamedTuple):
    sk: int
    pk: object

    def __repr__(self):
        return f"KeyPair(sk=<hidden>, pk=({self.pk.x:#x}, {self.pk.y:#x}))"


class Signature(NamedTuple):
    """A Schnorr signature: commitment R and response s"""
    R: object
    s: int

    def __eq__(self, other):
        if not isinstance(other, Signature):
            return NotImplemented
        return (self.s == other.s
                and self.R.x == other.R.x and self.R.y == other.R.y)

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash((self.R.x, self.R.y, self.s))

    def to_bytes(self, group: Group = None) -> bytes:
        """Serialize a signature to bytes"""
        group = group or DEFAULT_GROUP
        return group.element_to_bytes(self.R) + group.scalar_to_bytes(self.s)

    @classmethod
    def from_bytes(cls, data: bytes, group: Group = None) -> 'Signature':
        """Deserialize a signature from bytes"""
        group = group or DEFAULT_GROUP
        n = group.encoded_group_element_len
        if len(data) != n + group.encoded_scalar_len:
            raise SerializationError(
                f"expected {n + group.encoded_scalar_len} signature bytes, got {len(data)}")
        R = group.element_from_bytes(data[:n])
        s = group.scalar_from_bytes(data[n:])
        return cls(R, s)


def derive_challenge(message: bytes, R, group: Group = None, hash_name: str = None) -> int:
    """
    Compute the Fiat-Shamir challenge c = H(message || R) mod q.

    Args:
        message: Message being signed (bytes)
        R: Commitment (group element)

    Returns:
        Challenge as an integer in Zq
    """
    group = group or DEFAULT_GROUP
    h = hashlib.new(hash_name or DEFAULT_HASH)
    h.update(message)
    h.update(group.element_to_bytes(R))
    return int.from_bytes(h.digest(), 'big') % group.q


def keygen(group: Group = None) -> KeyPair:
    """
    Generate a Schnorr key pair.

    Returns:
        (sk, pk): secret key (int) and public key (group element)
    """
    group = group or DEFAULT_GROUP
    sk = group.random_scalar()
    pk = sk * group.G  # pk = g^sk (in additive notation: sk * G)
    logger.debug("generated key pair on %s", group.curve_name)
    return KeyPair(sk, pk)


def sign(sk: int, message: bytes, group: Group = None, hash_name: str = None) -> Signature:
    """
    Sign a message using Schnorr signature scheme.

    Args:
        sk: Secret key (integer in Zq)
        message: Message to sign (bytes)

    Returns:
        (R, s): Signature where R is a group element and s is an integer
    """
    group = group or DEFAULT_GROUP
    if not 0 < sk < group.q:
        raise ValueError("secret key must be in [1, q)")

    # Sample a fresh nonce r ∈ Zq on every call
    r = group.random_scalar()

    # Compute commitment R = g^r
    R = r * group.G

    c = derive_challenge(message, R, group, hash_name)

    # Compute response s = r + c * sk (mod q)
    s = (r + c * sk) % group.q

    logger.debug("signed %d byte message", len(message))
    return Signature(R, s)


def verify(pk, message: bytes, signature, group: Group = None, hash_name: str = None) -> bool:
    """
    Verify a Schnorr signature.

    Args:
        pk: Public key (group element)
        message: Message that was signed (bytes)
        signature: (R, s) signature tuple

    Returns:
        True if signature is valid, False otherwise
    """
    group = group or DEFAULT_GROUP
    R, s = signature

    if not 0 <= s < group.q or group.is_identity(pk):
        logger.debug("signature rejected")
        return False

    try:
        c = derive_challenge(message, R, group, hash_name)
    except SerializationError:
        logger.debug("signature rejected")
        return False

    # Check: g^s = R · pk^c
    # In additive notation: s * G = R + c * pk
    lhs = s * group.G
    rhs = R + c * pk

    if not group.eq(lhs, rhs):
        logger.debug("signature rejected")
        return False
    return True


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate a key pair, sign a message and verify it.")
    parser.add_argument('--message', default='Hello world!',
                        help="message to sign (default: %(default)r)")
    parser.add_argument('--curve', default=None,
                        help="LightECC weierstrass curve name (default: $SCHNORR_SIG_CURVE or secp256k1)")
    args = parser.parse_args(argv)

    group = Group(args.curve) if args.curve else DEFAULT_GROUP
    msg = args.message.encode('utf-8')

    sk, pk = keygen(group)
    sig = sign(sk, msg, group)
    result = verify(pk, msg, sig, group)
    print(f"Verify={result}")
    return 0 if result else 1


if __name__ == '__main__':
    raise SystemExit(main())
