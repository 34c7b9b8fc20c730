"""
Prime-order elliptic-curve group used by the signature scheme.

The curve arithmetic comes from LightECC; this module only fixes one curve,
samples scalars and defines the canonical byte encodings:

    scalar:         big-endian, ceil(bits(q) / 8) bytes
    group element:  SEC1 compressed, 0x02/0x03 || x (big-endian)
"""

import logging
import os
from secrets import randbelow

from lightecc import LightECC
from lightecc.interfaces.elliptic_curve import EllipticCurvePoint

from .errors import EntropyError, SerializationError

logger = logging.getLogger(__name__)

DEFAULT_CURVE = os.environ.get('SCHNORR_SIG_CURVE', 'secp256k1')

_COMPRESSED_EVEN = 0x02
_COMPRESSED_ODD = 0x03
_UNCOMPRESSED = 0x04


class Group:
    """A prime-order elliptic-curve group with a fixed generator."""

    def __init__(self, curve_name: str = 'secp256k1', form_name: str = 'weierstrass'):
        self.curve_name = curve_name
        self.ec = LightECC(form_name=form_name, curve_name=curve_name)
        self.curve = self.ec.curve
        # - generator
        self.G = self.ec.G
        # - identity element
        self.O = self.ec.O
        # - group order
        self.q = self.ec.n
        # - base field modulus and curve coefficients (y^2 = x^3 + ax + b)
        self.p = self.curve.modulo
        self.a = self.curve.a
        self.b = self.curve.b
        # - size of a scalar in bytes
        self.encoded_scalar_len = (self.q.bit_length() + 7) // 8
        # - size of a field element in bytes
        self.encoded_field_len = (self.p.bit_length() + 7) // 8
        # - size of a compressed group element in bytes
        self.encoded_group_element_len = 1 + self.encoded_field_len

    def __repr__(self):
        return f"Group({self.curve_name!r})"

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def random_scalar(self) -> int:
        """Sample a scalar uniformly from [1, q) with the OS CSPRNG"""
        try:
            return 1 + randbelow(self.q - 1)
        except (OSError, NotImplementedError) as e:
            raise EntropyError("secure random source unavailable") from e

    def scalar_to_bytes(self, x: int) -> bytes:
        """Serialize a scalar in [0, q) into encoded_scalar_len bytes"""
        if not 0 <= x < self.q:
            raise SerializationError("scalar out of range")
        return x.to_bytes(self.encoded_scalar_len, 'big')

    def scalar_from_bytes(self, b: bytes) -> int:
        """Deserialize a scalar, rejecting non-canonical values"""
        if len(b) != self.encoded_scalar_len:
            raise SerializationError(
                f"expected {self.encoded_scalar_len} scalar bytes, got {len(b)}")
        x = int.from_bytes(b, 'big')
        if x >= self.q:
            raise SerializationError("scalar out of range")
        return x

    # ------------------------------------------------------------------
    # Group elements
    # ------------------------------------------------------------------

    def is_identity(self, P) -> bool:
        return P.x == self.O.x and P.y == self.O.y

    def is_on_curve(self, x: int, y: int) -> bool:
        p = self.p
        return (y * y - (x * x * x + self.a * x + self.b)) % p == 0

    def eq(self, P, Q) -> bool:
        """Point equality on affine coordinates"""
        return P.x == Q.x and P.y == Q.y

    def element_to_bytes(self, P) -> bytes:
        """Serialize a group element to its compressed SEC1 encoding"""
        if self.is_identity(P):
            raise SerializationError("the identity element has no encoding")
        prefix = _COMPRESSED_ODD if P.y & 1 else _COMPRESSED_EVEN
        return bytes([prefix]) + P.x.to_bytes(self.encoded_field_len, 'big')

    def element_from_bytes(self, b: bytes):
        """Deserialize a compressed or uncompressed SEC1 group element"""
        if not b:
            raise SerializationError("empty group element encoding")
        n = self.encoded_field_len
        prefix = b[0]

        if prefix == _UNCOMPRESSED:
            if len(b) != 1 + 2 * n:
                raise SerializationError("bad uncompressed point length")
            x = int.from_bytes(b[1:1 + n], 'big')
            y = int.from_bytes(b[1 + n:], 'big')
        elif prefix in (_COMPRESSED_EVEN, _COMPRESSED_ODD):
            if len(b) != 1 + n:
                raise SerializationError("bad compressed point length")
            x = int.from_bytes(b[1:], 'big')
            y = self._lift_x(x, prefix & 1)
        else:
            raise SerializationError(f"unknown point prefix 0x{prefix:02x}")

        if x >= self.p or y >= self.p or not self.is_on_curve(x, y):
            raise SerializationError("point is not on the curve")
        return EllipticCurvePoint(x, y, self.curve)

    def _lift_x(self, x: int, parity: int) -> int:
        """Recover y from x and the parity bit of y"""
        p = self.p
        if p % 4 != 3:
            # Tonelli-Shanks would be needed here
            raise SerializationError(
                f"point decompression not supported on {self.curve_name}")
        if x >= p:
            raise SerializationError("x coordinate out of range")
        y2 = (pow(x, 3, p) + self.a * x + self.b) % p
        y = pow(y2, (p + 1) // 4, p)
        if y * y % p != y2:
            raise SerializationError("x is not the abscissa of a curve point")
        return y if y & 1 == parity else p - y


DEFAULT_GROUP = Group(DEFAULT_CURVE)
logger.debug("default group: %r", DEFAULT_GROUP)

# Elliptic Curve group
# - generator
G = DEFAULT_GROUP.G
# - identity element
O = DEFAULT_GROUP.O
# - group order
q = DEFAULT_GROUP.q
