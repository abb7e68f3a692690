"""
Curve parameters for the prime-order group used by the threshold signature
scheme. The curve is secp256k1: it operates over a finite field of prime order
p, with a base point G of prime order q, specified by its coordinates g_x and
g_y.

Parameters are modelled as an immutable value so that they can be passed
explicitly to every operation instead of living in mutable module state.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Curve:
    """Short Weierstrass curve y^2 = x^3 + b over the field of order p."""

    name: str
    # The prime modulus of the field
    p: int
    # The order of the group generated by G
    q: int
    # Constant term of the curve equation (a = 0)
    b: int
    g_x: int
    g_y: int

    @property
    def generator(self):
        """The base point G as a Point bound to this curve."""
        from .point import Point

        return Point(self.g_x, self.g_y, self)

    def contains(self, x: int, y: int) -> bool:
        """Check that (x, y) satisfies the curve equation."""
        if not (0 <= x < self.p and 0 <= y < self.p):
            return False
        return (y * y - pow(x, 3, self.p) - self.b) % self.p == 0

    def lift_x(self, x: int, is_odd: bool) -> int:
        """
        Recover the y-coordinate for x with the requested parity.

        Raises:
        ValueError: If x is not the x-coordinate of a point on the curve.
        """
        if not 0 <= x < self.p:
            raise ValueError("x-coordinate is not a field element.")
        y_squared = (pow(x, 3, self.p) + self.b) % self.p
        # p = 3 mod 4, so the square root is a single exponentiation
        y = pow(y_squared, (self.p + 1) // 4, self.p)
        if (y * y) % self.p != y_squared:
            raise ValueError("x-coordinate is not on the curve.")
        if (y % 2 == 1) != is_odd:
            y = self.p - y
        return y


SECP256K1: Curve = Curve(
    name="secp256k1",
    p=2**256 - 2**32 - 977,
    q=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    b=7,
    g_x=0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    g_y=0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
)
