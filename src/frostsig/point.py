"""
This module defines the Point class, which represents points on an elliptic
curve. It includes methods for point arithmetic such as addition,
multiplication, and negation, as well as SEC 1 compressed serialization and
deserialization.

Every point carries the Curve it belongs to, so arithmetic never consults
module-level parameters and points from different curves cannot be mixed.
"""

from __future__ import annotations
from typing import Optional
from .curve import Curve, SECP256K1
from .errors import DecodingError


class Point:
    """Class representing an elliptic curve point."""

    def __init__(
        self,
        x: Optional[int] = None,
        y: Optional[int] = None,
        curve: Curve = SECP256K1,
    ):
        """
        Initialize a point on an elliptic curve.

        Parameters:
        x (Optional[int], optional): The x-coordinate of the point.
            Defaults to None, representing the point at infinity.
        y (Optional[int], optional): The y-coordinate of the point.
            Defaults to None, also representing the point at infinity.
        curve (Curve, optional): The curve the point lies on.

        The point at infinity serves as the identity element in elliptic curve addition.
        """
        self.x = x
        self.y = y
        self.curve = curve

    @classmethod
    def sec_deserialize(cls, data: bytes, curve: Curve = SECP256K1) -> Point:
        """
        Deserialize a SEC 1 compressed public key to a Point object.

        Parameters:
        data (bytes): 33 bytes, a 0x02/0x03 parity prefix followed by the
        big-endian x-coordinate.
        curve (Curve, optional): The curve to decode onto.

        Returns:
        Point: An instance of Point corresponding to the deserialized public key.

        Raises:
        DecodingError: If the input has the wrong length or prefix, or does
        not represent a point on the curve.
        """
        if len(data) != 33:
            raise DecodingError(
                "Input must be exactly 33 bytes long for SEC 1 compressed format."
            )
        if data[0] not in (2, 3):
            raise DecodingError("Invalid SEC 1 compressed prefix.")
        x = int.from_bytes(data[1:], "big")
        try:
            y = curve.lift_x(x, is_odd=data[0] == 3)
        except ValueError as e:
            raise DecodingError("Unable to compute point from x-coordinate.") from e

        return cls(x, y, curve)

    def sec_serialize(self) -> bytes:
        """
        Serialize the point to its SEC 1 compressed format.

        Returns:
        bytes: The SEC 1 compressed format of the point, consisting of a prefix
        and the x-coordinate.

        Raises:
        ValueError: If the point is at infinity.
        """
        if self.x is None or self.y is None:
            raise ValueError("Cannot serialize the point at infinity.")

        prefix = b"\x02" if self.y % 2 == 0 else b"\x03"
        return prefix + self.x.to_bytes(32, "big")

    def is_zero(self) -> bool:
        """
        Check if the point is the identity element (point at infinity).

        Returns:
        bool: True if the point is at infinity, False otherwise.
        """
        return self.x is None or self.y is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return (
            self.curve == other.curve and self.x == other.x and self.y == other.y
        )

    def __hash__(self) -> int:
        return hash((self.curve.name, self.x, self.y))

    def __neg__(self) -> Point:
        """
        Negate the point by reflecting it over the x-axis. The point at
        infinity is its own negation.
        """
        if self.x is None or self.y is None:
            return self

        return self.__class__(self.x, self.curve.p - self.y, self.curve)

    def _dbl(self) -> Point:
        """
        Double the point on the elliptic curve. If the point is at infinity or the y-coordinate
        is zero (implying the point is of order 2), the result is the point at infinity.
        """
        if self.x is None or self.y is None or self.y == 0:
            return self.__class__(curve=self.curve)

        P = self.curve.p
        x = self.x
        y = self.y
        s = (3 * x * x * pow(2 * y, P - 2, P)) % P
        sum_x = (s * s - 2 * x) % P
        sum_y = (s * (x - sum_x) - y) % P

        return self.__class__(sum_x, sum_y, self.curve)

    def __add__(self, other: Point) -> Point:
        """
        Add two points on an elliptic curve.

        Raises:
        ValueError: If other is not a Point on the same curve.
        """
        if not isinstance(other, Point):
            raise ValueError("The other object must be an instance of Point")
        if other.curve != self.curve:
            raise ValueError("Cannot add points on different curves")

        if self == other:
            return self._dbl()
        if self.x is None or self.y is None:
            return other
        if other.x is None or other.y is None:
            return self
        if self.x == other.x and self.y != other.y:
            return self.__class__(curve=self.curve)  # Point at infinity
        P = self.curve.p
        s = ((other.y - self.y) * pow(other.x - self.x, P - 2, P)) % P
        sum_x = (s * s - self.x - other.x) % P
        sum_y = (s * (self.x - sum_x) - self.y) % P

        return self.__class__(sum_x, sum_y, self.curve)

    def __sub__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            raise ValueError("The other object must be an instance of Point")

        return self + -other

    def __rmul__(self, scalar: int) -> Point:
        """
        Multiply this point by an integer scalar using the double-and-add
        method, reduced modulo the group order.

        Raises:
        ValueError: If the scalar is not an integer.
        """
        if not isinstance(scalar, int):
            raise ValueError("The scalar must be an integer")

        scalar = scalar % self.curve.q

        p = self
        r = self.__class__(curve=self.curve)
        i = 1

        while i <= scalar:
            if i & scalar:
                r = r + p
            p = p._dbl()
            i <<= 1

        return r

    def __str__(self) -> str:
        if self.is_zero():
            return "0"
        return f"X: 0x{self.x:x}\nY: 0x{self.y:x}"

    def __repr__(self) -> str:
        if self.is_zero():
            return f"{self.__class__.__name__}(x=None, y=None)"
        return f"{self.__class__.__name__}(x={self.x}, y={self.y})"
