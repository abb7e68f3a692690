"""
The ciphersuite bundles the group (a Curve) with the hash function and the
domain-separation context used to derive scalars from protocol transcripts.

A Ciphersuite is immutable. It is passed explicitly to every operation of the
scheme; `SECP256K1_SHA256` is the default used when no other is given.
"""

from __future__ import annotations
from dataclasses import dataclass
from hashlib import sha256
import secrets
from .curve import Curve, SECP256K1
from .errors import DecodingError
from .point import Point

SCALAR_SIZE = 32
POINT_SIZE = 33
INDEX_SIZE = 4


@dataclass(frozen=True)
class Ciphersuite:
    """Group parameters plus the hashing conventions built on them."""

    curve: Curve
    context: bytes

    @property
    def order(self) -> int:
        return self.curve.q

    @property
    def generator(self) -> Point:
        return self.curve.generator

    def identity(self) -> Point:
        return Point(curve=self.curve)

    def random_scalar(self) -> int:
        """Sample a uniformly random non-zero scalar from a CSPRNG."""
        # 1 ≤ k ≤ q - 1
        return secrets.randbelow(self.curve.q - 1) + 1

    def tagged_hash(self, tag: str, *parts: bytes) -> bytes:
        """
        SHA-256 tagged hash in the BIP340 style: the tag (prefixed with the
        suite context) is hashed once and prepended twice to the data.
        """
        tag_hash = sha256(self.context + b"/" + tag.encode()).digest()
        hasher = sha256()
        hasher.update(tag_hash)
        hasher.update(tag_hash)
        for part in parts:
            hasher.update(part)
        return hasher.digest()

    def hash_to_scalar(self, tag: str, *parts: bytes) -> int:
        return int.from_bytes(self.tagged_hash(tag, *parts), "big") % self.curve.q

    def encode_scalar(self, scalar: int) -> bytes:
        if not 0 <= scalar < self.curve.q:
            raise ValueError("Scalar is out of range.")
        return scalar.to_bytes(SCALAR_SIZE, "big")

    def decode_scalar(self, data: bytes) -> int:
        """
        Raises:
        DecodingError: If the input is not 32 bytes or not reduced modulo q.
        """
        if len(data) != SCALAR_SIZE:
            raise DecodingError(f"Scalar must be exactly {SCALAR_SIZE} bytes long.")
        scalar = int.from_bytes(data, "big")
        if scalar >= self.curve.q:
            raise DecodingError("Scalar is not reduced modulo the group order.")
        return scalar

    def encode_point(self, point: Point) -> bytes:
        return point.sec_serialize()

    def decode_point(self, data: bytes) -> Point:
        return Point.sec_deserialize(data, self.curve)


def encode_index(index: int) -> bytes:
    return index.to_bytes(INDEX_SIZE, "big")


def decode_index(data: bytes) -> int:
    if len(data) != INDEX_SIZE:
        raise DecodingError(f"Index must be exactly {INDEX_SIZE} bytes long.")
    index = int.from_bytes(data, "big")
    if index == 0:
        raise DecodingError("Participant index must be non-zero.")
    return index


SECP256K1_SHA256: Ciphersuite = Ciphersuite(
    curve=SECP256K1, context=b"FROST-secp256k1-SHA256-v1"
)
