"""
Single-use signing nonces.

A NoncePair (d, e) is created for one participant immediately before round 1
of a signing session and published only through its commitment (D, E). The
secret scalars can be taken out exactly once, by `consume()`, after which
they are wiped and every further access raises StaleNonce. Copying and
pickling are refused so the secrets cannot be duplicated and replayed in a
second session.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import NoReturn, Optional, Tuple
from .ciphersuite import (
    Ciphersuite,
    SECP256K1_SHA256,
    INDEX_SIZE,
    POINT_SIZE,
    decode_index,
    encode_index,
)
from .errors import DecodingError, StaleNonce
from .point import Point


@dataclass(frozen=True)
class NonceCommitment:
    """The public half of a nonce pair: (i, D_i, E_i)."""

    index: int
    hiding: Point
    binding: Point

    def to_bytes(self) -> bytes:
        return (
            encode_index(self.index)
            + self.hiding.sec_serialize()
            + self.binding.sec_serialize()
        )

    @classmethod
    def from_bytes(
        cls, data: bytes, ciphersuite: Ciphersuite = SECP256K1_SHA256
    ) -> NonceCommitment:
        if len(data) != INDEX_SIZE + 2 * POINT_SIZE:
            raise DecodingError("Nonce commitment must be exactly 70 bytes long.")
        return cls(
            decode_index(data[:INDEX_SIZE]),
            ciphersuite.decode_point(data[INDEX_SIZE : INDEX_SIZE + POINT_SIZE]),
            ciphersuite.decode_point(data[INDEX_SIZE + POINT_SIZE :]),
        )


class NoncePair:
    """Secret nonces (d, e) for one participant in one session."""

    __slots__ = ("index", "commitment", "_nonces")

    def __init__(
        self, index: int, hiding: int, binding: int, commitment: NonceCommitment
    ):
        self.index = index
        self.commitment = commitment
        self._nonces: Optional[Tuple[int, int]] = (hiding, binding)

    @classmethod
    def generate(
        cls, index: int, ciphersuite: Ciphersuite = SECP256K1_SHA256
    ) -> NoncePair:
        """
        Sample a fresh nonce pair and its commitment for participant `index`.
        """
        G = ciphersuite.generator
        # (d_i, e_i) ⭠ $ ℤ*_q x ℤ*_q
        hiding = ciphersuite.random_scalar()
        binding = ciphersuite.random_scalar()
        # (D_i, E_i) = (g^d_i, g^e_i)
        commitment = NonceCommitment(index, hiding * G, binding * G)
        return cls(index, hiding, binding, commitment)

    @property
    def consumed(self) -> bool:
        return self._nonces is None

    def consume(self) -> Tuple[int, int]:
        """
        Hand out (d, e) and destroy them.

        Raises:
        StaleNonce: If the pair was already consumed or destroyed.
        """
        if self._nonces is None:
            raise StaleNonce(self.index)
        nonces = self._nonces
        self._nonces = None
        return nonces

    def destroy(self) -> None:
        """Wipe the secret nonces without using them."""
        self._nonces = None

    def _refuse(self, *args) -> NoReturn:
        raise TypeError("NoncePair cannot be copied or serialized.")

    __copy__ = _refuse
    __deepcopy__ = _refuse
    __reduce__ = _refuse
    __reduce_ex__ = _refuse
    __getstate__ = _refuse

    def __repr__(self) -> str:
        state = "consumed" if self.consumed else "fresh"
        return f"{self.__class__.__name__}(index={self.index}, {state})"
