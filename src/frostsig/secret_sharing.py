"""
Shamir secret sharing with Feldman verifiable commitments.

A dealer hides a secret as the constant term of a random polynomial of degree
t - 1 and hands each participant the polynomial evaluated at its index. The
commitment to the polynomial coefficients lets every participant check its own
share without learning anything about the secret or the other shares.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple
from .ciphersuite import (
    Ciphersuite,
    SECP256K1_SHA256,
    INDEX_SIZE,
    POINT_SIZE,
    SCALAR_SIZE,
    decode_index,
    encode_index,
)
from .errors import DecodingError
from .point import Point

# Coefficients (a_0, ..., a_(t - 1)); a_0 is the secret.
Polynomial = Tuple[int, ...]


@dataclass(frozen=True)
class SecretShare:
    """A participant's private share (i, f(i)). The scalar is kept out of repr."""

    index: int
    value: int = field(repr=False)

    def to_bytes(self, ciphersuite: Ciphersuite = SECP256K1_SHA256) -> bytes:
        return encode_index(self.index) + ciphersuite.encode_scalar(self.value)

    @classmethod
    def from_bytes(
        cls, data: bytes, ciphersuite: Ciphersuite = SECP256K1_SHA256
    ) -> SecretShare:
        if len(data) != INDEX_SIZE + SCALAR_SIZE:
            raise DecodingError("Secret share must be exactly 36 bytes long.")
        return cls(
            decode_index(data[:INDEX_SIZE]),
            ciphersuite.decode_scalar(data[INDEX_SIZE:]),
        )

    def public(self, ciphersuite: Ciphersuite = SECP256K1_SHA256) -> VerificationShare:
        # Y_i = g^s_i
        return VerificationShare(self.index, self.value * ciphersuite.generator)


@dataclass(frozen=True)
class VerificationShare:
    """The public image Y_i = s_i * G of a participant's secret share."""

    index: int
    point: Point

    def to_bytes(self) -> bytes:
        return encode_index(self.index) + self.point.sec_serialize()

    @classmethod
    def from_bytes(
        cls, data: bytes, ciphersuite: Ciphersuite = SECP256K1_SHA256
    ) -> VerificationShare:
        if len(data) != INDEX_SIZE + POINT_SIZE:
            raise DecodingError("Verification share must be exactly 37 bytes long.")
        return cls(
            decode_index(data[:INDEX_SIZE]),
            ciphersuite.decode_point(data[INDEX_SIZE:]),
        )


@dataclass(frozen=True)
class VSSCommitment:
    """Feldman commitment ⟨𝜙_0, ..., 𝜙_(t - 1)⟩ with 𝜙_j = g^a_j."""

    coefficients: Tuple[Point, ...]

    def __post_init__(self):
        if not self.coefficients:
            raise ValueError("Commitment must have at least one coefficient.")

    @property
    def threshold(self) -> int:
        return len(self.coefficients)

    @property
    def group_public_key(self) -> Point:
        # Y = 𝜙_0
        return self.coefficients[0]

    def evaluate(self, index: int) -> Point:
        """
        Derive the public verification share of any participant.

        Parameters:
        index (int): The index of the participant.

        Returns:
        Point: ∑ 𝜙_k * i^k, 0 ≤ k ≤ t - 1.
        """
        q = self.coefficients[0].curve.q
        # Horner's method in the exponent
        result = Point(curve=self.coefficients[0].curve)
        for commitment in reversed(self.coefficients):
            result = (index % q) * result + commitment
        return result

    def to_bytes(self) -> bytes:
        return b"".join(point.sec_serialize() for point in self.coefficients)

    @classmethod
    def from_bytes(
        cls, data: bytes, ciphersuite: Ciphersuite = SECP256K1_SHA256
    ) -> VSSCommitment:
        if not data or len(data) % POINT_SIZE != 0:
            raise DecodingError(
                f"Commitment length must be a non-zero multiple of {POINT_SIZE}."
            )
        return cls(
            tuple(
                ciphersuite.decode_point(data[i : i + POINT_SIZE])
                for i in range(0, len(data), POINT_SIZE)
            )
        )


def generate_polynomial(
    threshold: int,
    secret: Optional[int] = None,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> Polynomial:
    """
    Generate a polynomial of degree threshold - 1 with uniformly random
    coefficients and the secret as constant term. A random secret is sampled
    when none is given.
    """
    if threshold < 1:
        raise ValueError("Threshold must be at least 1.")
    if secret is None:
        secret = ciphersuite.random_scalar()
    # (a_0, . . ., a_(t - 1)) ⭠ $ ℤ_q, a_0 = s
    return (secret % ciphersuite.order,) + tuple(
        ciphersuite.random_scalar() for _ in range(threshold - 1)
    )


def evaluate_polynomial(
    polynomial: Polynomial, x: int, ciphersuite: Ciphersuite = SECP256K1_SHA256
) -> int:
    """Evaluate the polynomial at x using Horner's method, reduced modulo q."""
    if not polynomial:
        raise ValueError("Polynomial coefficients must be initialized.")

    q = ciphersuite.order
    y = 0
    for coefficient in reversed(polynomial):
        y = (y * x + coefficient) % q
    return y


def evaluate_share(
    polynomial: Polynomial, index: int, ciphersuite: Ciphersuite = SECP256K1_SHA256
) -> SecretShare:
    """
    Compute the share (i, f(i)) for participant i.

    Raises:
    ValueError: If the index is zero, which would reveal the secret.
    """
    if index % ciphersuite.order == 0:
        raise ValueError("Share index must be non-zero.")
    return SecretShare(index, evaluate_polynomial(polynomial, index, ciphersuite))


def commit(
    polynomial: Polynomial, ciphersuite: Ciphersuite = SECP256K1_SHA256
) -> VSSCommitment:
    G = ciphersuite.generator
    return VSSCommitment(tuple(coefficient * G for coefficient in polynomial))


def verify_share(
    share: SecretShare,
    commitment: VSSCommitment,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> bool:
    """
    Verify that a share matches the value derived from the commitment.

    Returns:
    bool: True iff g^f(i) = ∏ 𝜙_k^(i^k), 0 ≤ k ≤ t - 1.
    """
    return share.value * ciphersuite.generator == commitment.evaluate(share.index)


def lagrange_coefficient(
    participant_indexes: Iterable[int],
    index: int,
    x: int = 0,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> int:
    """
    Calculate the Lagrange coefficient of `index` over the given set,
    evaluated at x.

    Raises:
    ValueError: If duplicate indices are found, or `index` is not in the set.
    """
    participant_indexes = tuple(participant_indexes)
    if len(participant_indexes) != len(set(participant_indexes)):
        raise ValueError("Participant indexes must be unique.")
    if index not in participant_indexes:
        raise ValueError(f"Index {index} is not among the participant indexes.")

    q = ciphersuite.order
    # λ_i(x) = ∏ (x - p_j)/(p_i - p_j), 1 ≤ j ≤ α, j ≠ i
    numerator = 1
    denominator = 1
    for other in participant_indexes:
        if other == index:
            continue
        numerator = numerator * (x - other)
        denominator = denominator * (index - other)
    return (numerator * pow(denominator, q - 2, q)) % q


def reconstruct_secret(
    shares: Iterable[SecretShare], ciphersuite: Ciphersuite = SECP256K1_SHA256
) -> int:
    """Interpolate the shares at x = 0."""
    shares = tuple(shares)
    indexes = tuple(share.index for share in shares)
    q = ciphersuite.order
    return (
        sum(
            share.value * lagrange_coefficient(indexes, share.index, 0, ciphersuite)
            for share in shares
        )
        % q
    )
