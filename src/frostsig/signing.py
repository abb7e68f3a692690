"""
Signing primitives shared by participants, the coordinator and the verifier.

This module holds the values exchanged during a signing session (the signing
package, partial signatures and the final threshold signature) and the pure
functions of the protocol: per-participant binding factors, the group
commitment R, the challenge c, the partial signature z_i and its check.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple
from .ciphersuite import (
    Ciphersuite,
    SECP256K1_SHA256,
    INDEX_SIZE,
    POINT_SIZE,
    SCALAR_SIZE,
    decode_index,
    encode_index,
)
from .errors import (
    DecodingError,
    DuplicateCommitment,
    SessionProtocolError,
    UnknownParticipantIndex,
)
from .keygen import KeyShare
from .nonce import NonceCommitment, NoncePair
from .point import Point
from .secret_sharing import lagrange_coefficient

MESSAGE_LENGTH_SIZE = 8
COMMITMENT_SIZE = INDEX_SIZE + 2 * POINT_SIZE


@dataclass(frozen=True)
class SigningPackage:
    """The message plus the commitments of exactly the signers of a session."""

    message: bytes
    commitments: Tuple[NonceCommitment, ...]

    def __post_init__(self):
        indexes = [commitment.index for commitment in self.commitments]
        seen = set()
        for index in indexes:
            if index in seen:
                raise DuplicateCommitment(index)
            seen.add(index)
        # B is ordered by participant index so every party hashes the same bytes
        object.__setattr__(
            self,
            "commitments",
            tuple(sorted(self.commitments, key=lambda commitment: commitment.index)),
        )

    @property
    def participant_indexes(self) -> Tuple[int, ...]:
        return tuple(commitment.index for commitment in self.commitments)

    def commitment_for(self, index: int) -> NonceCommitment:
        for commitment in self.commitments:
            if commitment.index == index:
                return commitment
        raise UnknownParticipantIndex(index)

    def to_bytes(self) -> bytes:
        return (
            len(self.message).to_bytes(MESSAGE_LENGTH_SIZE, "big")
            + self.message
            + len(self.commitments).to_bytes(INDEX_SIZE, "big")
            + b"".join(commitment.to_bytes() for commitment in self.commitments)
        )

    @classmethod
    def from_bytes(
        cls, data: bytes, ciphersuite: Ciphersuite = SECP256K1_SHA256
    ) -> SigningPackage:
        if len(data) < MESSAGE_LENGTH_SIZE + INDEX_SIZE:
            raise DecodingError("Signing package is truncated.")
        message_length = int.from_bytes(data[:MESSAGE_LENGTH_SIZE], "big")
        offset = MESSAGE_LENGTH_SIZE + message_length
        message = data[MESSAGE_LENGTH_SIZE:offset]
        count = int.from_bytes(data[offset : offset + INDEX_SIZE], "big")
        offset += INDEX_SIZE
        if len(message) != message_length or len(data) != offset + count * COMMITMENT_SIZE:
            raise DecodingError("Signing package length does not match its contents.")
        commitments = tuple(
            NonceCommitment.from_bytes(
                data[offset + i * COMMITMENT_SIZE : offset + (i + 1) * COMMITMENT_SIZE],
                ciphersuite,
            )
            for i in range(count)
        )
        return cls(message, commitments)


@dataclass(frozen=True)
class PartialSignature:
    """A participant's signature share (i, z_i)."""

    index: int
    value: int

    def to_bytes(self, ciphersuite: Ciphersuite = SECP256K1_SHA256) -> bytes:
        return encode_index(self.index) + ciphersuite.encode_scalar(self.value)

    @classmethod
    def from_bytes(
        cls, data: bytes, ciphersuite: Ciphersuite = SECP256K1_SHA256
    ) -> PartialSignature:
        if len(data) != INDEX_SIZE + SCALAR_SIZE:
            raise DecodingError("Partial signature must be exactly 36 bytes long.")
        return cls(
            decode_index(data[:INDEX_SIZE]),
            ciphersuite.decode_scalar(data[INDEX_SIZE:]),
        )


@dataclass(frozen=True)
class ThresholdSignature:
    """σ = (R, z)."""

    group_commitment: Point
    z: int

    def to_bytes(self, ciphersuite: Ciphersuite = SECP256K1_SHA256) -> bytes:
        return self.group_commitment.sec_serialize() + ciphersuite.encode_scalar(
            self.z
        )

    @classmethod
    def from_bytes(
        cls, data: bytes, ciphersuite: Ciphersuite = SECP256K1_SHA256
    ) -> ThresholdSignature:
        if len(data) != POINT_SIZE + SCALAR_SIZE:
            raise DecodingError(
                f"Signature must be exactly {POINT_SIZE + SCALAR_SIZE} bytes long."
            )
        return cls(
            ciphersuite.decode_point(data[:POINT_SIZE]),
            ciphersuite.decode_scalar(data[POINT_SIZE:]),
        )

    def hex(self, ciphersuite: Ciphersuite = SECP256K1_SHA256) -> str:
        return self.to_bytes(ciphersuite).hex()


def binding_value(
    index: int,
    signing_package: SigningPackage,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> int:
    """
    Compute the binding factor of one participant.

    Each signer gets a distinct factor tied to the whole package, which is
    what prevents the Drijvers et al. forgery against naive two-round
    Schnorr threshold signing.
    """
    if index < 1:
        raise ValueError("Participant index must start from 1.")

    # p_l = H_1(l, m, B), l ∈ S
    return ciphersuite.hash_to_scalar(
        "rho", encode_index(index), signing_package.to_bytes()
    )


def binding_factors(
    signing_package: SigningPackage, ciphersuite: Ciphersuite = SECP256K1_SHA256
) -> Dict[int, int]:
    return {
        index: binding_value(index, signing_package, ciphersuite)
        for index in signing_package.participant_indexes
    }


def group_commitment(
    signing_package: SigningPackage,
    factors: Dict[int, int],
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> Point:
    """
    Calculate the group commitment R = ∑ D_l + p_l * E_l, l ∈ S.

    Raises:
    ValueError: If R is the point at infinity.
    """
    commitment = ciphersuite.identity()
    for nonce_commitment in signing_package.commitments:
        commitment += nonce_commitment.hiding + (
            factors[nonce_commitment.index] * nonce_commitment.binding
        )

    if commitment.is_zero():
        raise ValueError("Group commitment is the point at infinity.")
    return commitment


def challenge_hash(
    nonce_commitment: Point,
    public_key: Point,
    message: bytes,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> int:
    # c = H_2(R, Y, m)
    return ciphersuite.hash_to_scalar(
        "challenge",
        nonce_commitment.sec_serialize(),
        public_key.sec_serialize(),
        message,
    )


def compute_partial_signature(
    key_share: KeyShare,
    nonce_pair: NoncePair,
    signing_package: SigningPackage,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> PartialSignature:
    """
    Generate a signature share for this participant, consuming its nonces.

    The participant derives every protocol value from the package itself, so
    it does not need to trust the coordinator's arithmetic.

    Raises:
    UnknownParticipantIndex: If the participant is not in the package.
    SessionProtocolError: If the package carries a commitment other than the
    one this nonce pair produced.
    StaleNonce: If the nonce pair was already consumed.
    """
    index = key_share.index
    if nonce_pair.index != index:
        raise SessionProtocolError(
            f"Nonce pair belongs to participant {nonce_pair.index}, not {index}."
        )
    if signing_package.commitment_for(index) != nonce_pair.commitment:
        raise SessionProtocolError(
            f"Signing package carries a different commitment for participant {index}."
        )

    # d_i, e_i
    hiding_nonce, binding_nonce = nonce_pair.consume()

    factors = binding_factors(signing_package, ciphersuite)
    # R
    commitment = group_commitment(signing_package, factors, ciphersuite)
    # c = H_2(R, Y, m)
    challenge = challenge_hash(
        commitment, key_share.group_public_key, signing_package.message, ciphersuite
    )
    # λ_i
    coefficient = lagrange_coefficient(
        signing_package.participant_indexes, index, 0, ciphersuite
    )

    # z_i = d_i + (e_i * p_i) + λ_i * s_i * c
    z = (
        hiding_nonce
        + binding_nonce * factors[index]
        + coefficient * key_share.secret_share.value * challenge
    ) % ciphersuite.order
    return PartialSignature(index, z)


def verify_partial_signature(
    partial_signature: PartialSignature,
    signing_package: SigningPackage,
    verification_share: Point,
    group_public_key: Point,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> bool:
    """
    Check g^z_i ≟ D_i + p_i * E_i + λ_i * c * Y_i.
    """
    factors = binding_factors(signing_package, ciphersuite)
    commitment = group_commitment(signing_package, factors, ciphersuite)
    challenge = challenge_hash(
        commitment, group_public_key, signing_package.message, ciphersuite
    )
    return check_partial_signature(
        partial_signature,
        signing_package,
        factors,
        challenge,
        verification_share,
        ciphersuite,
    )


def check_partial_signature(
    partial_signature: PartialSignature,
    signing_package: SigningPackage,
    factors: Dict[int, int],
    challenge: int,
    verification_share: Point,
    ciphersuite: Ciphersuite,
) -> bool:
    index = partial_signature.index
    nonce_commitment = signing_package.commitment_for(index)
    coefficient = lagrange_coefficient(
        signing_package.participant_indexes, index, 0, ciphersuite
    )
    expected = (
        nonce_commitment.hiding
        + factors[index] * nonce_commitment.binding
        + (coefficient * challenge) * verification_share
    )
    return partial_signature.value * ciphersuite.generator == expected


def aggregate_partial_signatures(
    commitment: Point,
    partial_signatures: Iterable[PartialSignature],
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> ThresholdSignature:
    # z = ∑ z_i
    z = sum(partial.value for partial in partial_signatures) % ciphersuite.order
    return ThresholdSignature(commitment, z)
