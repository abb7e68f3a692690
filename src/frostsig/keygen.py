"""
Trusted-dealer key generation.

The dealer samples a secret scalar s, hides it in a polynomial of degree
t - 1, hands participant i the share f(i) and publishes a Feldman commitment
to the polynomial. Every participant checks its own share against the
commitment; a single failure aborts the whole generation and the dealer is
treated as malicious. The group public key is Y = s * G.

A dealer-less variant in which each participant contributes a sub-polynomial
and the shares are summed produces outputs of the same shape, so nothing
downstream of `KeyGenerationResult` depends on how the shares were made.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Optional, Sequence, Tuple
from .ciphersuite import Ciphersuite, SECP256K1_SHA256
from .errors import (
    DegenerateThreshold,
    InvalidShare,
    ThresholdExceedsParticipants,
    UnknownParticipantIndex,
)
from .point import Point
from .secret_sharing import (
    SecretShare,
    VSSCommitment,
    VerificationShare,
    commit,
    evaluate_share,
    generate_polynomial,
    verify_share,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublicKeyPackage:
    """Everything a coordinator or verifier needs to know about a key."""

    threshold: int
    group_public_key: Point
    verification_shares: Tuple[VerificationShare, ...]
    commitment: VSSCommitment

    @property
    def participant_indexes(self) -> Tuple[int, ...]:
        return tuple(share.index for share in self.verification_shares)

    def verification_share(self, index: int) -> Point:
        for share in self.verification_shares:
            if share.index == index:
                return share.point
        raise UnknownParticipantIndex(index)

    def verify_consistency(self) -> bool:
        """
        Check the threshold, the group key and every verification share
        against the commitment. Verification share indexes must be unique.
        """
        if self.threshold != self.commitment.threshold:
            return False
        if self.commitment.group_public_key != self.group_public_key:
            return False
        indexes = self.participant_indexes
        if len(set(indexes)) != len(indexes):
            return False
        return all(
            self.commitment.evaluate(share.index) == share.point
            for share in self.verification_shares
        )


@dataclass(frozen=True)
class KeyShare:
    """A single participant's view of the key: its secret share plus public data."""

    secret_share: SecretShare
    group_public_key: Point
    threshold: int
    ciphersuite: Ciphersuite = field(default=SECP256K1_SHA256, repr=False)

    @property
    def index(self) -> int:
        return self.secret_share.index

    @property
    def verification_share(self) -> Point:
        return self.secret_share.public(self.ciphersuite).point


@dataclass(frozen=True)
class KeyGenerationResult:
    threshold: int
    group_public_key: Point
    secret_shares: Tuple[SecretShare, ...]
    verification_shares: Tuple[VerificationShare, ...]
    commitment: VSSCommitment
    ciphersuite: Ciphersuite = field(default=SECP256K1_SHA256, repr=False)

    @property
    def participants(self) -> int:
        return len(self.secret_shares)

    def public_key_package(self) -> PublicKeyPackage:
        return PublicKeyPackage(
            threshold=self.threshold,
            group_public_key=self.group_public_key,
            verification_shares=self.verification_shares,
            commitment=self.commitment,
        )

    def key_share(self, index: int) -> KeyShare:
        for share in self.secret_shares:
            if share.index == index:
                return KeyShare(
                    share, self.group_public_key, self.threshold, self.ciphersuite
                )
        raise UnknownParticipantIndex(index)


def check_parameters(threshold: int, participants: int) -> None:
    """
    Reject threshold parameters before any cryptographic work is done.

    Raises:
    DegenerateThreshold: If t < 1.
    ThresholdExceedsParticipants: If t > n.
    """
    if not all(isinstance(arg, int) for arg in (threshold, participants)):
        raise TypeError("Threshold and participants must be integers.")
    if threshold < 1:
        raise DegenerateThreshold(threshold)
    if threshold > participants:
        raise ThresholdExceedsParticipants(threshold, participants)


def deal(
    threshold: int,
    participants: int,
    secret: Optional[int] = None,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> Tuple[Tuple[SecretShare, ...], VSSCommitment]:
    """
    Dealer side: split a (random unless given) secret into n shares and
    commit to the polynomial.
    """
    check_parameters(threshold, participants)
    if secret is not None and secret % ciphersuite.order == 0:
        raise ValueError("Secret must be a non-zero scalar.")

    polynomial = generate_polynomial(threshold, secret, ciphersuite)
    # (i, f(i)), 1 ≤ i ≤ n
    shares = tuple(
        evaluate_share(polynomial, index, ciphersuite)
        for index in range(1, participants + 1)
    )
    return shares, commit(polynomial, ciphersuite)


def finalize(
    threshold: int,
    shares: Sequence[SecretShare],
    commitment: VSSCommitment,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> KeyGenerationResult:
    """
    Participant side: each participant checks its share against the dealer's
    commitment. Any mismatch aborts key generation.

    Raises:
    InvalidShare: Carrying the index of the first share that failed.
    """
    check_parameters(threshold, len(shares))
    if commitment.threshold != threshold:
        raise ValueError(
            "The number of coefficient commitments must match the threshold."
        )

    for share in shares:
        if not verify_share(share, commitment, ciphersuite):
            logger.warning(
                "Share for participant %d failed verification; aborting key generation",
                share.index,
            )
            raise InvalidShare(share.index)

    verification_shares = tuple(share.public(ciphersuite) for share in shares)

    return KeyGenerationResult(
        threshold=threshold,
        group_public_key=commitment.group_public_key,
        secret_shares=tuple(shares),
        verification_shares=verification_shares,
        commitment=commitment,
        ciphersuite=ciphersuite,
    )


def generate(
    threshold: int,
    participants: int,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
    secret: Optional[int] = None,
) -> KeyGenerationResult:
    """
    Run trusted-dealer key generation for a t-of-n key.

    Parameters:
    threshold (int): Minimum number of participants needed to sign.
    participants (int): Total number of key holders.
    ciphersuite (Ciphersuite, optional): Group and hash parameters.
    secret (Optional[int]): Secret to share; sampled at random when omitted.

    Returns:
    KeyGenerationResult: Group public key, n secret shares, n verification
    shares and the dealer's commitment.

    Raises:
    ConfigurationError: If the threshold parameters are invalid.
    InvalidShare: If any participant's share fails verification.
    """
    check_parameters(threshold, participants)
    logger.debug("Dealing %d-of-%d key shares", threshold, participants)

    shares, commitment = deal(threshold, participants, secret, ciphersuite)
    result = finalize(threshold, shares, commitment, ciphersuite)

    logger.info(
        "Generated %d shares with threshold %d", participants, threshold
    )
    return result
