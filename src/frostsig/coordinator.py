"""
This module defines the SigningCoordinator, the party that drives one signing
session. It collects round-1 nonce commitments, publishes the signing
package, collects and checks round-2 partial signatures and aggregates them
into the final signature.

The coordinator only ever holds public values: commitments, verification
shares and partial signatures. It may be one of the signers or an untrusted
third party.

A session is an explicit state machine:

    COLLECTING_COMMITMENTS -> COMPUTING_CHALLENGE
        -> COLLECTING_PARTIAL_SIGNATURES -> AGGREGATED

Any protocol error moves the session to ABORTED. AGGREGATED and ABORTED are
terminal; any further request raises SessionStateError.
"""

from __future__ import annotations
import enum
import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple
from .ciphersuite import Ciphersuite, SECP256K1_SHA256
from .errors import (
    DuplicateCommitment,
    DuplicatePartialSignature,
    FrostError,
    InvalidPartialSignature,
    SessionStateError,
    UnknownParticipantIndex,
    WrongParticipantCount,
)
from .keygen import PublicKeyPackage
from .nonce import NonceCommitment
from .point import Point
from .signing import (
    PartialSignature,
    SigningPackage,
    ThresholdSignature,
    check_partial_signature,
    aggregate_partial_signatures,
    binding_factors,
    challenge_hash,
    group_commitment,
)

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    COLLECTING_COMMITMENTS = "collecting_commitments"
    COMPUTING_CHALLENGE = "computing_challenge"
    COLLECTING_PARTIAL_SIGNATURES = "collecting_partial_signatures"
    AGGREGATED = "aggregated"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.AGGREGATED, SessionState.ABORTED)


class SigningCoordinator:
    """Class representing the coordinator of one signing session."""

    def __init__(
        self,
        public_key_package: PublicKeyPackage,
        message: bytes,
        participant_indexes: Optional[Sequence[int]] = None,
        ciphersuite: Ciphersuite = SECP256K1_SHA256,
    ):
        """
        Open a session for signing `message` under the package's group key.

        Parameters:
        public_key_package (PublicKeyPackage): Group key and verification shares.
        message (bytes): The message being signed.
        participant_indexes (Optional[Sequence[int]]): The chosen quorum. When
            omitted, any t known participants may commit.
        ciphersuite (Ciphersuite, optional): Group and hash parameters.

        Raises:
        WrongParticipantCount: If the chosen quorum does not have exactly t members.
        DuplicateCommitment: If the chosen quorum repeats an index.
        UnknownParticipantIndex: If the quorum names an index outside the key.
        """
        if not isinstance(message, bytes):
            raise TypeError("Message must be bytes.")

        self.public_key_package = public_key_package
        self.message = message
        self.ciphersuite = ciphersuite
        self.threshold = public_key_package.threshold
        self.state = SessionState.COLLECTING_COMMITMENTS
        self.participant_indexes: Optional[Tuple[int, ...]] = None
        self.commitments: Dict[int, NonceCommitment] = {}
        self.partial_signatures: Dict[int, PartialSignature] = {}
        self.signing_package: Optional[SigningPackage] = None
        self.binding_factors: Optional[Dict[int, int]] = None
        self.group_commitment: Optional[Point] = None
        self.challenge: Optional[int] = None
        self.signature: Optional[ThresholdSignature] = None

        if participant_indexes is not None:
            self.participant_indexes = self._check_quorum(participant_indexes)

        logger.debug("Opened signing session for a %d-byte message", len(message))

    def _check_quorum(self, participant_indexes: Sequence[int]) -> Tuple[int, ...]:
        known = set(self.public_key_package.participant_indexes)
        seen = set()
        for index in participant_indexes:
            if index in seen:
                raise DuplicateCommitment(index)
            if index not in known:
                raise UnknownParticipantIndex(index)
            seen.add(index)
        if len(seen) != self.threshold:
            raise WrongParticipantCount(self.threshold, len(seen))
        return tuple(sorted(seen))

    def _require_state(self, *states: SessionState) -> None:
        if self.state not in states:
            raise SessionStateError(
                f"Operation not allowed in state {self.state.value}."
            )

    def _round_one_values(self) -> Tuple[SigningPackage, Dict[int, int], int, Point]:
        """The package, binding factors, c and R fixed when round 1 closed."""
        self._require_state(SessionState.COLLECTING_PARTIAL_SIGNATURES)
        if (
            self.signing_package is None
            or self.binding_factors is None
            or self.challenge is None
            or self.group_commitment is None
        ):
            raise SessionStateError("Round 1 has not produced a signing package.")
        return (
            self.signing_package,
            self.binding_factors,
            self.challenge,
            self.group_commitment,
        )

    def abort(self, reason: str = "aborted by caller") -> None:
        """Move the session to ABORTED unless it already finished."""
        if self.state.is_terminal:
            return
        logger.warning("Signing session aborted: %s", reason)
        self.state = SessionState.ABORTED

    def _fail(self, error: FrostError) -> FrostError:
        self.abort(str(error))
        return error

    def add_commitment(self, commitment: NonceCommitment) -> None:
        """
        Round 1: record a participant's (i, D_i, E_i).

        Raises:
        UnknownParticipantIndex: If i is outside the key or the chosen quorum.
        DuplicateCommitment: If i already committed.
        WrongParticipantCount: If more than t participants commit.
        """
        self._require_state(SessionState.COLLECTING_COMMITMENTS)

        index = commitment.index
        allowed = (
            self.participant_indexes
            if self.participant_indexes is not None
            else self.public_key_package.participant_indexes
        )
        if index not in allowed:
            raise self._fail(UnknownParticipantIndex(index))
        if index in self.commitments:
            raise self._fail(DuplicateCommitment(index))
        if len(self.commitments) >= self.threshold:
            raise self._fail(
                WrongParticipantCount(self.threshold, len(self.commitments) + 1)
            )

        self.commitments[index] = commitment
        logger.debug("Received commitment from participant %d", index)

    def create_signing_package(self) -> SigningPackage:
        """
        Close round 1 and compute the binding factors, R and c.

        Returns:
        SigningPackage: The message and the t commitments, to be sent to
        every signer. Repeated calls return the same package.

        Raises:
        WrongParticipantCount: If other than t commitments were collected.
        """
        if (
            self.state is SessionState.COLLECTING_PARTIAL_SIGNATURES
            and self.signing_package is not None
        ):
            return self.signing_package
        self._require_state(SessionState.COLLECTING_COMMITMENTS)

        if len(self.commitments) != self.threshold:
            raise self._fail(
                WrongParticipantCount(self.threshold, len(self.commitments))
            )

        self.state = SessionState.COMPUTING_CHALLENGE
        try:
            package = SigningPackage(self.message, tuple(self.commitments.values()))
            factors = binding_factors(package, self.ciphersuite)
            commitment = group_commitment(package, factors, self.ciphersuite)
        except (FrostError, ValueError) as e:
            self.abort(str(e))
            raise
        # c = H_2(R, Y, m)
        self.challenge = challenge_hash(
            commitment,
            self.public_key_package.group_public_key,
            self.message,
            self.ciphersuite,
        )
        self.signing_package = package
        self.binding_factors = factors
        self.group_commitment = commitment
        self.state = SessionState.COLLECTING_PARTIAL_SIGNATURES

        logger.info(
            "Round 1 complete for participants %s", package.participant_indexes
        )
        return package

    def verify_partial_signature(self, partial_signature: PartialSignature) -> bool:
        """Check a partial signature against the signer's verification share."""
        package, factors, challenge, _ = self._round_one_values()

        return check_partial_signature(
            partial_signature,
            package,
            factors,
            challenge,
            self.public_key_package.verification_share(partial_signature.index),
            self.ciphersuite,
        )

    def add_partial_signature(
        self, partial_signature: PartialSignature, verify: bool = True
    ) -> None:
        """
        Round 2: record a participant's z_i, checking it first unless told not to.

        Raises:
        UnknownParticipantIndex: If i did not commit in round 1.
        DuplicatePartialSignature: If i already sent a partial signature.
        InvalidPartialSignature: If z_i fails verification; the session aborts.
        """
        package = self._round_one_values()[0]

        index = partial_signature.index
        if index not in package.participant_indexes:
            raise self._fail(UnknownParticipantIndex(index))
        if index in self.partial_signatures:
            raise self._fail(DuplicatePartialSignature(index))
        if verify and not self.verify_partial_signature(partial_signature):
            raise self._fail(InvalidPartialSignature(index))

        self.partial_signatures[index] = partial_signature
        logger.debug("Accepted partial signature from participant %d", index)

    def aggregate(
        self,
        partial_signatures: Optional[Iterable[PartialSignature]] = None,
        verify: bool = True,
    ) -> ThresholdSignature:
        """
        Combine the t partial signatures into σ = (R, z).

        Parameters:
        partial_signatures (Optional[Iterable[PartialSignature]]): Signatures
            not yet added with `add_partial_signature`.
        verify (bool): Check each partial signature before accepting it.

        Raises:
        SessionStateError: If round 1 has not been closed or the session is over.
        WrongParticipantCount: If other than t partial signatures arrived.
        InvalidPartialSignature: Identifying the first signer whose share is invalid.
        """
        commitment = self._round_one_values()[3]

        for partial_signature in partial_signatures or ():
            self.add_partial_signature(partial_signature, verify)

        if len(self.partial_signatures) != self.threshold:
            raise self._fail(
                WrongParticipantCount(self.threshold, len(self.partial_signatures))
            )

        signature = aggregate_partial_signatures(
            commitment,
            self.partial_signatures.values(),
            self.ciphersuite,
        )
        self.signature = signature
        self.state = SessionState.AGGREGATED
        logger.info("Aggregated threshold signature")
        return signature
