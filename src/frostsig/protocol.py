"""
Host-facing operations for a process that plays every participant itself,
such as a command-line tool or a test harness.

The functions here wire KeyGeneration, NonceCommitment, the SigningCoordinator
and the Verifier together:

    result = generate(3, 5)
    with begin_signing_session(result.public_key_package(), (1, 3, 5), b"hi") as session:
        commit_round(session)
        partials = [sign_round(session, share.index, share) for share in chosen]
        signature = aggregate(session, partials)
    verify(b"hi", result.group_public_key, signature)

A distributed deployment uses Participant and SigningCoordinator directly and
moves the same values between machines.
"""

from __future__ import annotations
import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union
from .ciphersuite import Ciphersuite, SECP256K1_SHA256
from .coordinator import SessionState, SigningCoordinator
from .errors import SessionStateError, StaleNonce, UnknownParticipantIndex
from .keygen import KeyShare, PublicKeyPackage, generate
from .nonce import NoncePair
from .point import Point
from .secret_sharing import SecretShare
from .signing import (
    PartialSignature,
    SigningPackage,
    ThresholdSignature,
    compute_partial_signature,
)
from .verify import verify

logger = logging.getLogger(__name__)

__all__ = [
    "SigningSession",
    "aggregate",
    "begin_signing_session",
    "commit_round",
    "generate",
    "sign_round",
    "threshold_sign",
    "verify",
]


class SigningSession:
    """
    Handle for one signing session: the coordinator plus the secret nonces of
    the locally simulated signers. Closing the handle, or leaving its `with`
    block, destroys every nonce that was not consumed.
    """

    def __init__(self, coordinator: SigningCoordinator):
        self.coordinator = coordinator
        self._nonces: Dict[int, NoncePair] = {}
        self._committed = False

    @property
    def ciphersuite(self) -> Ciphersuite:
        return self.coordinator.ciphersuite

    @property
    def message(self) -> bytes:
        return self.coordinator.message

    @property
    def participant_indexes(self) -> Tuple[int, ...]:
        indexes = self.coordinator.participant_indexes
        if indexes is None:
            raise SessionStateError("Session was opened without a quorum.")
        return indexes

    @property
    def state(self) -> SessionState:
        return self.coordinator.state

    @property
    def signing_package(self) -> Optional[SigningPackage]:
        return self.coordinator.signing_package

    def close(self) -> None:
        for nonce_pair in self._nonces.values():
            nonce_pair.destroy()
        self._nonces.clear()
        self.coordinator.abort("session closed before aggregation")

    def __enter__(self) -> SigningSession:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def begin_signing_session(
    public_key_package: PublicKeyPackage,
    participant_indexes: Sequence[int],
    message: Union[bytes, str],
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> SigningSession:
    """
    Open a session for exactly t participants.

    Raises:
    WrongParticipantCount, DuplicateCommitment, UnknownParticipantIndex: If
    the quorum is malformed.
    """
    if isinstance(message, str):
        message = message.encode()
    coordinator = SigningCoordinator(
        public_key_package, message, participant_indexes, ciphersuite
    )
    return SigningSession(coordinator)


def commit_round(session: SigningSession) -> Dict[int, Tuple[Point, Point]]:
    """
    Round 1: every participant of the session samples a nonce pair; the
    commitments are collected and the signing package is fixed.

    Returns:
    Dict[int, Tuple[Point, Point]]: (D_i, E_i) for each participant index.

    Raises:
    SessionStateError: If round 1 already ran or the session is closed.
    """
    if session._committed:
        raise SessionStateError("Commitment round already ran for this session.")
    if session.state is not SessionState.COLLECTING_COMMITMENTS:
        raise SessionStateError(
            f"Cannot commit in state {session.state.value}."
        )
    session._committed = True

    for index in session.participant_indexes:
        nonce_pair = NoncePair.generate(index, session.ciphersuite)
        session._nonces[index] = nonce_pair
        session.coordinator.add_commitment(nonce_pair.commitment)

    package = session.coordinator.create_signing_package()
    return {
        commitment.index: (commitment.hiding, commitment.binding)
        for commitment in package.commitments
    }


def sign_round(
    session: SigningSession, index: int, secret_share: SecretShare
) -> PartialSignature:
    """
    Round 2 for one participant: compute z_i and destroy its nonce pair.

    Raises:
    SessionStateError: If round 1 has not completed.
    UnknownParticipantIndex: If the index is not part of the session.
    StaleNonce: If this participant already signed in this session.
    """
    if session.state is not SessionState.COLLECTING_PARTIAL_SIGNATURES:
        raise SessionStateError(
            f"Cannot sign in state {session.state.value}."
        )
    if index not in session.participant_indexes:
        raise UnknownParticipantIndex(index)
    if secret_share.index != index:
        raise ValueError(
            f"Secret share belongs to participant {secret_share.index}, not {index}."
        )

    nonce_pair = session._nonces.pop(index, None)
    if nonce_pair is None:
        raise StaleNonce(index)

    coordinator = session.coordinator
    package = coordinator.signing_package
    if package is None:
        nonce_pair.destroy()
        raise SessionStateError("Round 1 has not produced a signing package.")
    key_share = KeyShare(
        secret_share,
        coordinator.public_key_package.group_public_key,
        coordinator.threshold,
        session.ciphersuite,
    )
    try:
        return compute_partial_signature(
            key_share, nonce_pair, package, session.ciphersuite
        )
    finally:
        nonce_pair.destroy()


def aggregate(
    session: SigningSession,
    partial_signatures: Iterable[PartialSignature],
    verify_shares: bool = True,
) -> ThresholdSignature:
    """
    Aggregate the t partial signatures into the threshold signature.

    Raises:
    InvalidPartialSignature: Identifying the participant whose share failed.
    WrongParticipantCount: If other than t partial signatures are given.
    """
    try:
        return session.coordinator.aggregate(partial_signatures, verify_shares)
    finally:
        session.close()


def threshold_sign(
    public_key_package: PublicKeyPackage,
    secret_shares: Iterable[SecretShare],
    message: Union[bytes, str],
    participant_indexes: Optional[Sequence[int]] = None,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> ThresholdSignature:
    """
    Run a complete signing session with locally held shares. The first t
    shares are used unless a quorum is named.
    """
    shares = {share.index: share for share in secret_shares}
    if participant_indexes is None:
        participant_indexes = sorted(shares)[: public_key_package.threshold]
    for index in participant_indexes:
        if index not in shares:
            raise UnknownParticipantIndex(index)

    logger.info("Signing with participants %s", tuple(participant_indexes))
    with begin_signing_session(
        public_key_package, participant_indexes, message, ciphersuite
    ) as session:
        commit_round(session)
        partial_signatures = [
            sign_round(session, index, shares[index])
            for index in session.participant_indexes
        ]
        return aggregate(session, partial_signatures)
