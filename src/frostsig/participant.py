"""
This module defines the Participant class, the signer-side half of the
two-round signing protocol. A participant holds its KeyShare for the lifetime
of the key and at most one NoncePair per open session.

Round 1: `commit(session_id)` samples a fresh nonce pair, keeps the secret
half and returns the public NonceCommitment for the coordinator.

Round 2: `sign(session_id, signing_package)` removes the nonce pair from the
participant's state, consumes it and returns the PartialSignature. A second
call for the same session finds no nonce and raises StaleNonce.
"""

from __future__ import annotations
import logging
from typing import Dict, Hashable, Set
from .ciphersuite import Ciphersuite
from .errors import StaleNonce
from .keygen import KeyShare
from .nonce import NonceCommitment, NoncePair
from .signing import PartialSignature, SigningPackage, compute_partial_signature

logger = logging.getLogger(__name__)


class Participant:
    """
    Class representing a signer holding one share of the group key.

    Session ids that were signed or discarded are remembered so they cannot be
    committed to again. The record grows with every session; a caller that
    retires session ids for good can drop them with `forget`.
    """

    def __init__(self, key_share: KeyShare):
        self.key_share = key_share
        self._nonces: Dict[Hashable, NoncePair] = {}
        self._retired: Set[Hashable] = set()

    @property
    def index(self) -> int:
        return self.key_share.index

    @property
    def ciphersuite(self) -> Ciphersuite:
        return self.key_share.ciphersuite

    def commit(self, session_id: Hashable) -> NonceCommitment:
        """
        Generate the nonce pair for a session and return its commitment.

        Raises:
        StaleNonce: If this session already has (or had) a nonce pair.
        """
        if session_id in self._nonces or session_id in self._retired:
            raise StaleNonce(self.index)

        nonce_pair = NoncePair.generate(self.index, self.ciphersuite)
        self._nonces[session_id] = nonce_pair
        logger.debug("Participant %d committed to nonces", self.index)
        return nonce_pair.commitment

    def has_pending_nonce(self, session_id: Hashable) -> bool:
        return session_id in self._nonces

    def sign(
        self, session_id: Hashable, signing_package: SigningPackage
    ) -> PartialSignature:
        """
        Produce this participant's partial signature for a session.

        The nonce pair leaves the participant's state before any check runs,
        so it is destroyed whether signing succeeds or fails.

        Raises:
        StaleNonce: If no unconsumed nonce pair exists for the session.
        SessionProtocolError: If the package does not match this participant's
        round-1 commitment.
        """
        nonce_pair = self._nonces.pop(session_id, None)
        if nonce_pair is None:
            raise StaleNonce(self.index)
        self._retired.add(session_id)
        try:
            return compute_partial_signature(
                self.key_share, nonce_pair, signing_package, self.ciphersuite
            )
        finally:
            nonce_pair.destroy()

    def discard(self, session_id: Hashable) -> None:
        """Destroy the nonce pair of an aborted session."""
        self._retired.add(session_id)
        nonce_pair = self._nonces.pop(session_id, None)
        if nonce_pair is not None:
            nonce_pair.destroy()

    def forget(self, session_id: Hashable) -> None:
        """
        Drop a finished session id from the retired set. The id may then be
        committed to again.

        Raises:
        StaleNonce: If the session still holds an unconsumed nonce pair.
        """
        if session_id in self._nonces:
            raise StaleNonce(self.index)
        self._retired.discard(session_id)
