"""
Copyright (c) 2021-2024 Jesse Posner

Distributed under the MIT software license, see the accompanying file LICENSE
or http://www.opensource.org/licenses/mit-license.php.

This code is a research implementation. It has not been audited and does not
protect secrets against side channels. DO NOT USE IT TO PROTECT REAL FUNDS OR
KEYS IN PRODUCTION!

This package implements Flexible Round-Optimized Schnorr Threshold signatures
(FROST) over secp256k1: any t of n key holders jointly produce a Schnorr
signature under a single group public key, in two rounds, without the private
key ever being assembled in one place.

Modules:
- curve, point: the secp256k1 group and its point arithmetic.
- ciphersuite: immutable group and hash parameters passed to every operation.
- secret_sharing: Shamir shares with Feldman verifiable commitments.
- keygen: trusted-dealer key generation.
- nonce: single-use signing nonces and their public commitments.
- signing: binding factors, challenge, partial signatures and their checks.
- participant: the signer-side state of the two-round protocol.
- coordinator: the signing session state machine and aggregation.
- verify: stateless signature verification.
- protocol: host-level operations for a process playing every participant.
"""

from .curve import Curve, SECP256K1
from .point import Point
from .ciphersuite import Ciphersuite, SECP256K1_SHA256
from .errors import (
    ConfigurationError,
    DecodingError,
    DegenerateThreshold,
    DuplicateCommitment,
    DuplicatePartialSignature,
    FrostError,
    InvalidPartialSignature,
    InvalidShare,
    NonceReuseError,
    PartialSignatureError,
    SessionProtocolError,
    SessionStateError,
    ShareVerificationError,
    StaleNonce,
    ThresholdExceedsParticipants,
    UnknownParticipantIndex,
    WrongParticipantCount,
)
from .secret_sharing import SecretShare, VerificationShare, VSSCommitment
from .keygen import KeyGenerationResult, KeyShare, PublicKeyPackage, generate
from .nonce import NonceCommitment, NoncePair
from .signing import PartialSignature, SigningPackage, ThresholdSignature
from .participant import Participant
from .coordinator import SessionState, SigningCoordinator
from .verify import verify, verify_encoded
from .protocol import (
    SigningSession,
    aggregate,
    begin_signing_session,
    commit_round,
    sign_round,
    threshold_sign,
)
