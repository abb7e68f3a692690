"""
Exception types raised by the threshold signature scheme.

The hierarchy mirrors the failure domains of the protocol:

- ConfigurationError: bad (t, n) parameters, rejected before any
  cryptographic work.
- ShareVerificationError: a dealt share does not match the public commitment;
  fatal to key generation.
- SessionProtocolError: a signing session received malformed or out-of-order
  input; fatal to that session only.
- PartialSignatureError: a participant produced an invalid partial signature;
  the offending index is carried so a new quorum can be chosen.
- NonceReuseError: an attempt to use a consumed nonce pair.
- DecodingError: a byte string does not encode a valid value.

Signature verification never raises for a bad signature; it returns False.
"""

from typing import Optional


class FrostError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(FrostError, ValueError):
    """Invalid threshold parameters."""


class ThresholdExceedsParticipants(ConfigurationError):
    def __init__(self, threshold: int, participants: int):
        super().__init__(
            f"Threshold {threshold} exceeds the number of participants {participants}."
        )
        self.threshold = threshold
        self.participants = participants


class DegenerateThreshold(ConfigurationError):
    def __init__(self, threshold: int):
        super().__init__(f"Threshold must be at least 1, got {threshold}.")
        self.threshold = threshold


class ShareVerificationError(FrostError):
    """A secret share is inconsistent with the dealer's commitment."""


class InvalidShare(ShareVerificationError):
    def __init__(self, index: int):
        super().__init__(
            f"Share for participant {index} does not match the commitment."
        )
        self.index = index


class SessionProtocolError(FrostError):
    """A signing session received input that violates the protocol."""


class WrongParticipantCount(SessionProtocolError):
    def __init__(self, expected: int, received: int):
        super().__init__(f"Expected exactly {expected} participants, got {received}.")
        self.expected = expected
        self.received = received


class DuplicateCommitment(SessionProtocolError):
    def __init__(self, index: int):
        super().__init__(f"Participant {index} appears more than once.")
        self.index = index


class UnknownParticipantIndex(SessionProtocolError):
    def __init__(self, index: int):
        super().__init__(f"Participant index {index} is not part of this session.")
        self.index = index


class DuplicatePartialSignature(SessionProtocolError):
    def __init__(self, index: int):
        super().__init__(f"Participant {index} already submitted a partial signature.")
        self.index = index


class SessionStateError(SessionProtocolError):
    """An operation was requested in a state that does not allow it."""


class PartialSignatureError(FrostError):
    """A partial signature failed verification."""


class InvalidPartialSignature(PartialSignatureError):
    def __init__(self, index: int):
        super().__init__(f"Partial signature from participant {index} is invalid.")
        self.index = index


class NonceReuseError(FrostError):
    """A single-use nonce was requested a second time."""


class StaleNonce(NonceReuseError):
    def __init__(self, index: Optional[int] = None):
        if index is None:
            message = "Nonce pair has already been consumed."
        else:
            message = f"Nonce pair for participant {index} has already been consumed."
        super().__init__(message)
        self.index = index


class DecodingError(FrostError, ValueError):
    """A byte string is not a valid encoding."""
