"""
Stateless verification of threshold signatures.

A threshold signature is an ordinary Schnorr signature under the group public
key, so verification needs neither the shares nor the session that produced
it. An invalid signature is a normal outcome and yields False.
"""

import logging
from typing import Union
from .ciphersuite import Ciphersuite, SECP256K1_SHA256
from .errors import DecodingError
from .point import Point
from .signing import ThresholdSignature, challenge_hash

logger = logging.getLogger(__name__)


def verify(
    message: Union[bytes, str],
    group_public_key: Point,
    signature: ThresholdSignature,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> bool:
    """
    Verify σ = (R, z) on `message` under the group public key Y.

    Returns:
    bool: True iff g^z = R + c * Y with c = H_2(R, Y, m). A str message is
    signed as its UTF-8 encoding.
    """
    if isinstance(message, str):
        message = message.encode()
    if not isinstance(message, (bytes, bytearray)):
        logger.debug("Rejecting message of type %s", type(message).__name__)
        return False
    R = signature.group_commitment
    if R.is_zero() or group_public_key.is_zero():
        return False
    if not 0 <= signature.z < ciphersuite.order:
        return False

    # c = H_2(R, Y, m)
    challenge = challenge_hash(R, group_public_key, message, ciphersuite)
    # g^z ≟ R * Y^c
    return signature.z * ciphersuite.generator == R + challenge * group_public_key


def verify_encoded(
    message: Union[bytes, str],
    group_public_key: bytes,
    signature: bytes,
    ciphersuite: Ciphersuite = SECP256K1_SHA256,
) -> bool:
    """
    Verify a signature given as wire encodings. Inputs that fail to decode
    verify as False.
    """
    try:
        public_key = ciphersuite.decode_point(group_public_key)
        decoded = ThresholdSignature.from_bytes(signature, ciphersuite)
    except DecodingError as e:
        logger.debug("Rejecting undecodable signature input: %s", e)
        return False
    return verify(message, public_key, decoded, ciphersuite)
