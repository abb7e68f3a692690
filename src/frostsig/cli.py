"""
Command-line front end: generate a t-of-n key, sign a message with a quorum of
locally stored shares, and verify a signature.

Keys and signatures are kept as JSON with hex-encoded values:

    frostsig generate -t 3 -n 5
    frostsig sign --message "hi, this is a test" --signers 1,3,5
    frostsig verify --message "hi, this is a test"
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Tuple
from .errors import FrostError
from .keygen import KeyGenerationResult, PublicKeyPackage, generate
from .point import Point
from .protocol import threshold_sign
from .secret_sharing import SecretShare, VSSCommitment, VerificationShare
from .verify import verify_encoded

logger = logging.getLogger(__name__)

DEFAULT_KEY_FILE = "./results/frost_keys.json"
DEFAULT_SIGNATURE_FILE = "./results/signature.json"


def dump_keys(result: KeyGenerationResult) -> Dict[str, Any]:
    return {
        "threshold": result.threshold,
        "participants": result.participants,
        "group_key": result.group_public_key.sec_serialize().hex(),
        "commitment": [point.sec_serialize().hex() for point in result.commitment.coefficients],
        "verification_shares": [
            [share.point.sec_serialize().hex(), share.index]
            for share in result.verification_shares
        ],
        "private_shares": [
            [share.value.to_bytes(32, "big").hex(), share.index]
            for share in result.secret_shares
        ],
    }


def load_keys(data: Dict[str, Any]) -> Tuple[PublicKeyPackage, List[SecretShare]]:
    """
    Rebuild the public key package and secret shares from a key file.

    Raises:
    ValueError: If the file is malformed or inconsistent with its commitment.
    """
    try:
        commitment = VSSCommitment(
            tuple(Point.sec_deserialize(bytes.fromhex(p)) for p in data["commitment"])
        )
        package = PublicKeyPackage(
            threshold=int(data["threshold"]),
            group_public_key=Point.sec_deserialize(bytes.fromhex(data["group_key"])),
            verification_shares=tuple(
                VerificationShare(int(index), Point.sec_deserialize(bytes.fromhex(p)))
                for p, index in data["verification_shares"]
            ),
            commitment=commitment,
        )
        shares = [
            SecretShare(int(index), int.from_bytes(bytes.fromhex(value), "big"))
            for value, index in data["private_shares"]
        ]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed key file: {e}") from e

    if not package.verify_consistency():
        raise ValueError("Key file is inconsistent with its commitment.")
    return package, shares


def _write_json(path: str, payload: Any) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)


def _read_json(path: str) -> Any:
    with open(path) as f:
        return json.load(f)


def _parse_signers(value: Optional[str]) -> Optional[List[int]]:
    if value is None:
        return None
    try:
        return [int(index) for index in value.split(",") if index.strip()]
    except ValueError as e:
        raise ValueError(f"Invalid signer list: {value}") from e


def generate_command(args) -> int:
    result = generate(args.threshold, args.participants)
    _write_json(args.output, dump_keys(result))
    logger.info(
        "Generated %d shares with threshold %d. Keys saved to %s",
        args.participants,
        args.threshold,
        args.output,
    )
    return 0


def sign_command(args) -> int:
    package, shares = load_keys(_read_json(args.key_file))
    signature = threshold_sign(
        package, shares, args.message.encode(), _parse_signers(args.signers)
    )
    _write_json(args.signature_file, signature.hex())
    logger.info("Threshold signature saved to: %s", args.signature_file)
    return 0


def verify_command(args) -> int:
    data = _read_json(args.key_file)
    signature_hex = _read_json(args.signature_file)
    try:
        group_key = bytes.fromhex(data["group_key"])
        signature = bytes.fromhex(signature_hex)
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed input: {e}") from e

    if verify_encoded(args.message.encode(), group_key, signature):
        print("Signature is valid!")
        return 0
    print("Signature verification failed", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frostsig", description="FROST threshold Schnorr signatures"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log protocol steps.")
    subparsers = parser.add_subparsers()

    parser_generate = subparsers.add_parser(
        "generate", help="Generate a group public key and secret shares."
    )
    parser_generate.add_argument("-t", "--threshold", type=int, default=3, help="Signing threshold.")
    parser_generate.add_argument("-n", "--participants", type=int, default=5, help="Number of shares.")
    parser_generate.add_argument("-o", "--output", default=DEFAULT_KEY_FILE, help="Key file to write.")
    parser_generate.set_defaults(func=generate_command)

    parser_sign = subparsers.add_parser("sign", help="Sign a message.")
    parser_sign.add_argument("-m", "--message", type=str, required=True, help="Message to sign.")
    parser_sign.add_argument("-s", "--signers", help="Comma separated signer indexes (default: first t).")
    parser_sign.add_argument("-k", "--key-file", default=DEFAULT_KEY_FILE, help="Key file to read.")
    parser_sign.add_argument("-o", "--signature-file", default=DEFAULT_SIGNATURE_FILE, help="Signature file to write.")
    parser_sign.set_defaults(func=sign_command)

    parser_verify = subparsers.add_parser("verify", help="Verify a message")
    parser_verify.add_argument("-m", "--message", type=str, required=True, help="Message to verify.")
    parser_verify.add_argument("-k", "--key-file", default=DEFAULT_KEY_FILE, help="Key file holding the group key.")
    parser_verify.add_argument("-s", "--signature-file", default=DEFAULT_SIGNATURE_FILE, help="Signature file to read.")
    parser_verify.set_defaults(func=verify_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    try:
        return args.func(args)
    except (FrostError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
