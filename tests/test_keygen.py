import dataclasses
import itertools
import unittest

from frostsig import (
    SECP256K1,
    ConfigurationError,
    DegenerateThreshold,
    InvalidShare,
    SecretShare,
    ThresholdExceedsParticipants,
    UnknownParticipantIndex,
    generate,
)
from frostsig.keygen import deal, finalize
from frostsig.secret_sharing import reconstruct_secret

G = SECP256K1.generator
Q = SECP256K1.q


class KeyGenerationTests(unittest.TestCase):
    def test_generate(self):
        result = generate(3, 5)

        self.assertEqual(result.threshold, 3)
        self.assertEqual(result.participants, 5)
        self.assertEqual([share.index for share in result.secret_shares], [1, 2, 3, 4, 5])
        self.assertEqual(result.commitment.threshold, 3)
        self.assertEqual(result.commitment.group_public_key, result.group_public_key)
        for share, verification_share in zip(
            result.secret_shares, result.verification_shares
        ):
            self.assertEqual(share.index, verification_share.index)
            self.assertEqual(share.value * G, verification_share.point)
        self.assertTrue(result.public_key_package().verify_consistency())

    def test_every_quorum_interpolates_to_the_group_key(self):
        for t, n in ((1, 1), (1, 3), (2, 3), (3, 5), (4, 4)):
            result = generate(t, n)
            secrets_found = set()
            for subset in itertools.combinations(result.secret_shares, t):
                secret = reconstruct_secret(subset)
                self.assertEqual(secret * G, result.group_public_key)
                secrets_found.add(secret)
            self.assertEqual(len(secrets_found), 1)

    def test_given_secret(self):
        result = generate(2, 3, secret=42)
        self.assertEqual(result.group_public_key, 42 * G)
        with self.assertRaises(ValueError):
            generate(2, 3, secret=Q)

    def test_rejects_bad_parameters(self):
        with self.assertRaises(ThresholdExceedsParticipants):
            generate(4, 3)
        with self.assertRaises(DegenerateThreshold):
            generate(0, 3)
        with self.assertRaises(ConfigurationError):
            generate(-1, 3)
        # ConfigurationError is a ValueError so hosts can treat it as bad input
        with self.assertRaises(ValueError):
            generate(6, 5)

    def test_malicious_dealer_aborts(self):
        shares, commitment = deal(3, 5)
        self.assertEqual(finalize(3, shares, commitment).threshold, 3)

        tampered = list(shares)
        tampered[3] = SecretShare(4, (shares[3].value + 1) % Q)
        with self.assertRaises(InvalidShare) as cm:
            finalize(3, tampered, commitment)
        self.assertEqual(cm.exception.index, 4)

    def test_key_share(self):
        result = generate(2, 3)
        key_share = result.key_share(2)
        self.assertEqual(key_share.index, 2)
        self.assertEqual(key_share.verification_share, result.verification_shares[1].point)
        self.assertEqual(key_share.group_public_key, result.group_public_key)
        with self.assertRaises(UnknownParticipantIndex):
            result.key_share(4)
        with self.assertRaises(UnknownParticipantIndex):
            result.public_key_package().verification_share(9)

    def test_public_key_package_consistency(self):
        result = generate(3, 5)
        package = result.public_key_package()
        self.assertTrue(package.verify_consistency())

        lowered = dataclasses.replace(package, threshold=2)
        self.assertFalse(lowered.verify_consistency())

        shares = package.verification_shares
        repeated = dataclasses.replace(
            package, verification_shares=shares + (shares[0],)
        )
        self.assertFalse(repeated.verify_consistency())

        other = generate(3, 5)
        swapped_key = dataclasses.replace(
            package, group_public_key=other.group_public_key
        )
        self.assertFalse(swapped_key.verify_consistency())


if __name__ == "__main__":
    unittest.main()
