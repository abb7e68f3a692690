import itertools
import unittest

from frostsig import SECP256K1, SecretShare, VSSCommitment
from frostsig.secret_sharing import (
    commit,
    evaluate_polynomial,
    evaluate_share,
    generate_polynomial,
    lagrange_coefficient,
    reconstruct_secret,
    verify_share,
)

G = SECP256K1.generator
Q = SECP256K1.q


class SecretSharingTests(unittest.TestCase):
    def setUp(self):
        self.secret = 0xC0FFEE
        self.polynomial = generate_polynomial(3, self.secret)
        self.shares = [evaluate_share(self.polynomial, i) for i in range(1, 6)]
        self.commitment = commit(self.polynomial)

    def test_polynomial_shape(self):
        self.assertEqual(len(self.polynomial), 3)
        self.assertEqual(self.polynomial[0], self.secret)
        self.assertEqual(len(generate_polynomial(1, 5)), 1)
        with self.assertRaises(ValueError):
            generate_polynomial(0, 5)

    def test_evaluate_polynomial(self):
        self.assertEqual(evaluate_polynomial((1, 2, 3), 2), 17)
        self.assertEqual(evaluate_polynomial(self.polynomial, 0), self.secret)

    def test_zero_index_rejected(self):
        with self.assertRaises(ValueError):
            evaluate_share(self.polynomial, 0)

    def test_commitment(self):
        self.assertEqual(self.commitment.threshold, 3)
        self.assertEqual(self.commitment.group_public_key, self.secret * G)
        for share in self.shares:
            self.assertEqual(self.commitment.evaluate(share.index), share.value * G)

    def test_empty_commitment_rejected(self):
        with self.assertRaises(ValueError):
            VSSCommitment(())

    def test_verify_share(self):
        for share in self.shares:
            self.assertTrue(verify_share(share, self.commitment))

        tampered = SecretShare(2, (self.shares[1].value + 1) % Q)
        self.assertFalse(verify_share(tampered, self.commitment))
        misplaced = SecretShare(3, self.shares[1].value)
        self.assertFalse(verify_share(misplaced, self.commitment))

    def test_any_threshold_subset_reconstructs(self):
        for subset in itertools.combinations(self.shares, 3):
            self.assertEqual(reconstruct_secret(subset), self.secret)
        self.assertEqual(reconstruct_secret(self.shares), self.secret)

    def test_fewer_than_threshold_shares(self):
        for subset in itertools.combinations(self.shares, 2):
            self.assertNotEqual(reconstruct_secret(subset), self.secret)

    def test_lagrange_coefficient(self):
        indexes = (1, 2, 3)
        total = sum(lagrange_coefficient(indexes, i) for i in indexes) % Q
        # Interpolating the constant polynomial 1 gives 1
        self.assertEqual(total, 1)
        with self.assertRaises(ValueError):
            lagrange_coefficient((1, 1, 2), 1)
        with self.assertRaises(ValueError):
            lagrange_coefficient((1, 2), 3)

    def test_secret_share_hides_value(self):
        self.assertNotIn(str(self.shares[0].value), repr(self.shares[0]))

    def test_encoding(self):
        share = self.shares[4]
        data = share.to_bytes()
        self.assertEqual(len(data), 36)
        self.assertEqual(SecretShare.from_bytes(data), share)
        data = self.commitment.to_bytes()
        self.assertEqual(len(data), 99)
        self.assertEqual(VSSCommitment.from_bytes(data), self.commitment)


if __name__ == "__main__":
    unittest.main()
