import json
import os
import tempfile
import unittest

from frostsig.cli import load_keys, main


class CliTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.key_file = os.path.join(self.tmp.name, "results", "frost_keys.json")
        self.signature_file = os.path.join(self.tmp.name, "results", "signature.json")

    def tearDown(self):
        self.tmp.cleanup()

    def run_cli(self, *args):
        return main(list(args))

    def generate(self, t, n):
        return self.run_cli("generate", "-t", str(t), "-n", str(n), "-o", self.key_file)

    def sign(self, message, *extra):
        return self.run_cli(
            "sign", "-m", message, "-k", self.key_file, "-o", self.signature_file, *extra
        )

    def verify(self, message):
        return self.run_cli(
            "verify", "-m", message, "-k", self.key_file, "-s", self.signature_file
        )

    def test_generate_keys(self):
        self.assertEqual(self.generate(3, 5), 0)
        with open(self.key_file) as f:
            data = json.load(f)
        self.assertEqual(data["threshold"], 3)
        self.assertEqual(len(data["private_shares"]), 5)
        package, shares = load_keys(data)
        self.assertEqual(package.participant_indexes, (1, 2, 3, 4, 5))
        self.assertEqual([share.index for share in shares], [1, 2, 3, 4, 5])

    def test_generate_rejects_bad_threshold(self):
        self.assertEqual(self.generate(6, 5), 1)
        self.assertFalse(os.path.exists(self.key_file))

    def test_sign_and_verify(self):
        self.assertEqual(self.generate(3, 5), 0)
        self.assertEqual(self.sign("hi, this is a test"), 0)
        self.assertTrue(os.path.exists(self.signature_file))
        self.assertEqual(self.verify("hi, this is a test"), 0)
        self.assertEqual(self.verify("different message"), 1)

    def test_sign_with_chosen_signers(self):
        self.assertEqual(self.generate(3, 5), 0)
        self.assertEqual(self.sign("hi, this is a test", "-s", "2,4,5"), 0)
        self.assertEqual(self.verify("hi, this is a test"), 0)

    def test_sign_with_too_few_signers(self):
        self.assertEqual(self.generate(2, 5), 0)
        self.assertEqual(self.sign("hi, this is a test", "-s", "1"), 1)

    def test_missing_key_file(self):
        self.assertEqual(self.sign("hi, this is a test"), 1)

    def test_tampered_key_file(self):
        self.assertEqual(self.generate(2, 3), 0)
        with open(self.key_file) as f:
            data = json.load(f)
        first, second = data["verification_shares"][0], data["verification_shares"][1]
        first[0], second[0] = second[0], first[0]
        with self.assertRaises(ValueError):
            load_keys(data)

    def write_key_file(self, data):
        with open(self.key_file, "w") as f:
            json.dump(data, f)

    def test_lowered_threshold_rejected(self):
        self.assertEqual(self.generate(3, 5), 0)
        with open(self.key_file) as f:
            data = json.load(f)
        data["threshold"] = 2
        with self.assertRaises(ValueError):
            load_keys(data)

        self.write_key_file(data)
        self.assertEqual(self.sign("hi, this is a test", "-s", "1,2"), 1)
        self.assertFalse(os.path.exists(self.signature_file))

    def test_duplicate_verification_share_rejected(self):
        self.assertEqual(self.generate(2, 3), 0)
        with open(self.key_file) as f:
            data = json.load(f)
        data["verification_shares"].append(list(data["verification_shares"][0]))
        with self.assertRaises(ValueError):
            load_keys(data)

    def test_empty_commitment_rejected(self):
        self.assertEqual(self.generate(2, 3), 0)
        with open(self.key_file) as f:
            data = json.load(f)
        data["commitment"] = []
        with self.assertRaises(ValueError):
            load_keys(data)

        self.write_key_file(data)
        self.assertEqual(self.sign("hi, this is a test"), 1)


if __name__ == "__main__":
    unittest.main()
