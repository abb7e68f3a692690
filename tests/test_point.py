import unittest

from frostsig import Point, SECP256K1, SECP256K1_SHA256, DecodingError

G = SECP256K1.generator
Q = SECP256K1.q


class PointTests(unittest.TestCase):
    def test_generator_on_curve(self):
        self.assertTrue(SECP256K1.contains(G.x, G.y))

    def test_group_law(self):
        self.assertEqual(G + G, 2 * G)
        self.assertEqual(3 * G, G + G + G)
        self.assertEqual((5 * G) - (2 * G), 3 * G)
        self.assertTrue((G + -G).is_zero())
        self.assertTrue((Q * G).is_zero())
        self.assertEqual((Q + 1) * G, G)
        self.assertEqual(Point() + G, G)

    def test_sec_serialize_roundtrip(self):
        for k in (1, 2, 7, Q - 1):
            point = k * G
            data = point.sec_serialize()
            self.assertEqual(len(data), 33)
            self.assertEqual(Point.sec_deserialize(data), point)

    def test_negation_flips_prefix(self):
        self.assertEqual(
            (-G).sec_serialize()[1:], G.sec_serialize()[1:]
        )
        self.assertNotEqual((-G).sec_serialize()[0], G.sec_serialize()[0])

    def test_infinity_not_serializable(self):
        with self.assertRaises(ValueError):
            Point().sec_serialize()

    def test_rejects_malformed_encodings(self):
        data = G.sec_serialize()
        with self.assertRaises(DecodingError):
            Point.sec_deserialize(data[:-1])
        with self.assertRaises(DecodingError):
            Point.sec_deserialize(b"\x04" + data[1:])
        # x = 5 is not the x-coordinate of a secp256k1 point
        with self.assertRaises(DecodingError):
            Point.sec_deserialize(b"\x02" + (5).to_bytes(32, "big"))
        with self.assertRaises(DecodingError):
            Point.sec_deserialize(b"\x02" + SECP256K1.p.to_bytes(32, "big"))


class CiphersuiteTests(unittest.TestCase):
    def setUp(self):
        self.suite = SECP256K1_SHA256

    def test_scalar_encoding(self):
        for scalar in (0, 1, Q - 1):
            data = self.suite.encode_scalar(scalar)
            self.assertEqual(len(data), 32)
            self.assertEqual(self.suite.decode_scalar(data), scalar)

    def test_rejects_unreduced_scalar(self):
        with self.assertRaises(DecodingError):
            self.suite.decode_scalar(Q.to_bytes(32, "big"))
        with self.assertRaises(DecodingError):
            self.suite.decode_scalar(b"\x01" * 31)
        with self.assertRaises(ValueError):
            self.suite.encode_scalar(Q)

    def test_random_scalar_range(self):
        for _ in range(20):
            scalar = self.suite.random_scalar()
            self.assertTrue(1 <= scalar < Q)

    def test_hash_to_scalar_is_domain_separated(self):
        a = self.suite.hash_to_scalar("rho", b"data")
        b = self.suite.hash_to_scalar("challenge", b"data")
        self.assertNotEqual(a, b)
        self.assertEqual(a, self.suite.hash_to_scalar("rho", b"da", b"ta"))
        self.assertTrue(0 <= a < Q)


if __name__ == "__main__":
    unittest.main()
