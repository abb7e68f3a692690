import unittest

from frostsig import (
    SECP256K1,
    DecodingError,
    Point,
    ThresholdSignature,
    generate,
    threshold_sign,
    verify,
    verify_encoded,
)

G = SECP256K1.generator
Q = SECP256K1.q

MESSAGE = b"hi, this is a test"


def flip_bit(data: bytes, bit: int) -> bytes:
    flipped = bytearray(data)
    flipped[bit // 8] ^= 1 << (bit % 8)
    return bytes(flipped)


class VerifyTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.keys = generate(2, 3)
        cls.signature = threshold_sign(
            cls.keys.public_key_package(), cls.keys.secret_shares, MESSAGE
        )
        cls.public_key_bytes = cls.keys.group_public_key.sec_serialize()
        cls.signature_bytes = cls.signature.to_bytes()

    def test_valid(self):
        self.assertTrue(verify(MESSAGE, self.keys.group_public_key, self.signature))
        self.assertTrue(
            verify_encoded(MESSAGE, self.public_key_bytes, self.signature_bytes)
        )

    def test_signature_encoding(self):
        self.assertEqual(len(self.signature_bytes), 65)
        self.assertEqual(ThresholdSignature.from_bytes(self.signature_bytes), self.signature)
        self.assertEqual(self.signature.hex(), self.signature_bytes.hex())
        self.assertEqual(Point.sec_deserialize(self.public_key_bytes), self.keys.group_public_key)
        with self.assertRaises(DecodingError):
            ThresholdSignature.from_bytes(self.signature_bytes[:64])

    def test_flipped_message_bits(self):
        for bit in range(0, len(MESSAGE) * 8, 7):
            message = flip_bit(MESSAGE, bit)
            self.assertFalse(verify(message, self.keys.group_public_key, self.signature))

    def test_flipped_public_key_bits(self):
        for bit in range(0, len(self.public_key_bytes) * 8, 5):
            public_key = flip_bit(self.public_key_bytes, bit)
            self.assertFalse(verify_encoded(MESSAGE, public_key, self.signature_bytes))

    def test_flipped_signature_bits(self):
        for bit in range(0, len(self.signature_bytes) * 8, 5):
            signature = flip_bit(self.signature_bytes, bit)
            self.assertFalse(verify_encoded(MESSAGE, self.public_key_bytes, signature))

    def test_wrong_key(self):
        other = generate(2, 3)
        self.assertFalse(verify(MESSAGE, other.group_public_key, self.signature))

    def test_degenerate_inputs(self):
        self.assertFalse(verify(MESSAGE, Point(), self.signature))
        self.assertFalse(
            verify(MESSAGE, self.keys.group_public_key, ThresholdSignature(Point(), self.signature.z))
        )
        self.assertFalse(
            verify(
                MESSAGE,
                self.keys.group_public_key,
                ThresholdSignature(self.signature.group_commitment, self.signature.z + Q),
            )
        )
        self.assertFalse(verify_encoded(MESSAGE, b"", self.signature_bytes))

    def test_string_message(self):
        keys = generate(3, 5)
        signature = threshold_sign(
            keys.public_key_package(), keys.secret_shares, "hi, this is a test", (1, 3, 5)
        )
        self.assertTrue(verify("hi, this is a test", keys.group_public_key, signature))
        self.assertTrue(verify(b"hi, this is a test", keys.group_public_key, signature))
        self.assertFalse(verify("hi, this is a test!", keys.group_public_key, signature))
        self.assertTrue(
            verify_encoded(
                "hi, this is a test",
                keys.group_public_key.sec_serialize(),
                signature.to_bytes(),
            )
        )

    def test_non_bytes_message(self):
        self.assertFalse(verify(None, self.keys.group_public_key, self.signature))
        self.assertFalse(verify(12345, self.keys.group_public_key, self.signature))


if __name__ == "__main__":
    unittest.main()
