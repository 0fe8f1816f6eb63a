"""
SECP256K1 key and recoverable-signature tests.
"""

import pytest

from helpers import KEY_ONE, PUBKEY_ONE, PUBKEY_THREE, PUBKEY_TWO, mk_private_key

from funai_transactions.codec import sha256_bytes
from funai_transactions.crypto.message import (
    CHAIN_PREFIX,
    decode_message,
    decode_varint,
    encode_message,
    encode_varint,
    hash_message,
    sign_message,
    verify_message_signature,
)
from funai_transactions.crypto.secp256k1 import (
    Secp256k1Error,
    Secp256k1PrivateKey,
    Secp256k1PublicKey,
    compress_public_key,
    private_key_to_public,
    public_key_is_compressed,
    recover_public_key,
)
from funai_transactions.runtime.errors import MalformedLengthError

DIGEST = sha256_bytes(b"funai")

# uncompressed form of the generator point
UNCOMPRESSED_ONE = (
    "0479be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)


class TestKeys:
    @pytest.mark.parametrize("scalar,expected", [(1, PUBKEY_ONE), (2, PUBKEY_TWO), (3, PUBKEY_THREE)])
    def test_known_public_keys(self, scalar, expected):
        assert mk_private_key(scalar).public_key_bytes.hex() == expected

    def test_parse_compressed_suffix(self):
        key = Secp256k1PrivateKey.parse(KEY_ONE)
        assert key.compressed
        assert key.to_hex() == KEY_ONE

    def test_parse_raw_is_uncompressed(self):
        key = Secp256k1PrivateKey.parse(KEY_ONE[:64])
        assert not key.compressed
        assert key.public_key_bytes.hex() == UNCOMPRESSED_ONE

    def test_parse_rejects_bad_suffix(self):
        with pytest.raises(Secp256k1Error):
            Secp256k1PrivateKey.parse(KEY_ONE[:64] + "02")

    def test_parse_rejects_bad_length(self):
        with pytest.raises(Secp256k1Error):
            Secp256k1PrivateKey.parse("00" * 31)

    def test_zero_scalar_rejected(self):
        with pytest.raises(Secp256k1Error):
            Secp256k1PrivateKey(bytes(32))

    def test_private_key_to_public(self):
        assert private_key_to_public(KEY_ONE).hex() == PUBKEY_ONE

    def test_compression_helpers(self):
        assert compress_public_key(UNCOMPRESSED_ONE).hex() == PUBKEY_ONE
        assert public_key_is_compressed(PUBKEY_ONE)
        assert not public_key_is_compressed(UNCOMPRESSED_ONE)

    def test_public_key_equality(self):
        assert Secp256k1PublicKey.from_hex(PUBKEY_ONE) == mk_private_key(1).public_key()
        assert Secp256k1PublicKey.from_hex(PUBKEY_ONE) != mk_private_key(2).public_key()


class TestSignatures:
    def test_layout_and_determinism(self):
        key = mk_private_key(1)
        signature = key.sign_recoverable(DIGEST)
        assert len(signature) == 65
        assert signature[0] in (0, 1, 2, 3)
        assert key.sign_recoverable(DIGEST) == signature

    def test_low_s(self):
        order = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
        for scalar in (1, 2, 3):
            s = int.from_bytes(mk_private_key(scalar).sign_recoverable(DIGEST)[33:], "big")
            assert s <= order // 2

    def test_recover(self):
        signature = mk_private_key(2).sign_recoverable(DIGEST)
        assert recover_public_key(DIGEST, signature).hex() == PUBKEY_TWO
        assert len(recover_public_key(DIGEST, signature, compressed=False)) == 65

    def test_verify(self):
        key = mk_private_key(3)
        signature = key.sign_recoverable(DIGEST)
        assert key.public_key().verify(signature, DIGEST)
        assert not mk_private_key(1).public_key().verify(signature, DIGEST)
        assert not key.public_key().verify(signature, sha256_bytes(b"other"))

    def test_digest_must_be_32_bytes(self):
        with pytest.raises(Secp256k1Error):
            mk_private_key(1).sign_recoverable(b"short")

    def test_bad_recovery_id(self):
        signature = bytearray(mk_private_key(1).sign_recoverable(DIGEST))
        signature[0] = 7
        with pytest.raises(Secp256k1Error):
            recover_public_key(DIGEST, bytes(signature))


class TestMessages:
    def test_prefix_length_byte(self):
        assert CHAIN_PREFIX[0] == chr(len(CHAIN_PREFIX) - 1)

    def test_encode_message(self):
        encoded = encode_message("hi")
        assert encoded == CHAIN_PREFIX.encode() + b"\x02hi"
        assert decode_message(encoded) == b"hi"

    def test_decode_message_length_mismatch(self):
        with pytest.raises(MalformedLengthError):
            decode_message(CHAIN_PREFIX.encode() + b"\x05hi")

    @pytest.mark.parametrize("value,encoded", [
        (0, "00"),
        (0xFC, "fc"),
        (0xFD, "fdfd00"),
        (0xFFFF, "fdffff"),
        (0x10000, "fe00000100"),
        (0x100000000, "ff0000000001000000"),
    ])
    def test_varint(self, value, encoded):
        assert encode_varint(value).hex() == encoded
        assert decode_varint(bytes.fromhex(encoded)) == (value, len(encoded) // 2)

    def test_truncated_varint(self):
        with pytest.raises(MalformedLengthError):
            decode_varint(b"\xfd\x01")

    def test_sign_and_verify_message(self):
        signature = sign_message(KEY_ONE, "hello")
        assert verify_message_signature(PUBKEY_ONE, "hello", signature)
        assert not verify_message_signature(PUBKEY_ONE, "hello!", signature)
        assert recover_public_key(hash_message("hello"), signature).hex() == PUBKEY_ONE

    def test_message_is_not_a_raw_digest_signature(self):
        assert hash_message("hello") != sha256_bytes(b"hello")
