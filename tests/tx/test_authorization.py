"""
Spending condition and authorization tests.

Covers address hashing per hash mode, the sighash chain primitives, and
verification of single- and multi-sig conditions built by hand.
"""

import pytest

from helpers import HASH160_ONE, PUBKEY_ONE, PUBKEY_TWO, mk_private_key

from funai_transactions.codec import BinaryReader, BinaryWriter, hash160, sha256_bytes, sha512_256
from funai_transactions.enums import AddressHashMode, AuthType, PubKeyEncoding
from funai_transactions.runtime.errors import InvalidValueError, ValidationError, VerificationError
from funai_transactions.tx.authorization import (
    PLACEHOLDER_PUBLIC_KEY,
    SingleSigSpendingCondition,
    SponsoredAuthorization,
    StandardAuthorization,
    address_from_public_keys,
    address_hash_from_public_keys,
    clear_spending_condition,
    create_multi_sig_spending_condition,
    create_single_sig_spending_condition,
    create_sponsored_auth,
    create_standard_auth,
    deserialize_authorization,
    deserialize_spending_condition,
    into_initial_sighash_auth,
    is_single_sig,
    make_sighash_postsign,
    make_sighash_presign,
    multisig_redeem_script,
    next_signature,
    next_verification,
    public_key_auth_field,
    serialize_authorization,
    serialize_spending_condition,
    signature_auth_field,
    verify_spending_condition,
)
from funai_transactions.wire import MessageSignature

INITIAL = bytes(range(32))


def encode_condition(condition):
    writer = BinaryWriter()
    serialize_spending_condition(writer, condition)
    return writer.to_bytes()


class TestAddressHashing:
    def test_p2pkh(self):
        assert address_hash_from_public_keys(AddressHashMode.P2PKH, 1, [bytes.fromhex(PUBKEY_ONE)]).hex() == HASH160_ONE

    def test_p2wpkh(self):
        expected = hash160(b"\x00\x14" + bytes.fromhex(HASH160_ONE))
        assert address_hash_from_public_keys(AddressHashMode.P2WPKH, 1, [bytes.fromhex(PUBKEY_ONE)]) == expected

    def test_redeem_script_layout(self):
        keys = [bytes.fromhex(PUBKEY_ONE), bytes.fromhex(PUBKEY_TWO)]
        script = multisig_redeem_script(2, keys)
        assert script.hex() == "52" "21" + PUBKEY_ONE + "21" + PUBKEY_TWO + "52" "ae"

    def test_p2sh_and_p2wsh(self):
        keys = [bytes.fromhex(PUBKEY_ONE), bytes.fromhex(PUBKEY_TWO)]
        script = multisig_redeem_script(1, keys)
        assert address_hash_from_public_keys(AddressHashMode.P2SH, 1, keys) == hash160(script)
        assert address_hash_from_public_keys(AddressHashMode.P2WSH, 1, keys) == \
            hash160(b"\x00\x20" + sha256_bytes(script))
        # non-sequential modes commit to keys the same way
        assert address_hash_from_public_keys(AddressHashMode.P2SH_NON_SEQUENTIAL, 1, keys) == hash160(script)

    def test_key_order_matters(self):
        keys = [bytes.fromhex(PUBKEY_ONE), bytes.fromhex(PUBKEY_TWO)]
        assert address_hash_from_public_keys(AddressHashMode.P2SH, 1, keys) != \
            address_hash_from_public_keys(AddressHashMode.P2SH, 1, keys[::-1])

    def test_segwit_rejects_uncompressed(self):
        uncompressed = mk_private_key(1, compressed=False).public_key_bytes
        with pytest.raises(ValidationError):
            address_hash_from_public_keys(AddressHashMode.P2WPKH, 1, [uncompressed])

    def test_threshold_bounds(self):
        with pytest.raises(InvalidValueError):
            multisig_redeem_script(3, [bytes.fromhex(PUBKEY_ONE), bytes.fromhex(PUBKEY_TWO)])

    def test_address_from_public_keys(self):
        address = address_from_public_keys(22, AddressHashMode.P2PKH, 1, [bytes.fromhex(PUBKEY_ONE)])
        assert address.hash160.hex() == HASH160_ONE


class TestConditions:
    def test_single_sig_layout(self):
        condition = create_single_sig_spending_condition(AddressHashMode.P2PKH, PUBKEY_ONE, 1, 2)
        expected = "00" + HASH160_ONE + "0000000000000001" "0000000000000002" "00" + "00" * 65
        assert encode_condition(condition).hex() == expected
        assert is_single_sig(condition)

    def test_multi_sig_layout(self):
        condition = create_multi_sig_spending_condition(AddressHashMode.P2SH, 2, [PUBKEY_ONE, PUBKEY_TWO], 0, 0)
        condition.fields.append(public_key_auth_field(PUBKEY_ONE))
        encoded = encode_condition(condition)
        assert encoded[0] == AddressHashMode.P2SH
        assert encoded[37:41].hex() == "00000001"
        assert encoded[41:42].hex() == "00"
        assert encoded[-2:].hex() == "0002"
        assert not is_single_sig(condition)

    def test_codec_roundtrip(self):
        single = create_single_sig_spending_condition(AddressHashMode.P2WPKH, PUBKEY_ONE, 3, 4)
        multi = create_multi_sig_spending_condition(AddressHashMode.P2WSH_NON_SEQUENTIAL, 1,
                                                    [PUBKEY_ONE, PUBKEY_TWO], 5, 6)
        multi.fields.append(signature_auth_field(MessageSignature(b"\x01" + bytes(64)), PubKeyEncoding.COMPRESSED))
        multi.fields.append(public_key_auth_field(PUBKEY_TWO))
        for condition in (single, multi):
            assert deserialize_spending_condition(BinaryReader(encode_condition(condition))) == condition

    def test_hash_mode_shape_mismatch(self):
        with pytest.raises(ValidationError):
            SingleSigSpendingCondition(AddressHashMode.P2SH, bytes(20), 0, 0, PubKeyEncoding.COMPRESSED)
        with pytest.raises(ValidationError):
            create_multi_sig_spending_condition(AddressHashMode.P2PKH, 1, [PUBKEY_ONE], 0, 0)

    def test_nonce_and_fee_fit_u64(self):
        with pytest.raises(InvalidValueError):
            create_single_sig_spending_condition(AddressHashMode.P2PKH, PUBKEY_ONE, 2**64, 0)
        with pytest.raises(InvalidValueError):
            create_single_sig_spending_condition(AddressHashMode.P2PKH, PUBKEY_ONE, 0, -1)


class TestAuthorization:
    def test_sponsored_placeholder(self):
        origin = create_single_sig_spending_condition(AddressHashMode.P2PKH, PUBKEY_ONE, 0, 0)
        auth = create_sponsored_auth(origin)
        assert auth.sponsor_spending_condition.signer == hash160(bytes.fromhex(PLACEHOLDER_PUBLIC_KEY))

    def test_authorization_roundtrip(self):
        origin = create_single_sig_spending_condition(AddressHashMode.P2PKH, PUBKEY_ONE, 1, 0)
        sponsor = create_single_sig_spending_condition(AddressHashMode.P2PKH, PUBKEY_TWO, 2, 300)
        for auth in (create_standard_auth(origin), create_sponsored_auth(origin, sponsor)):
            writer = BinaryWriter()
            serialize_authorization(writer, auth)
            encoded = writer.to_bytes()
            assert encoded[0] == auth.auth_type
            assert deserialize_authorization(BinaryReader(encoded)) == auth

    def test_initial_sighash_auth_clears_origin_and_sponsor(self):
        origin = create_single_sig_spending_condition(AddressHashMode.P2PKH, PUBKEY_ONE, 7, 9)
        origin.signature = MessageSignature(b"\x01" + bytes(64))
        sponsor = create_single_sig_spending_condition(AddressHashMode.P2PKH, PUBKEY_TWO, 2, 300)
        initial = into_initial_sighash_auth(SponsoredAuthorization(origin, sponsor))

        assert initial.spending_condition.nonce == 0
        assert initial.spending_condition.fee == 0
        assert initial.spending_condition.signature.is_empty
        assert initial.sponsor_spending_condition == create_sponsored_auth(origin).sponsor_spending_condition
        # the input is untouched
        assert origin.nonce == 7 and not origin.signature.is_empty

    def test_clear_multi_sig(self):
        condition = create_multi_sig_spending_condition(AddressHashMode.P2SH, 1, [PUBKEY_ONE], 3, 4)
        condition.fields.append(public_key_auth_field(PUBKEY_ONE))
        cleared = clear_spending_condition(condition)
        assert cleared.fields == [] and cleared.nonce == 0 and cleared.fee == 0
        assert len(condition.fields) == 1


class TestSighashChain:
    def test_presign_layout(self):
        expected = sha512_256(INITIAL + b"\x04" + (10).to_bytes(8, "big") + (3).to_bytes(8, "big"))
        assert make_sighash_presign(INITIAL, AuthType.STANDARD, 10, 3) == expected

    def test_postsign_layout(self):
        signature = MessageSignature(b"\x01" + bytes(64))
        expected = sha512_256(INITIAL + b"\x00" + signature.data)
        assert make_sighash_postsign(INITIAL, PubKeyEncoding.COMPRESSED, signature) == expected

    def test_sign_then_recover(self, key_one):
        signature, next_hash = next_signature(INITIAL, AuthType.STANDARD, 10, 0, key_one)
        public_key, verified_next = next_verification(INITIAL, AuthType.STANDARD, 10, 0,
                                                      PubKeyEncoding.COMPRESSED, signature)
        assert public_key.hex() == PUBKEY_ONE
        assert verified_next == next_hash

    def test_auth_type_changes_signature(self, key_one):
        standard, _ = next_signature(INITIAL, AuthType.STANDARD, 0, 0, key_one)
        sponsored, _ = next_signature(INITIAL, AuthType.SPONSORED, 0, 0, key_one)
        assert standard != sponsored


class TestVerification:
    def _signed_single(self, key, hash_mode=AddressHashMode.P2PKH):
        condition = create_single_sig_spending_condition(hash_mode, key.public_key_bytes, 0, 10)
        condition.signature, _ = next_signature(INITIAL, AuthType.STANDARD, 10, 0, key)
        return condition

    def test_single_sig_verifies(self, key_one):
        condition = self._signed_single(key_one)
        _, keys = verify_spending_condition(condition, INITIAL, AuthType.STANDARD)
        assert keys == [key_one.public_key_bytes]

    def test_single_sig_wrong_signer(self, key_one, key_two):
        condition = self._signed_single(key_one)
        condition.signer = hash160(key_two.public_key_bytes)
        with pytest.raises(VerificationError):
            verify_spending_condition(condition, INITIAL, AuthType.STANDARD)

    def test_single_sig_unsigned(self):
        condition = create_single_sig_spending_condition(AddressHashMode.P2PKH, PUBKEY_ONE, 0, 0)
        with pytest.raises(VerificationError):
            verify_spending_condition(condition, INITIAL, AuthType.STANDARD)

    def test_sequential_multi_sig(self, key_one, key_two):
        keys = [key_one.public_key_bytes, key_two.public_key_bytes]
        condition = create_multi_sig_spending_condition(AddressHashMode.P2SH, 2, keys, 0, 0)
        cur = INITIAL
        for key in (key_one, key_two):
            signature, cur = next_signature(cur, AuthType.STANDARD, 0, 0, key)
            condition.fields.append(signature_auth_field(signature, PubKeyEncoding.COMPRESSED))

        final, recovered = verify_spending_condition(condition, INITIAL, AuthType.STANDARD)
        assert recovered == keys
        assert final == cur

    def test_sequential_requires_exact_count(self, key_one, key_two):
        keys = [key_one.public_key_bytes, key_two.public_key_bytes]
        condition = create_multi_sig_spending_condition(AddressHashMode.P2SH, 1, keys, 0, 0)
        cur = INITIAL
        for key in (key_one, key_two):
            signature, cur = next_signature(cur, AuthType.STANDARD, 0, 0, key)
            condition.fields.append(signature_auth_field(signature, PubKeyEncoding.COMPRESSED))
        with pytest.raises(VerificationError):
            verify_spending_condition(condition, INITIAL, AuthType.STANDARD)

    def test_non_sequential_signs_from_initial(self, key_one, key_two):
        keys = [key_one.public_key_bytes, key_two.public_key_bytes]
        condition = create_multi_sig_spending_condition(AddressHashMode.P2SH_NON_SEQUENTIAL, 1, keys, 0, 0)
        for key in (key_one, key_two):
            signature, _ = next_signature(INITIAL, AuthType.STANDARD, 0, 0, key)
            condition.fields.append(signature_auth_field(signature, PubKeyEncoding.COMPRESSED))

        final, recovered = verify_spending_condition(condition, INITIAL, AuthType.STANDARD)
        assert recovered == keys
        assert final == INITIAL

    def test_missing_signature(self, key_one, key_two):
        keys = [key_one.public_key_bytes, key_two.public_key_bytes]
        condition = create_multi_sig_spending_condition(AddressHashMode.P2SH, 2, keys, 0, 0)
        signature, _ = next_signature(INITIAL, AuthType.STANDARD, 0, 0, key_one)
        condition.fields.append(signature_auth_field(signature, PubKeyEncoding.COMPRESSED))
        condition.fields.append(public_key_auth_field(key_two.public_key_bytes))
        with pytest.raises(VerificationError):
            verify_spending_condition(condition, INITIAL, AuthType.STANDARD)

    def test_standard_authorization_type(self):
        assert StandardAuthorization.auth_type == AuthType.STANDARD
        assert SponsoredAuthorization.auth_type == AuthType.SPONSORED
