"""
Post-condition model tests.
"""

import pytest

from helpers import ZERO_MAINNET_ADDRESS

from funai_transactions.clarity import uint_cv
from funai_transactions.enums import FungibleConditionCode, NonFungibleConditionCode, WireType
from funai_transactions.runtime.errors import DecodeError, InvalidValueError
from funai_transactions.tx.postconditions import (
    create_fungible_post_condition,
    create_non_fungible_post_condition,
    create_stx_post_condition,
    make_contract_stx_post_condition,
    make_standard_stx_post_condition,
)
from funai_transactions.wire import OriginPrincipal, decode_wire, encode_wire

ZERO_HASH = "00" * 20
ASSET = ZERO_MAINNET_ADDRESS + ".tokens::gold"
ASSET_HEX = "16" + ZERO_HASH + "06" + b"tokens".hex() + "04" + b"gold".hex()


def roundtrip(condition):
    encoded = encode_wire(condition)
    decoded, cursor = decode_wire(WireType.POST_CONDITION, encoded)
    assert cursor == len(encoded)
    return decoded


class TestSTXPostCondition:
    def test_origin_layout(self):
        condition = create_stx_post_condition("origin", FungibleConditionCode.LESS_EQUAL, 1000)
        assert isinstance(condition.principal, OriginPrincipal)
        assert encode_wire(condition).hex() == "00" "01" "05" "00000000000003e8"
        assert roundtrip(condition) == condition

    def test_standard_and_contract_helpers(self):
        standard = make_standard_stx_post_condition(ZERO_MAINNET_ADDRESS, FungibleConditionCode.EQUAL, 1)
        contract = make_contract_stx_post_condition(ZERO_MAINNET_ADDRESS, "vault",
                                                    FungibleConditionCode.GREATER, 2)
        assert encode_wire(standard).hex() == "00" "02" "16" + ZERO_HASH + "01" "0000000000000001"
        assert encode_wire(contract)[:2].hex() == "0003"
        assert roundtrip(standard) == standard
        assert roundtrip(contract) == contract

    def test_amount_range(self):
        with pytest.raises(InvalidValueError):
            create_stx_post_condition("origin", FungibleConditionCode.EQUAL, -1)
        with pytest.raises(InvalidValueError):
            create_stx_post_condition("origin", FungibleConditionCode.EQUAL, 2**64)


class TestAssetPostConditions:
    def test_fungible_layout(self):
        condition = create_fungible_post_condition("origin", FungibleConditionCode.GREATER_EQUAL, 5, ASSET)
        expected = "01" "01" + ASSET_HEX + "03" "0000000000000005"
        assert encode_wire(condition).hex() == expected
        assert roundtrip(condition) == condition

    def test_non_fungible_layout(self):
        condition = create_non_fungible_post_condition(ZERO_MAINNET_ADDRESS, NonFungibleConditionCode.SENDS,
                                                       ASSET, uint_cv(1))
        expected = "02" "02" "16" + ZERO_HASH + ASSET_HEX + "01" + "00" * 15 + "01" + "10"
        assert encode_wire(condition).hex() == expected
        assert roundtrip(condition) == condition

    def test_malformed_asset_string(self):
        with pytest.raises(InvalidValueError):
            create_fungible_post_condition("origin", FungibleConditionCode.EQUAL, 1, "no-separator")


class TestDecodeErrors:
    def test_unknown_type(self):
        with pytest.raises(DecodeError):
            decode_wire(WireType.POST_CONDITION, bytes([0x05, 0x01]))

    def test_unknown_fungible_code(self):
        with pytest.raises(DecodeError):
            decode_wire(WireType.POST_CONDITION, bytes.fromhex("00" "01" "09" + "00" * 8))

    def test_unknown_nft_code(self):
        data = bytes.fromhex("02" "01" + ASSET_HEX + "03" "01")
        with pytest.raises(DecodeError):
            decode_wire(WireType.POST_CONDITION, data)
