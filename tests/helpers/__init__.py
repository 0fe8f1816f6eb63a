from .factories import (
    HASH160_ONE,
    KEY_ONE,
    KEY_THREE,
    KEY_TWO,
    PUBKEY_ONE,
    PUBKEY_THREE,
    PUBKEY_TWO,
    ZERO_MAINNET_ADDRESS,
    ZERO_TESTNET_ADDRESS,
    mk_private_key,
    mk_public_keys,
    mk_unsigned_transfer,
)
from .wire import assert_hex_equal

__all__ = [
    "HASH160_ONE",
    "KEY_ONE",
    "KEY_THREE",
    "KEY_TWO",
    "PUBKEY_ONE",
    "PUBKEY_THREE",
    "PUBKEY_TWO",
    "ZERO_MAINNET_ADDRESS",
    "ZERO_TESTNET_ADDRESS",
    "mk_private_key",
    "mk_public_keys",
    "mk_unsigned_transfer",
    "assert_hex_equal",
]
