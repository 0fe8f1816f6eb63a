"""
Protocol enumerations and wire constants for the Funai chain.

All byte values are part of the consensus wire format and must not change.
"""

from enum import IntEnum

# Fixed sizes (bytes)
ADDRESS_HASH_LENGTH = 20
MEMO_MAX_LENGTH_BYTES = 34
RECOVERABLE_ECDSA_SIG_LENGTH_BYTES = 65
COMPRESSED_PUBKEY_LENGTH_BYTES = 33
UNCOMPRESSED_PUBKEY_LENGTH_BYTES = 65
COINBASE_BYTES_LENGTH = 32
VRF_PROOF_BYTES_LENGTH = 80
TXID_BYTES_LENGTH = 32

# Identifier limits
CLARITY_MAX_NAME_LENGTH = 128
CONTRACT_MAX_NAME_LENGTH = 40
CODE_BODY_MAX_LENGTH_BYTES = 100_000

MAX_U64 = 2**64 - 1


class TransactionVersion(IntEnum):
    MAINNET = 0x00
    TESTNET = 0x80


class ChainId(IntEnum):
    MAINNET = 0x00000001
    TESTNET = 0x80000000


class PeerNetworkId(IntEnum):
    MAINNET = 0x17000000
    TESTNET = 0xFF000000


class AddressVersion(IntEnum):
    MAINNET_SINGLE_SIG = 22
    MAINNET_MULTI_SIG = 20
    TESTNET_SINGLE_SIG = 26
    TESTNET_MULTI_SIG = 21


class ClarityType(IntEnum):
    INT = 0x00
    UINT = 0x01
    BUFFER = 0x02
    BOOL_TRUE = 0x03
    BOOL_FALSE = 0x04
    PRINCIPAL_STANDARD = 0x05
    PRINCIPAL_CONTRACT = 0x06
    RESPONSE_OK = 0x07
    RESPONSE_ERR = 0x08
    OPTIONAL_NONE = 0x09
    OPTIONAL_SOME = 0x0A
    LIST = 0x0B
    TUPLE = 0x0C
    STRING_ASCII = 0x0D
    STRING_UTF8 = 0x0E


class ClarityVersion(IntEnum):
    CLARITY1 = 1
    CLARITY2 = 2
    CLARITY3 = 3


class PayloadType(IntEnum):
    TOKEN_TRANSFER = 0x00
    SMART_CONTRACT = 0x01
    CONTRACT_CALL = 0x02
    POISON_MICROBLOCK = 0x03
    COINBASE = 0x04
    COINBASE_TO_ALT_RECIPIENT = 0x05
    VERSIONED_SMART_CONTRACT = 0x06
    TENURE_CHANGE = 0x07
    NAKAMOTO_COINBASE = 0x08
    INFER = 0x09
    REGISTER_MODEL = 0x0A


class TenureChangeCause(IntEnum):
    BLOCK_FOUND = 0
    EXTENDED = 1


class AnchorMode(IntEnum):
    ON_CHAIN_ONLY = 0x01
    OFF_CHAIN_ONLY = 0x02
    ANY = 0x03


class PostConditionMode(IntEnum):
    ALLOW = 0x01
    DENY = 0x02


class PostConditionType(IntEnum):
    STX = 0x00
    FUNGIBLE = 0x01
    NON_FUNGIBLE = 0x02


class PostConditionPrincipalId(IntEnum):
    ORIGIN = 0x01
    STANDARD = 0x02
    CONTRACT = 0x03


class FungibleConditionCode(IntEnum):
    EQUAL = 0x01
    GREATER = 0x02
    GREATER_EQUAL = 0x03
    LESS = 0x04
    LESS_EQUAL = 0x05


class NonFungibleConditionCode(IntEnum):
    SENDS = 0x10
    DOES_NOT_SEND = 0x11


class AuthType(IntEnum):
    STANDARD = 0x04
    SPONSORED = 0x05


class AddressHashMode(IntEnum):
    P2PKH = 0x00
    P2SH = 0x01
    P2WPKH = 0x02
    P2WSH = 0x03
    P2SH_NON_SEQUENTIAL = 0x05
    P2WSH_NON_SEQUENTIAL = 0x07


SINGLE_SIG_HASH_MODES = frozenset({AddressHashMode.P2PKH, AddressHashMode.P2WPKH})
MULTI_SIG_HASH_MODES = frozenset({
    AddressHashMode.P2SH,
    AddressHashMode.P2WSH,
    AddressHashMode.P2SH_NON_SEQUENTIAL,
    AddressHashMode.P2WSH_NON_SEQUENTIAL,
})
NON_SEQUENTIAL_HASH_MODES = frozenset({
    AddressHashMode.P2SH_NON_SEQUENTIAL,
    AddressHashMode.P2WSH_NON_SEQUENTIAL,
})


class PubKeyEncoding(IntEnum):
    COMPRESSED = 0x00
    UNCOMPRESSED = 0x01


class AuthFieldType(IntEnum):
    PUBLIC_KEY_COMPRESSED = 0x00
    PUBLIC_KEY_UNCOMPRESSED = 0x01
    SIGNATURE_COMPRESSED = 0x02
    SIGNATURE_UNCOMPRESSED = 0x03


class WireType(IntEnum):
    """The kind of wire primitive being serialized."""

    ADDRESS = 0
    PRINCIPAL = 1
    LENGTH_PREFIXED_STRING = 2
    MEMO_STRING = 3
    ASSET = 4
    POST_CONDITION = 5
    PUBLIC_KEY = 6
    LENGTH_PREFIXED_LIST = 7
    PAYLOAD = 8
    MESSAGE_SIGNATURE = 9
    TRANSACTION_AUTH_FIELD = 10
