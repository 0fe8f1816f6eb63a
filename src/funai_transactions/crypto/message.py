"""
Signed-message encoding.

Off-chain messages are prefixed with ``"\\x16Funai Signed Message:\\n"`` and a
Bitcoin-style variable-length integer before hashing, so a message signature
can never be replayed as a transaction signature.
"""

import struct
from typing import Tuple, Union

from ..codec.hashes import sha256_bytes
from ..runtime.errors import MalformedLengthError
from .secp256k1 import KeyLike, Secp256k1PrivateKey, Secp256k1PublicKey

# len('Funai Signed Message:\n') == 0x16
CHAIN_PREFIX = "\x16Funai Signed Message:\n"


def encode_varint(n: int) -> bytes:
    """Bitcoin CompactSize encoding."""
    if n < 0xFD:
        return bytes([n])
    if n <= 0xFFFF:
        return b"\xfd" + struct.pack("<H", n)
    if n <= 0xFFFFFFFF:
        return b"\xfe" + struct.pack("<I", n)
    return b"\xff" + struct.pack("<Q", n)


def decode_varint(data: bytes) -> Tuple[int, int]:
    """Decode a CompactSize integer, returning ``(value, bytes_consumed)``."""
    if not data:
        raise MalformedLengthError("Empty varint")
    first = data[0]
    widths = {0xFD: ("<H", 2), 0xFE: ("<I", 4), 0xFF: ("<Q", 8)}
    if first not in widths:
        return first, 1
    fmt, width = widths[first]
    if len(data) < 1 + width:
        raise MalformedLengthError("Truncated varint")
    return struct.unpack(fmt, data[1 : 1 + width])[0], 1 + width


def encode_message(message: Union[str, bytes], prefix: str = CHAIN_PREFIX) -> bytes:
    """Prefix a UTF-8 string or raw bytes for signing."""
    message_bytes = message.encode("utf-8") if isinstance(message, str) else bytes(message)
    return prefix.encode("utf-8") + encode_varint(len(message_bytes)) + message_bytes


def decode_message(encoded: bytes, prefix: str = CHAIN_PREFIX) -> bytes:
    """Strip the chain prefix and length from an encoded message."""
    rest = encoded[len(prefix.encode("utf-8")):]
    length, consumed = decode_varint(rest)
    body = rest[consumed:]
    if len(body) != length:
        raise MalformedLengthError(f"Message declares {length} bytes, found {len(body)}")
    return body


def hash_message(message: Union[str, bytes], prefix: str = CHAIN_PREFIX) -> bytes:
    return sha256_bytes(encode_message(message, prefix))


def sign_message(private_key: KeyLike, message: Union[str, bytes]) -> bytes:
    """Sign a message, returning a 65-byte ``recovery_id || r || s`` signature."""
    return Secp256k1PrivateKey.parse(private_key).sign_recoverable(hash_message(message))


def verify_message_signature(public_key: KeyLike, message: Union[str, bytes], signature: bytes) -> bool:
    key = public_key if isinstance(public_key, bytes) else bytes.fromhex(public_key)
    return Secp256k1PublicKey(key).verify(signature, hash_message(message))
