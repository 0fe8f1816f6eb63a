"""
Hash Functions

SHA-256, SHA-512/256 and HASH160 as used by the Funai consensus rules.
Transaction ids and sighashes are SHA-512/256; addresses are HASH160.
"""

import hashlib

from Crypto.Hash import RIPEMD160, SHA512


def sha256_bytes(input_bytes: bytes) -> bytes:
    """
    Compute SHA-256 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-256 hash as bytes (32 bytes)
    """
    return hashlib.sha256(input_bytes).digest()


def sha512_256(input_bytes: bytes) -> bytes:
    """
    Compute SHA-512/256 (FIPS 180-4 truncated variant, not a truncated SHA-512).

    Args:
        input_bytes: Input bytes to hash

    Returns:
        32-byte digest
    """
    return SHA512.new(data=input_bytes, truncate="256").digest()


def ripemd160(input_bytes: bytes) -> bytes:
    """Compute RIPEMD-160 of input bytes."""
    return RIPEMD160.new(data=input_bytes).digest()


def hash160(input_bytes: bytes) -> bytes:
    """
    Compute HASH160 = RIPEMD160(SHA256(data)).

    Args:
        input_bytes: Input bytes to hash

    Returns:
        20-byte hash
    """
    return ripemd160(sha256_bytes(input_bytes))


def txid_from_data(data: bytes) -> bytes:
    """Transaction id of serialized transaction bytes."""
    return sha512_256(data)
