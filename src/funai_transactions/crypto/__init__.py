"""
Cryptographic primitives for the Funai chain.

Recoverable secp256k1 ECDSA and signed-message hashing.
"""

from .secp256k1 import (
    Secp256k1Error,
    Secp256k1PrivateKey,
    Secp256k1PublicKey,
    compress_public_key,
    private_key_to_public,
    public_key_is_compressed,
    recover_public_key,
)
from .message import encode_message, decode_message, hash_message, sign_message, verify_message_signature

__all__ = [
    "Secp256k1Error",
    "Secp256k1PrivateKey",
    "Secp256k1PublicKey",
    "compress_public_key",
    "private_key_to_public",
    "public_key_is_compressed",
    "recover_public_key",
    "encode_message",
    "decode_message",
    "hash_message",
    "sign_message",
    "verify_message_signature",
]
