"""
SECP256K1 cryptographic operations for the Funai chain.

Provides the recoverable ECDSA signatures used by spending conditions.
Signatures are RFC 6979 deterministic, low-S, and laid out as
``recovery_id || r || s`` (65 bytes).

Private keys follow the chain convention: 32 raw bytes map to an uncompressed
public key, 33 bytes ending in ``0x01`` map to a compressed one.
"""

from __future__ import annotations
import logging
from typing import Union

import coincurve

from ..enums import (
    COMPRESSED_PUBKEY_LENGTH_BYTES,
    RECOVERABLE_ECDSA_SIG_LENGTH_BYTES,
    UNCOMPRESSED_PUBKEY_LENGTH_BYTES,
    PubKeyEncoding,
)
from ..runtime.errors import FunaiError, ErrorCode

logger = logging.getLogger(__name__)

KeyLike = Union[str, bytes]


class Secp256k1Error(FunaiError):
    """Base exception for SECP256K1 operations."""

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message, ErrorCode.SIGNING_ERROR, cause=cause)


def _as_bytes(key: KeyLike) -> bytes:
    if isinstance(key, str):
        try:
            return bytes.fromhex(key[2:] if key.startswith("0x") else key)
        except ValueError as e:
            raise Secp256k1Error(f"Invalid hex string: {e}", e)
    return bytes(key)


class Secp256k1PublicKey:
    """SECP256K1 public key in compressed (33) or uncompressed (65) form."""

    def __init__(self, public_key_bytes: bytes):
        """
        Initialize public key.

        Args:
            public_key_bytes: Public key bytes (33 or 65 bytes)
        """
        if len(public_key_bytes) not in (COMPRESSED_PUBKEY_LENGTH_BYTES, UNCOMPRESSED_PUBKEY_LENGTH_BYTES):
            raise Secp256k1Error(f"Public key must be 33 or 65 bytes, got {len(public_key_bytes)}")
        try:
            self._key = coincurve.PublicKey(bytes(public_key_bytes))
        except ValueError as e:
            raise Secp256k1Error(f"Invalid public key: {e}", e)
        self.public_key_bytes = bytes(public_key_bytes)

    @classmethod
    def from_hex(cls, public_key_hex: str) -> Secp256k1PublicKey:
        """Create public key from a hex string."""
        return cls(_as_bytes(public_key_hex))

    @property
    def is_compressed(self) -> bool:
        return len(self.public_key_bytes) == COMPRESSED_PUBKEY_LENGTH_BYTES

    @property
    def encoding(self) -> PubKeyEncoding:
        return PubKeyEncoding.COMPRESSED if self.is_compressed else PubKeyEncoding.UNCOMPRESSED

    def compressed(self) -> bytes:
        """Get the 33-byte compressed form."""
        return self._key.format(compressed=True)

    def uncompressed(self) -> bytes:
        """Get the 65-byte uncompressed form."""
        return self._key.format(compressed=False)

    def to_bytes(self) -> bytes:
        """Get public key as bytes, in the form it was created with."""
        return self.public_key_bytes

    def to_hex(self) -> str:
        return self.public_key_bytes.hex()

    def verify(self, signature: bytes, message_hash: bytes) -> bool:
        """
        Verify a recoverable signature against a 32-byte message hash.

        Args:
            signature: 65-byte ``recovery_id || r || s`` signature
            message_hash: Digest that was signed

        Returns:
            True if the signature recovers to this key
        """
        try:
            recovered = recover_public_key(message_hash, signature, self.is_compressed)
        except Secp256k1Error:
            return False
        return recovered == self.public_key_bytes

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Secp256k1PublicKey) and other.public_key_bytes == self.public_key_bytes

    def __hash__(self) -> int:
        return hash(self.public_key_bytes)

    def __repr__(self) -> str:
        return f"Secp256k1PublicKey({self.to_hex()})"


class Secp256k1PrivateKey:
    """
    SECP256K1 private key producing recoverable signatures.

    Key generation is out of scope: keys are always supplied by the caller.
    """

    def __init__(self, private_key_bytes: bytes, compressed: bool = True):
        """
        Initialize private key.

        Args:
            private_key_bytes: 32-byte secret
            compressed: Whether the matching public key is compressed
        """
        if len(private_key_bytes) != 32:
            raise Secp256k1Error(f"Private key must be 32 bytes, got {len(private_key_bytes)}")
        try:
            self._private_key = coincurve.PrivateKey(bytes(private_key_bytes))
        except ValueError as e:
            raise Secp256k1Error(f"Invalid private key: {e}", e)
        self._private_key_bytes = bytes(private_key_bytes)
        self.compressed = compressed
        self.public_key_bytes = self._private_key.public_key.format(compressed=compressed)

    @classmethod
    def parse(cls, key: Union[KeyLike, Secp256k1PrivateKey]) -> Secp256k1PrivateKey:
        """
        Parse a private key in the chain's encoding.

        A 33-byte key whose last byte is ``0x01`` is a compressed key; a
        32-byte key yields an uncompressed public key.
        """
        if isinstance(key, Secp256k1PrivateKey):
            return key
        raw = _as_bytes(key)
        if len(raw) == 33:
            if raw[32] != 0x01:
                raise Secp256k1Error("33-byte private key must end with 0x01")
            return cls(raw[:32], compressed=True)
        if len(raw) == 32:
            return cls(raw, compressed=False)
        raise Secp256k1Error(f"Private key must be 32 or 33 bytes, got {len(raw)}")

    def sign_recoverable(self, message_hash: bytes) -> bytes:
        """
        Sign a 32-byte digest.

        Args:
            message_hash: Digest to sign (signed as-is, never re-hashed)

        Returns:
            65-byte ``recovery_id || r || s`` signature
        """
        if len(message_hash) != 32:
            raise Secp256k1Error(f"Message hash must be 32 bytes, got {len(message_hash)}")
        # coincurve lays out r || s || recovery_id
        rsv = self._private_key.sign_recoverable(message_hash, hasher=None)
        return bytes([rsv[64]]) + rsv[:64]

    def public_key(self) -> Secp256k1PublicKey:
        """
        Get the public key.

        Returns:
            Secp256k1PublicKey instance
        """
        return Secp256k1PublicKey(self.public_key_bytes)

    def to_bytes(self) -> bytes:
        """Get the key in chain encoding (with the ``01`` suffix when compressed)."""
        return self._private_key_bytes + (b"\x01" if self.compressed else b"")

    def to_hex(self) -> str:
        return self.to_bytes().hex()

    def __repr__(self) -> str:
        return f"Secp256k1PrivateKey(public={self.public_key_bytes.hex()[:16]}...)"


def recover_public_key(message_hash: bytes, signature: bytes, compressed: bool = True) -> bytes:
    """
    Recover the signer's public key from a recoverable signature.

    Args:
        message_hash: 32-byte digest that was signed
        signature: 65-byte ``recovery_id || r || s`` signature
        compressed: Form of the returned key

    Returns:
        Public key bytes (33 or 65)

    Raises:
        Secp256k1Error: If the signature is malformed or not recoverable
    """
    if len(signature) != RECOVERABLE_ECDSA_SIG_LENGTH_BYTES:
        raise Secp256k1Error(f"Signature must be 65 bytes, got {len(signature)}")
    if signature[0] > 3:
        raise Secp256k1Error(f"Invalid recovery id: {signature[0]}")
    rsv = bytes(signature[1:]) + bytes(signature[:1])
    try:
        key = coincurve.PublicKey.from_signature_and_message(rsv, message_hash, hasher=None)
    except (ValueError, TypeError) as e:
        raise Secp256k1Error(f"Cannot recover public key: {e}", e)
    return key.format(compressed=compressed)


def private_key_to_public(private_key: Union[KeyLike, Secp256k1PrivateKey]) -> bytes:
    """Public key bytes for a private key in chain encoding."""
    return Secp256k1PrivateKey.parse(private_key).public_key_bytes


def compress_public_key(public_key: KeyLike) -> bytes:
    """Compressed form of a 33- or 65-byte public key."""
    return Secp256k1PublicKey(_as_bytes(public_key)).compressed()


def public_key_is_compressed(public_key: KeyLike) -> bool:
    return len(_as_bytes(public_key)) == COMPRESSED_PUBKEY_LENGTH_BYTES


__all__ = [
    "Secp256k1Error",
    "Secp256k1PublicKey",
    "Secp256k1PrivateKey",
    "recover_public_key",
    "private_key_to_public",
    "compress_public_key",
    "public_key_is_compressed",
]
