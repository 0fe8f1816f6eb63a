"""
Funai Binary Codec Module

Low-level building blocks for the consensus wire format.

Key components:
- writer.py: big-endian binary writer with width-checked integers
- reader.py: cursor-based binary reader raising MalformedLengthError
- hashes.py: SHA-256, SHA-512/256 and HASH160
- c32.py: c32check address encoding
"""

from .c32 import c32_address, c32_address_decode, is_valid_address
from .hashes import hash160, sha256_bytes, sha512_256, txid_from_data
from .reader import BinaryReader
from .writer import BinaryWriter

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "c32_address",
    "c32_address_decode",
    "is_valid_address",
    "hash160",
    "sha256_bytes",
    "sha512_256",
    "txid_from_data",
]
