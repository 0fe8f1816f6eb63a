"""
c32check address encoding.

Funai addresses are the letter ``S`` followed by a c32 (Crockford base32
variant) rendering of ``version`` and ``hash160 || checksum``, where the
checksum is the first four bytes of ``sha256(sha256(version || hash160))``.
"""

from typing import Tuple

from ..enums import ADDRESS_HASH_LENGTH
from ..runtime.errors import InvalidAddressError
from .hashes import sha256_bytes

C32_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_NORMALIZE = str.maketrans({"O": "0", "L": "1", "I": "1"})


def c32_normalize(c32_str: str) -> str:
    """Uppercase and fold the look-alike characters O, L and I."""
    return c32_str.upper().translate(_NORMALIZE)


def c32_encode(data: bytes) -> str:
    """Encode bytes to a c32 string, one leading ``0`` per leading zero byte."""
    leading_zeros = len(data) - len(data.lstrip(b"\x00"))
    num = int.from_bytes(data, "big")
    result = []
    while num > 0:
        num, remainder = divmod(num, 32)
        result.append(C32_ALPHABET[remainder])
    return C32_ALPHABET[0] * leading_zeros + "".join(reversed(result))


def c32_decode(c32_str: str) -> bytes:
    """Decode a c32 string produced by ``c32_encode``."""
    c32_str = c32_normalize(c32_str)
    leading_zeros = len(c32_str) - len(c32_str.lstrip(C32_ALPHABET[0]))

    num = 0
    for ch in c32_str:
        idx = C32_ALPHABET.find(ch)
        if idx < 0:
            raise InvalidAddressError(f"Invalid c32 character: {ch!r}")
        num = num * 32 + idx

    body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    return b"\x00" * leading_zeros + body


def c32_checksum(version: int, data: bytes) -> bytes:
    """First four bytes of the double SHA-256 of ``version || data``."""
    return sha256_bytes(sha256_bytes(bytes([version]) + data))[:4]


def c32_address(version: int, hash160_bytes: bytes) -> str:
    """
    Encode an address from its version byte and hash160.

    Args:
        version: Address version (0-31)
        hash160_bytes: 20-byte hash

    Returns:
        c32check address such as ``SP...`` or ``ST...``
    """
    if not 0 <= version < 32:
        raise InvalidAddressError(f"Address version must be 0-31, got {version}")
    if len(hash160_bytes) != ADDRESS_HASH_LENGTH:
        raise InvalidAddressError(f"Address hash must be 20 bytes, got {len(hash160_bytes)}")
    checksum = c32_checksum(version, hash160_bytes)
    return "S" + C32_ALPHABET[version] + c32_encode(hash160_bytes + checksum)


def c32_address_decode(address: str) -> Tuple[int, bytes]:
    """
    Decode a c32check address into version and hash160.

    Raises:
        InvalidAddressError: If the address is malformed or the checksum fails
    """
    if not address or len(address) <= 5 or address[0] != "S":
        raise InvalidAddressError(f"Invalid address: {address!r}")

    normalized = c32_normalize(address[1:])
    version = C32_ALPHABET.find(normalized[0])
    if version < 0:
        raise InvalidAddressError(f"Invalid address version character in {address!r}")

    decoded = c32_decode(normalized[1:])
    hash160_bytes, checksum = decoded[:-4], decoded[-4:]
    if len(hash160_bytes) != ADDRESS_HASH_LENGTH:
        raise InvalidAddressError(f"Invalid address hash length in {address!r}")
    if checksum != c32_checksum(version, hash160_bytes):
        raise InvalidAddressError(f"Invalid address checksum: {address!r}")

    return version, hash160_bytes


def is_valid_address(address: str) -> bool:
    """Check whether a string is a well-formed c32check address."""
    try:
        c32_address_decode(address)
    except InvalidAddressError:
        return False
    return True
