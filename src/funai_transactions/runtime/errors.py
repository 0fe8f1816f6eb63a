"""
Funai Transaction Error Model

This module provides the error handling framework for the transaction engine.
Every error raised by the codecs, builders and signers derives from
``FunaiError`` and carries a stable ``ErrorCode``.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes for the transaction engine."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Decoding errors (100-199)
    DECODE_ERROR = 100
    MALFORMED_LENGTH = 101
    UNKNOWN_CLARITY_TYPE = 102
    UNKNOWN_WIRE_TYPE = 103

    # Construction errors (200-299)
    INVALID_VALUE = 200
    VALUE_TOO_LONG = 201
    INVALID_IDENTIFIER = 202
    INVALID_ADDRESS = 203
    INVALID_HASH_MODE = 204

    # Capability errors (300-399)
    UNSUPPORTED_MULTISIG = 300
    UNSUPPORTED_PAYLOAD = 301

    # Signing errors (400-499)
    SIGNING_ERROR = 400
    ADDRESS_KEY_MISMATCH = 401
    INVALID_SIGNATURE = 402
    DUPLICATE_SIGNER = 403
    TOO_MANY_SIGNATURES = 404

    # Collaborator errors (500-599)
    NO_ESTIMATE_AVAILABLE = 500


class FunaiError(Exception):
    """
    Base class for all transaction engine errors.

    Provides structured error information: a message, a code, optional
    details and the underlying cause.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a Funai error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class DecodeError(FunaiError):
    """Structural errors found while decoding bytes."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.DECODE_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class MalformedLengthError(DecodeError):
    """A declared length runs past the end of the buffer."""

    def __init__(self, message: str = "Declared length exceeds remaining buffer",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.MALFORMED_LENGTH, details, cause)


class UnknownClarityTypeError(DecodeError):
    """A Clarity type tag that is not part of the value language."""

    def __init__(self, type_id: int, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Unknown Clarity type id: 0x{type_id:02x}",
                         ErrorCode.UNKNOWN_CLARITY_TYPE, details)
        self.type_id = type_id


class ValidationError(FunaiError):
    """Construction-time validation errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_VALUE,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class InvalidValueError(ValidationError):
    """A value outside the range its wire slot can carry."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_VALUE, details, cause)


class ValueTooLongError(ValidationError):
    """Content exceeds the declared maximum byte length."""

    def __init__(self, length: int, max_length: int, what: str = "value"):
        super().__init__(
            f"{what} is {length} bytes, exceeds maximum of {max_length}",
            ErrorCode.VALUE_TOO_LONG,
            {"length": length, "maxLength": max_length},
        )
        self.length = length
        self.max_length = max_length


class InvalidIdentifierError(ValidationError):
    """A contract, function, asset or tuple-key name the chain rejects."""

    def __init__(self, name: str, kind: str = "identifier"):
        super().__init__(f"Invalid {kind}: {name!r}", ErrorCode.INVALID_IDENTIFIER, {"name": name})
        self.name = name


class InvalidAddressError(ValidationError):
    """A c32 address that fails to decode or checksum."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_ADDRESS, details, cause)


class UnsupportedMultiSigError(FunaiError):
    """Multi-sig authorization requested for a payload that has no multi-sig path."""

    def __init__(self, payload_kind: str):
        super().__init__(f"Multi-sig {payload_kind} transactions are not supported",
                         ErrorCode.UNSUPPORTED_MULTISIG, {"payload": payload_kind})


class AddressKeyMismatchError(FunaiError):
    """Neither the given nor the sorted key order reproduces the multi-sig address."""

    def __init__(self, message: str = "Failed to find matching multi-sig address given public keys",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.ADDRESS_KEY_MISMATCH, details)


class SigningError(FunaiError):
    """Invalid signing-protocol transition."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.SIGNING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class VerificationError(FunaiError):
    """A spending condition whose signatures do not check out."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_SIGNATURE, details, cause)


class NoEstimateAvailableError(FunaiError):
    """The node cannot estimate a fee for this transaction."""

    def __init__(self, message: str = "No fee estimate available",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.NO_ESTIMATE_AVAILABLE, details)


__all__ = [
    "ErrorCode",
    "FunaiError",
    "DecodeError",
    "MalformedLengthError",
    "UnknownClarityTypeError",
    "ValidationError",
    "InvalidValueError",
    "ValueTooLongError",
    "InvalidIdentifierError",
    "InvalidAddressError",
    "UnsupportedMultiSigError",
    "AddressKeyMismatchError",
    "SigningError",
    "VerificationError",
    "NoEstimateAvailableError",
]
