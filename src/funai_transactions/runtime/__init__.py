"""Runtime helpers for the Funai transaction engine"""

from .errors import (
    ErrorCode,
    FunaiError,
    DecodeError,
    MalformedLengthError,
    UnknownClarityTypeError,
    ValidationError,
    InvalidValueError,
    ValueTooLongError,
    InvalidIdentifierError,
    InvalidAddressError,
    UnsupportedMultiSigError,
    AddressKeyMismatchError,
    SigningError,
    VerificationError,
    NoEstimateAvailableError,
)

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
