"""
Test the error model: codes, hierarchy and serialization.
"""

import pytest

from funai_transactions.runtime.errors import (
    AddressKeyMismatchError,
    DecodeError,
    ErrorCode,
    FunaiError,
    InvalidIdentifierError,
    MalformedLengthError,
    UnknownClarityTypeError,
    UnsupportedMultiSigError,
    ValidationError,
    ValueTooLongError,
    VerificationError,
)


@pytest.mark.parametrize("error,code,base", [
    (MalformedLengthError(), ErrorCode.MALFORMED_LENGTH, DecodeError),
    (UnknownClarityTypeError(0x42), ErrorCode.UNKNOWN_CLARITY_TYPE, DecodeError),
    (ValueTooLongError(35, 34, "memo"), ErrorCode.VALUE_TOO_LONG, ValidationError),
    (InvalidIdentifierError("1bad", "function name"), ErrorCode.INVALID_IDENTIFIER, ValidationError),
    (UnsupportedMultiSigError("infer"), ErrorCode.UNSUPPORTED_MULTISIG, FunaiError),
    (AddressKeyMismatchError(), ErrorCode.ADDRESS_KEY_MISMATCH, FunaiError),
    (VerificationError("bad"), ErrorCode.INVALID_SIGNATURE, FunaiError),
])
def test_codes_and_hierarchy(error, code, base):
    assert error.code == code
    assert isinstance(error, base)
    assert isinstance(error, FunaiError)


def test_str_includes_code_and_details():
    error = ValueTooLongError(35, 34, "memo")
    text = str(error)
    assert text.startswith("[VALUE_TOO_LONG] memo is 35 bytes")
    assert "maxLength" in text


def test_to_dict():
    cause = ValueError("boom")
    error = DecodeError("bad tag", details={"tag": 9}, cause=cause)
    assert error.to_dict() == {
        "code": ErrorCode.DECODE_ERROR.value,
        "message": "bad tag",
        "details": {"tag": 9},
        "cause": "boom",
    }


def test_unknown_clarity_type_keeps_id():
    assert UnknownClarityTypeError(0x42).type_id == 0x42
    assert "0x42" in str(UnknownClarityTypeError(0x42))
