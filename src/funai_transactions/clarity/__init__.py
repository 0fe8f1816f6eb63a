"""
Clarity value language: typed values and their consensus encoding.
"""

from .values import (
    BooleanCV,
    BufferCV,
    ClarityValue,
    ContractPrincipalCV,
    IntCV,
    ListCV,
    NoneCV,
    PrincipalCV,
    ResponseErrCV,
    ResponseOkCV,
    SomeCV,
    StandardPrincipalCV,
    StringAsciiCV,
    StringUtf8CV,
    TupleCV,
    UIntCV,
    bool_cv,
    buffer_cv,
    buffer_cv_from_string,
    contract_principal_cv,
    cv_to_string,
    cv_to_value,
    false_cv,
    int_cv,
    list_cv,
    none_cv,
    optional_cv,
    principal_cv,
    response_error_cv,
    response_ok_cv,
    some_cv,
    standard_principal_cv,
    string_ascii_cv,
    string_utf8_cv,
    true_cv,
    tuple_cv,
    uint_cv,
)
from .codec import MAX_VALUE_DEPTH, deserialize_cv, deserialize_cv_from, serialize_cv, serialize_cv_into

__all__ = [
    "BooleanCV",
    "BufferCV",
    "ClarityValue",
    "ContractPrincipalCV",
    "IntCV",
    "ListCV",
    "NoneCV",
    "PrincipalCV",
    "ResponseErrCV",
    "ResponseOkCV",
    "SomeCV",
    "StandardPrincipalCV",
    "StringAsciiCV",
    "StringUtf8CV",
    "TupleCV",
    "UIntCV",
    "bool_cv",
    "buffer_cv",
    "buffer_cv_from_string",
    "contract_principal_cv",
    "cv_to_string",
    "cv_to_value",
    "false_cv",
    "int_cv",
    "list_cv",
    "none_cv",
    "optional_cv",
    "principal_cv",
    "response_error_cv",
    "response_ok_cv",
    "some_cv",
    "standard_principal_cv",
    "string_ascii_cv",
    "string_utf8_cv",
    "true_cv",
    "tuple_cv",
    "uint_cv",
    "serialize_cv",
    "serialize_cv_into",
    "deserialize_cv",
    "deserialize_cv_from",
    "MAX_VALUE_DEPTH",
]
