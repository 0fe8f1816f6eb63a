"""
Test bootstrap:
- Make the ``helpers`` package importable from every test directory
- Provide fixed secp256k1 keys and collaborator doubles
"""
import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from helpers import KEY_ONE, KEY_THREE, KEY_TWO  # noqa: E402

from funai_transactions.crypto.secp256k1 import Secp256k1PrivateKey  # noqa: E402


@pytest.fixture
def key_one():
    return Secp256k1PrivateKey.parse(KEY_ONE)


@pytest.fixture
def key_two():
    return Secp256k1PrivateKey.parse(KEY_TWO)


@pytest.fixture
def key_three():
    return Secp256k1PrivateKey.parse(KEY_THREE)


@pytest.fixture
def no_network():
    """Collaborators that fail the test if a builder reaches for them."""

    def estimator(length, payload):
        raise AssertionError("fee estimator should not be called")

    def lookup(address):
        raise AssertionError("nonce lookup should not be called")

    return estimator, lookup
