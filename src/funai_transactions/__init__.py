"""
Funai Transactions

Builds, serializes, signs and verifies Funai chain transactions: the
Clarity value codec, the consensus wire format, payloads including
inference tasks, post-conditions, single- and multi-sig authorization
with the chained sighash, and high-level transaction builders.
"""

# Core types and codecs
from .enums import *
from .runtime.errors import *
from .codec import *
from .wire import *
from .clarity import *

# Keys and signing
from .crypto import *
from .tx import *
from .signers import *

# Networks and node collaborators
from .network import (
    FUNAI_DEVNET,
    FUNAI_MAINNET,
    FUNAI_MOCKNET,
    FUNAI_TESTNET,
    FunaiNetwork,
    network_from,
    network_from_name,
)
from .client import FunaiNodeClient

# Builders
from .tx.builders import *

__version__ = "0.1.0"
