"""
HTTP collaborators for fee estimation and nonce lookup.
"""

from .node import FunaiNodeClient

__all__ = ["FunaiNodeClient"]
