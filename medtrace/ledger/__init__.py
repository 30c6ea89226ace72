"""
Provenance ledger for tracked items.

Components:
- block: construction of immutable custody records
- ledger: item registry enforcing the role-advancement state machine

Design principles:
- Append-only: blocks are never rewritten or removed
- Linked: each block names its predecessor's chain hash
- Total: precondition violations return result values, never raise
"""

from .block import create_block
from .ledger import DEFAULT_ROLES, NO_ITEM_STATUS, ProvenanceLedger

__all__ = [
    "create_block",
    "DEFAULT_ROLES",
    "NO_ITEM_STATUS",
    "ProvenanceLedger",
]
