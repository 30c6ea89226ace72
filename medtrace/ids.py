"""Opaque identifiers for items, blocks and chain links."""

from __future__ import annotations

from typing import NewType
from uuid import uuid4

ItemId = NewType("ItemId", str)
BlockId = NewType("BlockId", str)
ChainHash = NewType("ChainHash", str)

# previous_chain_hash of a genesis block
GENESIS_HASH = ChainHash("0")


def generate() -> str:
    return str(uuid4())


def new_item_id() -> ItemId:
    return ItemId(generate())


def new_block_id() -> BlockId:
    return BlockId(generate())


def new_chain_hash() -> ChainHash:
    return ChainHash(generate())
