"""Construction of custody records."""

from __future__ import annotations

from datetime import datetime, timezone

from .. import ids
from ..ids import GENESIS_HASH, ChainHash
from ..models import Block, BlockPayload


def create_block(
    payload: BlockPayload,
    previous_chain_hash: ChainHash = GENESIS_HASH,
    *,
    now: datetime | None = None,
) -> Block:
    """Create a block linked to ``previous_chain_hash``.

    The payload is stored as given; callers validate it.
    """
    return Block(
        id=ids.new_block_id(),
        created_at=now or datetime.now(timezone.utc),
        payload=payload,
        chain_hash=ids.new_chain_hash(),
        previous_chain_hash=previous_chain_hash,
    )
