"""
Data model for the provenance ledger.

Blocks are immutable custody records. Items own an append-only chain of
blocks and a cursor counting the roles completed so far.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum

from .ids import GENESIS_HASH, BlockId, ChainHash, ItemId

# Attributes a draft must carry, in form order
DRAFT_FIELDS = ("name", "batch", "brand", "factory", "production_date")


@dataclass(frozen=True)
class BlockPayload:
    """What a custody record says happened."""

    role: str
    status_text: str
    item_name: str
    batch: str
    brand: str
    factory: str
    production_date: str

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class Block:
    """A single custody record in an item's chain.

    ``chain_hash`` is the link target for the next block. It is an opaque
    identifier, not a digest of the block's content.
    """

    id: BlockId
    created_at: datetime
    payload: BlockPayload
    chain_hash: ChainHash
    previous_chain_hash: ChainHash = GENESIS_HASH

    @property
    def is_genesis(self) -> bool:
        return self.previous_chain_hash == GENESIS_HASH

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "payload": self.payload.to_dict(),
            "chain_hash": self.chain_hash,
            "previous_chain_hash": self.previous_chain_hash,
        }


@dataclass(frozen=True)
class ItemDraft:
    """User-entered attributes for a new item."""

    name: str = ""
    batch: str = ""
    brand: str = ""
    factory: str = ""
    production_date: str = ""

    def missing_fields(self) -> tuple[str, ...]:
        """Fields that are empty after trimming whitespace."""
        return tuple(name for name in DRAFT_FIELDS if not str(getattr(self, name) or "").strip())

    def trimmed(self) -> "ItemDraft":
        return ItemDraft(**{name: str(getattr(self, name)).strip() for name in DRAFT_FIELDS})

    @classmethod
    def from_dict(cls, data: dict) -> "ItemDraft":
        """Build a draft from a mapping; accepts ``productionDate`` as an alias."""
        values = dict(data)
        if "production_date" not in values and "productionDate" in values:
            values["production_date"] = values["productionDate"]
        out = {}
        for name in DRAFT_FIELDS:
            value = values.get(name)
            out[name] = "" if value is None else str(value)
        return cls(**out)


@dataclass
class Item:
    """A tracked medicine and its custody chain.

    Only the ledger appends to ``chain`` and moves ``cursor``;
    ``len(chain) == cursor`` always holds.
    """

    id: ItemId
    name: str
    batch: str
    brand: str
    factory: str
    production_date: str
    chain: list[Block] = field(default_factory=list)
    cursor: int = 1

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.batch})"

    @property
    def last_block(self) -> Block:
        return self.chain[-1]

    @property
    def status_text(self) -> str:
        return self.last_block.payload.status_text

    def is_terminal(self, role_count: int) -> bool:
        return self.cursor >= role_count

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "batch": self.batch,
            "brand": self.brand,
            "factory": self.factory,
            "production_date": self.production_date,
            "cursor": self.cursor,
            "chain": [b.to_dict() for b in self.chain],
        }


@dataclass(frozen=True)
class ValidationFailure:
    """create_item was called with blank required fields."""

    missing: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"missing required fields: {', '.join(self.missing)}"


class AdvanceOutcome(str, Enum):
    """Outcome of advancing an item to its next role."""

    ADVANCED = "advanced"
    UNKNOWN_ITEM = "unknown_item"
    ALREADY_TERMINAL = "already_terminal"


@dataclass(frozen=True)
class AdvanceResult:
    outcome: AdvanceOutcome
    item_id: str | None
    block: Block | None = None

    @property
    def advanced(self) -> bool:
        return self.outcome is AdvanceOutcome.ADVANCED

    def __bool__(self) -> bool:
        return self.advanced
