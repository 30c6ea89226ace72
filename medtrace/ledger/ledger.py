"""
Append-only provenance ledger.

Owns the tracked items and their block chains. The only mutations are
creating an item (with its genesis block) and advancing an item to the next
role in the fixed role sequence.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from dataclasses import replace
from typing import Iterator, Sequence

from .. import ids
from ..ids import ItemId
from ..models import (
    AdvanceOutcome,
    AdvanceResult,
    BlockPayload,
    Item,
    ItemDraft,
    ValidationFailure,
)
from .block import create_block

logger = logging.getLogger(__name__)

DEFAULT_ROLES: tuple[str, ...] = ("Manufacturer", "Distributor", "Pharmacy", "Patient")

NO_ITEM_STATUS = "No medicine selected"


class ProvenanceLedger:
    """Registry of items, each with an append-only custody chain.

    Items keep insertion order. ``create_item`` and ``advance`` are serialized
    with a per-ledger lock so concurrent callers never interleave a
    read-modify-write of the same chain.
    """

    def __init__(self, roles: Sequence[str] = DEFAULT_ROLES):
        roles = tuple(str(r) for r in roles)
        if not roles:
            raise ValueError("roles must not be empty")
        self.roles = roles
        self._items: dict[ItemId, Item] = {}
        self._lock = threading.RLock()

    @property
    def role_count(self) -> int:
        return len(self.roles)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[Item]:
        return iter(self.snapshot())

    # --- Mutations ---

    def create_item(self, draft: ItemDraft) -> ItemId | ValidationFailure:
        """Register a new item with its genesis block.

        Returns the new item's id, or a ValidationFailure naming the blank
        fields (nothing is created in that case).
        """
        missing = draft.missing_fields()
        if missing:
            logger.info("Rejected item draft, missing fields: %s", ", ".join(missing))
            return ValidationFailure(missing=missing)

        clean = draft.trimmed()
        payload = BlockPayload(
            role=self.roles[0],
            status_text=f"Created {clean.name} ({clean.batch})",
            item_name=clean.name,
            batch=clean.batch,
            brand=clean.brand,
            factory=clean.factory,
            production_date=clean.production_date,
        )
        with self._lock:
            item = Item(
                id=ids.new_item_id(),
                name=clean.name,
                batch=clean.batch,
                brand=clean.brand,
                factory=clean.factory,
                production_date=clean.production_date,
                chain=[create_block(payload)],
                cursor=1,
            )
            self._items[item.id] = item

        logger.info("Created item %s: %s", item.id, item.display_name)
        return item.id

    def advance(self, item_id: str | None) -> AdvanceResult:
        """Append a block for the item's next role.

        Unknown and already-terminal items are left untouched and reported
        through the result's outcome.
        """
        with self._lock:
            item = self._items.get(item_id) if item_id is not None else None
            if item is None:
                logger.info("Advance ignored, unknown item %s", item_id)
                return AdvanceResult(AdvanceOutcome.UNKNOWN_ITEM, item_id)
            if item.is_terminal(self.role_count):
                logger.info("Advance ignored, item %s already terminal", item_id)
                return AdvanceResult(AdvanceOutcome.ALREADY_TERMINAL, item_id)

            # cursor counts completed roles, which is the index of the next role
            role = self.roles[item.cursor]
            last = item.last_block
            block = create_block(
                BlockPayload(
                    role=role,
                    status_text=f"{role} received {item.name} ({item.batch})",
                    item_name=item.name,
                    batch=item.batch,
                    brand=item.brand,
                    factory=item.factory,
                    production_date=item.production_date,
                ),
                last.chain_hash,
            )
            if block.created_at < last.created_at:
                block = replace(block, created_at=last.created_at)
            item.chain.append(block)
            item.cursor += 1

        logger.info("Advanced item %s to %s (%d/%d)", item.id, role, item.cursor, self.role_count)
        return AdvanceResult(AdvanceOutcome.ADVANCED, item.id, block)

    # --- Read accessors ---

    def get(self, item_id: str | None) -> Item | None:
        """Copy of the item, or None if unknown."""
        with self._lock:
            item = self._items.get(item_id) if item_id is not None else None
            return _copy_item(item) if item is not None else None

    def current_status(self, item_id: str | None) -> str:
        """Status text of the item's latest block."""
        with self._lock:
            item = self._items.get(item_id) if item_id is not None else None
            if item is None:
                return NO_ITEM_STATUS
            return item.status_text

    def next_role(self, item_id: str | None) -> str | None:
        """Role the next advance would apply, or None if it cannot advance."""
        with self._lock:
            item = self._items.get(item_id) if item_id is not None else None
            if item is None or item.is_terminal(self.role_count):
                return None
            return self.roles[item.cursor]

    def snapshot(self) -> tuple[Item, ...]:
        """Consistent, detached view of all items in insertion order."""
        with self._lock:
            return tuple(_copy_item(item) for item in self._items.values())

    # --- Summary methods ---

    def summary(self) -> dict:
        """Counts of items, blocks and blocks per role."""
        items = self.snapshot()
        role_counts = Counter(b.payload.role for item in items for b in item.chain)
        return {
            "total_items": len(items),
            "total_blocks": sum(len(item.chain) for item in items),
            "terminal_items": sum(1 for item in items if item.is_terminal(self.role_count)),
            "role_counts": {role: role_counts.get(role, 0) for role in self.roles},
        }

    def format_summary(self) -> str:
        """Format summary as markdown."""
        s = self.summary()
        if s["total_items"] == 0:
            return "No medicines created yet.\n"

        lines = [
            "# Provenance Ledger Summary",
            "",
            f"- Items: {s['total_items']}",
            f"- Blocks: {s['total_blocks']}",
            f"- Completed: {s['terminal_items']}",
            "",
            "| Role | Blocks |",
            "|------|-------:|",
        ]
        for role, count in s["role_counts"].items():
            lines.append(f"| {role} | {count} |")
        return "\n".join(lines) + "\n"


def _copy_item(item: Item) -> Item:
    return replace(item, chain=list(item.chain))
