"""Presentation-side state around a ledger.

The ledger knows nothing about which item a user is looking at. The session
holds that selection, which may point at an item that does not exist.
"""

from __future__ import annotations

from .config import DEFAULT_CONFIG, TrackerConfig
from .graph import LedgerGraph, derive_graph
from .ids import ItemId
from .ledger import ProvenanceLedger
from .models import AdvanceOutcome, AdvanceResult, Item, ItemDraft, ValidationFailure

COMPLETED_LABEL = "Completed or Select Medicine"


class TrackerSession:
    def __init__(self, ledger: ProvenanceLedger | None = None, config: TrackerConfig = DEFAULT_CONFIG):
        self.config = config
        self.ledger = ledger if ledger is not None else ProvenanceLedger(config.roles)
        self.selected_id: str | None = None

    def create(self, draft: ItemDraft) -> ItemId | ValidationFailure:
        """Create an item and select it."""
        result = self.ledger.create_item(draft)
        if not isinstance(result, ValidationFailure):
            self.selected_id = result
        return result

    def select(self, item_id: str | None) -> None:
        self.selected_id = item_id or None

    def selected_item(self) -> Item | None:
        return self.ledger.get(self.selected_id)

    def advance_selected(self) -> AdvanceResult:
        if self.selected_id is None:
            return AdvanceResult(AdvanceOutcome.UNKNOWN_ITEM, None)
        return self.ledger.advance(self.selected_id)

    def selected_status(self) -> str:
        return self.ledger.current_status(self.selected_id)

    def action_label(self) -> str:
        """Label for the advance button of the selected item."""
        role = self.ledger.next_role(self.selected_id)
        return f"Send to {role}" if role else COMPLETED_LABEL

    def graph(self) -> LedgerGraph:
        return derive_graph(
            self.ledger.snapshot(),
            layout=self.config.layout,
            palette=self.config.palette,
        )

    def vocabulary_check(self, draft: ItemDraft) -> list[str]:
        """Fields whose value is not one of the configured choices.

        Advisory only: the ledger accepts any non-blank value.
        """
        out = []
        if draft.name.strip() and draft.name.strip() not in self.config.medicine_names:
            out.append("name")
        if draft.brand.strip() and draft.brand.strip() not in self.config.brands:
            out.append("brand")
        if draft.factory.strip() and draft.factory.strip() not in self.config.factories:
            out.append("factory")
        return out
