"""Pytest configuration and fixtures."""

import pytest

from medtrace.ledger import ProvenanceLedger
from medtrace.models import ItemDraft


@pytest.fixture
def ledger() -> ProvenanceLedger:
    """Empty ledger with the default role sequence."""
    return ProvenanceLedger()


@pytest.fixture
def draft() -> ItemDraft:
    return ItemDraft(
        name="Paracetamol",
        batch="B1",
        brand="Brand A",
        factory="Factory 1",
        production_date="2024-01-01",
    )


@pytest.fixture
def other_draft() -> ItemDraft:
    return ItemDraft(
        name="Ibuprofen",
        batch="B7",
        brand="Brand C",
        factory="Factory 2",
        production_date="2024-03-15",
    )
