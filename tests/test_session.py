from dataclasses import replace

from medtrace.config import TrackerConfig
from medtrace.ledger import NO_ITEM_STATUS
from medtrace.models import AdvanceOutcome, ItemDraft, ValidationFailure
from medtrace.session import COMPLETED_LABEL, TrackerSession


def test_create_selects_new_item(draft: ItemDraft) -> None:
    session = TrackerSession()

    item_id = session.create(draft)

    assert session.selected_id == item_id
    assert session.selected_status() == "Created Paracetamol (B1)"
    assert session.action_label() == "Send to Distributor"


def test_failed_create_keeps_selection(draft: ItemDraft) -> None:
    session = TrackerSession()
    item_id = session.create(draft)

    result = session.create(replace(draft, factory=""))

    assert isinstance(result, ValidationFailure)
    assert session.selected_id == item_id
    assert len(session.ledger) == 1


def test_advance_selected_until_complete(draft: ItemDraft) -> None:
    session = TrackerSession()
    session.create(draft)

    outcomes = [session.advance_selected().outcome for _ in range(4)]

    assert outcomes == [AdvanceOutcome.ADVANCED] * 3 + [AdvanceOutcome.ALREADY_TERMINAL]
    assert session.selected_status() == "Patient received Paracetamol (B1)"
    assert session.action_label() == COMPLETED_LABEL


def test_no_selection(draft: ItemDraft) -> None:
    session = TrackerSession()
    session.create(draft)
    session.select("")

    assert session.selected_id is None
    assert session.selected_item() is None
    assert session.advance_selected().outcome is AdvanceOutcome.UNKNOWN_ITEM
    assert session.selected_status() == NO_ITEM_STATUS
    assert session.action_label() == COMPLETED_LABEL


def test_dangling_selection_is_tolerated(draft: ItemDraft) -> None:
    session = TrackerSession()
    session.create(draft)
    session.select("gone")

    assert session.selected_item() is None
    assert session.selected_status() == NO_ITEM_STATUS
    assert session.advance_selected().outcome is AdvanceOutcome.UNKNOWN_ITEM


def test_graph_uses_config(draft: ItemDraft) -> None:
    config = TrackerConfig(roles=("Maker", "Buyer"), palette=("red",))
    session = TrackerSession(config=config)
    session.create(draft)
    session.advance_selected()

    graph = session.graph()
    assert [n.color for n in graph.nodes] == ["red", "red"]
    assert graph.nodes[1].label.startswith("Buyer\n")


def test_vocabulary_check(draft: ItemDraft) -> None:
    session = TrackerSession()
    assert session.vocabulary_check(draft) == []
    assert session.vocabulary_check(replace(draft, name="Aspirin", brand="Brand Z")) == ["name", "brand"]
