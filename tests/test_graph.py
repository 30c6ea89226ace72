from dataclasses import replace

from medtrace.colors import DEFAULT_PALETTE
from medtrace.graph import GraphLayout, derive_graph
from medtrace.ids import ChainHash
from medtrace.ledger import ProvenanceLedger
from medtrace.models import ItemDraft


def _two_items_advanced_twice(ledger: ProvenanceLedger, draft: ItemDraft, other_draft: ItemDraft):
    a = ledger.create_item(draft)
    b = ledger.create_item(other_draft)
    for item_id in (a, b):
        ledger.advance(item_id)
        ledger.advance(item_id)
    return a, b


def test_graph_has_node_per_block_and_link_per_successor(
    ledger: ProvenanceLedger, draft: ItemDraft, other_draft: ItemDraft
) -> None:
    a, b = _two_items_advanced_twice(ledger, draft, other_draft)

    graph = derive_graph(ledger.snapshot())

    assert len(graph.nodes) == 6
    assert len(graph.links) == 4
    colors = {}
    for node in graph.nodes:
        colors.setdefault(node.item_id, set()).add(node.color)
    assert colors == {a: {DEFAULT_PALETTE[0]}, b: {DEFAULT_PALETTE[1]}}


def test_nodes_keyed_by_chain_hash_and_linked_in_chain_order(ledger: ProvenanceLedger, draft: ItemDraft) -> None:
    item_id = ledger.create_item(draft)
    ledger.advance(item_id)
    item = ledger.get(item_id)

    graph = derive_graph(ledger.snapshot())

    assert [n.id for n in graph.nodes] == [b.chain_hash for b in item.chain]
    assert graph.links[0].source == item.chain[0].chain_hash
    assert graph.links[0].target == item.chain[1].chain_hash


def test_node_label_and_positions(ledger: ProvenanceLedger, draft: ItemDraft, other_draft: ItemDraft) -> None:
    _two_items_advanced_twice(ledger, draft, other_draft)

    graph = derive_graph(ledger.snapshot())

    second_item_third_block = graph.nodes[5]
    assert (second_item_third_block.x, second_item_third_block.y) == (200, 140)
    assert second_item_third_block.index == 3
    role, name, prefix = second_item_third_block.label.split("\n")
    assert role == "Pharmacy"
    assert name == "Ibuprofen (B7)"
    assert prefix == second_item_third_block.id[:6]
    assert graph.nodes[0].x == 100 and graph.nodes[0].y == 100


def test_custom_layout() -> None:
    layout = GraphLayout(column_spacing=10, row_spacing=20, x_offset=0, y_offset=5, hash_prefix=3)
    assert layout.position(2, 3) == (30, 45)


def test_derivation_is_deterministic(ledger: ProvenanceLedger, draft: ItemDraft, other_draft: ItemDraft) -> None:
    _two_items_advanced_twice(ledger, draft, other_draft)
    snap = ledger.snapshot()

    assert derive_graph(snap) == derive_graph(snap)
    assert derive_graph(snap).to_dict() == derive_graph(ledger.snapshot()).to_dict()


def test_empty_ledger_gives_empty_graph() -> None:
    graph = derive_graph(())
    assert graph.nodes == ()
    assert graph.links == ()
    assert graph.to_dict() == {"nodes": [], "links": []}


def test_dangling_predecessor_link_is_omitted(ledger: ProvenanceLedger, draft: ItemDraft) -> None:
    item_id = ledger.create_item(draft)
    ledger.advance(item_id)
    ledger.advance(item_id)
    item = ledger.get(item_id)
    broken = replace(item.chain[2], previous_chain_hash=ChainHash("missing"))
    item = replace(item, chain=[item.chain[0], item.chain[1], broken])

    graph = derive_graph([item])

    assert len(graph.nodes) == 3
    assert len(graph.links) == 1
    assert graph.links[0].target == item.chain[1].chain_hash


def test_to_dict_pins_positions(ledger: ProvenanceLedger, draft: ItemDraft) -> None:
    ledger.create_item(draft)

    node = derive_graph(ledger.snapshot()).to_dict()["nodes"][0]
    assert node["fx"] == node["x"] == 100
    assert node["fy"] == node["y"] == 100
    assert node["medicineName"] == "Paracetamol"


def test_to_dot_includes_nodes_and_edges(ledger: ProvenanceLedger, draft: ItemDraft) -> None:
    item_id = ledger.create_item(draft)
    ledger.advance(item_id)
    graph = derive_graph(ledger.snapshot())

    dot = graph.to_dot(title="Test")
    assert dot.startswith("digraph ledger {")
    assert 'label="Test"' in dot
    assert f'"{graph.links[0].source}" -> "{graph.links[0].target}"' in dot
    assert 'pos="150,100!"' in dot
    assert "Distributor\\nParacetamol (B1)" in dot
