from datetime import datetime, timezone

from medtrace.ids import GENESIS_HASH, ChainHash
from medtrace.ledger import create_block
from medtrace.models import BlockPayload


def _payload(role: str = "Manufacturer") -> BlockPayload:
    return BlockPayload(
        role=role,
        status_text="Created Paracetamol (B1)",
        item_name="Paracetamol",
        batch="B1",
        brand="Brand A",
        factory="Factory 1",
        production_date="2024-01-01",
    )


def test_genesis_block_defaults_to_sentinel() -> None:
    block = create_block(_payload())

    assert block.previous_chain_hash == GENESIS_HASH == "0"
    assert block.is_genesis
    assert block.id != block.chain_hash
    assert block.created_at.tzinfo is not None


def test_block_stores_payload_and_predecessor_verbatim() -> None:
    payload = _payload("Distributor")
    now = datetime(2024, 1, 2, tzinfo=timezone.utc)

    block = create_block(payload, ChainHash("abc"), now=now)

    assert block.payload is payload
    assert block.previous_chain_hash == "abc"
    assert not block.is_genesis
    assert block.created_at == now


def test_blocks_get_fresh_identifiers() -> None:
    blocks = [create_block(_payload()) for _ in range(50)]

    assert len({b.id for b in blocks}) == 50
    assert len({b.chain_hash for b in blocks}) == 50


def test_block_to_dict() -> None:
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    block = create_block(_payload(), now=now)

    data = block.to_dict()
    assert data["created_at"] == "2024-01-02T03:04:05+00:00"
    assert data["previous_chain_hash"] == "0"
    assert data["payload"]["status_text"] == "Created Paracetamol (B1)"
