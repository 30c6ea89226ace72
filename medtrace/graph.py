"""Traversal graph derived from the ledger.

The graph is recomputed from a full ledger snapshot every time; nothing is
cached between calls, so it can never drift from ledger state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .colors import DEFAULT_PALETTE, color_for
from .models import Item

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphLayout:
    """Fixed grid: one row per item, one column per block."""

    column_spacing: int = 50
    row_spacing: int = 40
    x_offset: int = 100
    y_offset: int = 100
    hash_prefix: int = 6

    def position(self, item_index: int, block_index: int) -> tuple[int, int]:
        return (
            self.column_spacing * block_index + self.x_offset,
            self.row_spacing * item_index + self.y_offset,
        )


@dataclass(frozen=True)
class GraphNode:
    id: str  # chain hash of the block
    label: str
    item_id: str
    item_name: str
    index: int  # 1-based position in the chain
    x: int
    y: int
    color: str

    def to_dict(self) -> dict:
        # fx/fy pin the node so force layouts keep the grid
        return {
            "id": self.id,
            "label": self.label,
            "itemId": self.item_id,
            "medicineName": self.item_name,
            "index": self.index,
            "x": self.x,
            "y": self.y,
            "fx": self.x,
            "fy": self.y,
            "color": self.color,
        }


@dataclass(frozen=True)
class GraphLink:
    source: str
    target: str

    def to_dict(self) -> dict:
        return {"source": self.source, "target": self.target}


@dataclass(frozen=True)
class LedgerGraph:
    nodes: tuple[GraphNode, ...] = field(default_factory=tuple)
    links: tuple[GraphLink, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }

    def to_dot(self, *, title: str = "Provenance graph") -> str:
        """Graphviz DOT with pinned positions (render with ``neato -n``)."""

        def esc(s: str) -> str:
            return s.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")

        lines = [
            "digraph ledger {",
            f'  label="{esc(title)}";',
            "  labelloc=t;",
            '  graph [fontname="Helvetica"];',
            '  node [fontname="Helvetica", fontsize=10, shape=circle, style=filled, fontcolor="#000000"];',
            '  edge [color="#3a4154", penwidth=0.8];',
        ]
        for n in self.nodes:
            lines.append(
                f'  "{esc(n.id)}" [label="{esc(n.label)}"; fillcolor="{esc(n.color)}"; pos="{n.x},{n.y}!"];'
            )
        for link in self.links:
            lines.append(f'  "{esc(link.source)}" -> "{esc(link.target)}";')
        lines.append("}")
        return "\n".join(lines) + "\n"


def node_label(role: str, item: Item, chain_hash: str, *, hash_prefix: int = 6) -> str:
    return f"{role}\n{item.display_name}\n{chain_hash[:hash_prefix]}"


def derive_graph(
    items: Sequence[Item],
    *,
    layout: GraphLayout | None = None,
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> LedgerGraph:
    """Build one node per block and one link per non-genesis block.

    Nodes are keyed by chain hash so links resolve with the same key blocks
    use for linkage. A link whose predecessor is not among the nodes is
    dropped; the rest of the graph is still returned.
    """
    layout = layout or GraphLayout()

    nodes: list[GraphNode] = []
    for item_index, item in enumerate(items):
        color = color_for(item_index, palette)
        for block_index, block in enumerate(item.chain):
            x, y = layout.position(item_index, block_index)
            nodes.append(
                GraphNode(
                    id=block.chain_hash,
                    label=node_label(
                        block.payload.role, item, block.chain_hash, hash_prefix=layout.hash_prefix
                    ),
                    item_id=item.id,
                    item_name=item.name,
                    index=block_index + 1,
                    x=x,
                    y=y,
                    color=color,
                )
            )

    known = {n.id for n in nodes}
    links: list[GraphLink] = []
    for item in items:
        for block in item.chain:
            if block.is_genesis:
                continue
            if block.previous_chain_hash not in known:
                logger.debug(
                    "Dropping link to %s: predecessor %s not found",
                    block.chain_hash,
                    block.previous_chain_hash,
                )
                continue
            links.append(GraphLink(source=block.previous_chain_hash, target=block.chain_hash))

    return LedgerGraph(nodes=tuple(nodes), links=tuple(links))
