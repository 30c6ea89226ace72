"""Stable display colors for items."""

from __future__ import annotations

from typing import Sequence

from .models import Item

DEFAULT_PALETTE: tuple[str, ...] = ("#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd")


def color_for(index: int, palette: Sequence[str] = DEFAULT_PALETTE) -> str:
    """Color for the item at creation-order position ``index``.

    Depends only on ``index`` and the palette, so an item's color never
    changes as more items are added.
    """
    if not palette:
        raise ValueError("palette must not be empty")
    if index < 0:
        raise ValueError(f"item index must be non-negative, got {index}")
    return palette[index % len(palette)]


def color_map(items: Sequence[Item], palette: Sequence[str] = DEFAULT_PALETTE) -> dict[str, str]:
    """Map item id -> color for items in creation order."""
    return {item.id: color_for(i, palette) for i, item in enumerate(items)}
