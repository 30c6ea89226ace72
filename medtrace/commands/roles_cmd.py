"""Roles command - show the custody sequence and item palette."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ..config import DEFAULT_CONFIG, TrackerConfig


def run_roles(config: TrackerConfig = DEFAULT_CONFIG, *, console: Console | None = None) -> int:
    console = console or Console()

    roles = Table(title="Custody roles")
    roles.add_column("Step", justify="right")
    roles.add_column("Role")
    roles.add_column("Applied by")
    for i, role in enumerate(config.roles):
        roles.add_row(str(i + 1), role, "create" if i == 0 else "advance")
    console.print(roles)

    palette = Table(title="Item colors")
    palette.add_column("Item index", justify="right")
    palette.add_column("Color")
    for i, color in enumerate(config.palette):
        palette.add_row(str(i), f"[{color}]■[/] {color}")
    console.print(palette)
    return 0
