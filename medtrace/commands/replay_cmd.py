"""Replay command - run a scenario of ledger operations and show the result.

Scenario format (YAML)::

    steps:
      - create: {name: Paracetamol, batch: B1, brand: Brand A,
                 factory: Factory 1, production_date: 2024-01-01}
        as: para
      - advance: {}            # advances the selected item
      - advance: {item: para, times: 2}
      - select: para
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

from ..colors import color_map
from ..config import DEFAULT_CONFIG, TrackerConfig
from ..errors import ScenarioError
from ..models import AdvanceOutcome, ItemDraft, ValidationFailure
from ..session import TrackerSession

OPERATIONS = ("create", "advance", "select")
STEP_KEYS = (*OPERATIONS, "as")
FORMATS = ("table", "json", "dot", "md")


@dataclass(frozen=True)
class Step:
    op: str
    args: dict[str, Any] = field(default_factory=dict)
    alias: str | None = None


@dataclass
class ReplayReport:
    session: TrackerSession
    rejected: list[str] = field(default_factory=list)


def parse_scenario(data: Any) -> list[Step]:
    if not isinstance(data, dict) or not isinstance(data.get("steps"), list):
        raise ScenarioError("scenario must be a mapping with a 'steps' list")

    steps: list[Step] = []
    for n, raw in enumerate(data["steps"], start=1):
        if not isinstance(raw, dict):
            raise ScenarioError(f"step {n}: must be a mapping")
        unknown = [str(k) for k in raw if k not in STEP_KEYS]
        if unknown:
            raise ScenarioError(f"step {n}: unknown keys: {', '.join(unknown)}")
        ops = [k for k in raw if k in OPERATIONS]
        if len(ops) != 1:
            raise ScenarioError(f"step {n}: expected exactly one of {', '.join(OPERATIONS)}")
        op = ops[0]
        value = raw[op]
        alias = raw.get("as")

        if op == "select":
            args = {"item": None if value is None else str(value)}
        elif value is None:
            args = {}
        elif isinstance(value, dict):
            args = dict(value)
        else:
            raise ScenarioError(f"step {n}: {op} arguments must be a mapping")

        if op == "create":
            for key, arg in args.items():
                # YAML reads unquoted 0012 as 10 and 1e3 as 1000.0
                if arg is not None and not isinstance(arg, (str, date)):
                    raise ScenarioError(
                        f"step {n}: create {key} must be text, quote the value ({key}: '{arg}')"
                    )
        elif op == "advance":
            times = args.get("times", 1)
            if isinstance(times, bool) or not isinstance(times, int) or times < 1:
                raise ScenarioError(f"step {n}: advance times must be a positive integer")
        steps.append(Step(op=op, args=args, alias=str(alias) if alias is not None else None))
    return steps


def load_scenario(path: Path) -> list[Step]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ScenarioError(f"{path}: invalid YAML: {e}") from e
    return parse_scenario(data)


def replay(steps: list[Step], config: TrackerConfig = DEFAULT_CONFIG) -> ReplayReport:
    """Apply steps to a fresh in-memory ledger."""
    report = ReplayReport(session=TrackerSession(config=config))
    session = report.session
    aliases: dict[str, str] = {}

    def resolve(ref: str | None) -> str | None:
        if ref is None:
            return None
        return aliases.get(ref, ref)

    for n, step in enumerate(steps, start=1):
        if step.op == "create":
            result = session.create(ItemDraft.from_dict(step.args))
            if isinstance(result, ValidationFailure):
                report.rejected.append(f"step {n}: create rejected, {result.message}")
            elif step.alias:
                aliases[step.alias] = result
        elif step.op == "select":
            session.select(resolve(step.args.get("item")))
        else:
            item_ref = step.args.get("item")
            if item_ref is not None:
                session.select(resolve(str(item_ref)))
            for _ in range(step.args.get("times", 1)):
                result = session.advance_selected()
                if result.outcome is not AdvanceOutcome.ADVANCED:
                    report.rejected.append(f"step {n}: advance not applied ({result.outcome.value})")
                    break
    return report


def run_replay(
    script: Path,
    *,
    config: TrackerConfig = DEFAULT_CONFIG,
    fmt: str = "table",
    out: Path | None = None,
    strict: bool = False,
) -> int:
    """Replay a scenario file and print the ledger, graph or summary."""
    console = Console(stderr=True)

    if fmt not in FORMATS:
        raise ValueError(f"fmt must be one of: {', '.join(FORMATS)}")

    report = replay(load_scenario(script), config)
    session = report.session
    for message in report.rejected:
        console.print(f"⚠ {message}", style="yellow")

    if fmt == "table":
        if out:
            rich_console = Console(record=True, width=300)
            _print_rich(session, console=rich_console)
            out.write_text(rich_console.export_text(), encoding="utf-8")
            console.print(f"Wrote ledger output to {out}", style="green")
        else:
            _print_rich(session, console=Console())
    else:
        text: str
        if fmt == "json":
            payload = {
                "roles": list(session.ledger.roles),
                "items": [item.to_dict() for item in session.ledger.snapshot()],
                "selected": session.selected_id,
                "status": session.selected_status(),
                "graph": session.graph().to_dict(),
            }
            text = json.dumps(payload, indent=2) + "\n"
        elif fmt == "dot":
            text = session.graph().to_dot()
        else:
            text = session.ledger.format_summary()

        if out:
            out.write_text(text, encoding="utf-8")
            console.print(f"Wrote ledger output to {out}", style="green")
        else:
            print(text, end="" if text.endswith("\n") else "\n")

    if strict and report.rejected:
        return 1
    return 0


def _print_rich(session: TrackerSession, *, console: Console) -> None:
    items = session.ledger.snapshot()
    if not items:
        console.print("No medicines created yet.", style="dim")
    colors = color_map(items, session.config.palette)
    for item in items:
        table = Table(
            title=f"● {item.display_name}",
            title_justify="left",
            title_style=f"bold {colors[item.id]}",
        )
        for col in ("#", "Timestamp", "Role", "Status", "Brand", "Factory",
                    "Production Date", "Hash", "Previous Hash"):
            table.add_column(col)
        for idx, block in enumerate(item.chain, start=1):
            p = block.payload
            table.add_row(
                str(idx),
                block.created_at.isoformat(),
                p.role,
                p.status_text,
                p.brand,
                p.factory,
                p.production_date,
                block.chain_hash,
                block.previous_chain_hash,
            )
        console.print(table)

    console.print(f"[bold]Status:[/] {session.selected_status()}")
    console.print(f"[bold]Next:[/] {session.action_label()}", style="dim")
