"""Tracker configuration: role sequence, palette, form vocabularies, layout.

Configuration is read from a YAML mapping (``medtrace.yml``). Any key left
out falls back to the built-in defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .colors import DEFAULT_PALETTE
from .errors import ConfigError
from .graph import GraphLayout
from .ledger.ledger import DEFAULT_ROLES

CONFIG_FILENAME = "medtrace.yml"

DEFAULT_MEDICINE_NAMES = ("Paracetamol", "Amoxicillin", "Ibuprofen")
DEFAULT_BRANDS = ("Brand A", "Brand B", "Brand C")
DEFAULT_FACTORIES = ("Factory 1", "Factory 2", "Factory 3")


@dataclass(frozen=True)
class TrackerConfig:
    roles: tuple[str, ...] = DEFAULT_ROLES
    palette: tuple[str, ...] = DEFAULT_PALETTE
    medicine_names: tuple[str, ...] = DEFAULT_MEDICINE_NAMES
    brands: tuple[str, ...] = DEFAULT_BRANDS
    factories: tuple[str, ...] = DEFAULT_FACTORIES
    layout: GraphLayout = field(default_factory=GraphLayout)


DEFAULT_CONFIG = TrackerConfig()


def _string_list(data: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    if key not in data:
        return default
    raw = data[key]
    if not isinstance(raw, list):
        raise ConfigError(f"{key} must be a list")
    values = tuple(str(v).strip() for v in raw if v is not None and str(v).strip())
    if not values:
        raise ConfigError(f"{key} must not be empty")
    return values


def _layout(data: dict[str, Any]) -> GraphLayout:
    raw = data.get("layout")
    if raw is None:
        return GraphLayout()
    if not isinstance(raw, dict):
        raise ConfigError("layout must be a mapping")

    defaults = GraphLayout()
    values: dict[str, int] = {}
    for key in ("column_spacing", "row_spacing", "x_offset", "y_offset", "hash_prefix"):
        value = raw.get(key, getattr(defaults, key))
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"layout.{key} must be an integer")
        values[key] = value
    if values["hash_prefix"] <= 0:
        raise ConfigError("layout.hash_prefix must be positive")
    return GraphLayout(**values)


def parse_config(data: Any) -> TrackerConfig:
    """Build a TrackerConfig from parsed YAML."""
    if data is None:
        return DEFAULT_CONFIG
    if not isinstance(data, dict):
        raise ConfigError("config must be a mapping")

    roles = _string_list(data, "roles", DEFAULT_ROLES)
    if len(set(roles)) != len(roles):
        raise ConfigError("roles must be unique")

    return TrackerConfig(
        roles=roles,
        palette=_string_list(data, "palette", DEFAULT_PALETTE),
        medicine_names=_string_list(data, "medicine_names", DEFAULT_MEDICINE_NAMES),
        brands=_string_list(data, "brands", DEFAULT_BRANDS),
        factories=_string_list(data, "factories", DEFAULT_FACTORIES),
        layout=_layout(data),
    )


def load_config(path: Path) -> TrackerConfig:
    """Load configuration from a YAML file."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e
    return parse_config(data)


def find_config(start: Path) -> Path | None:
    """Find medtrace.yml by walking up from ``start``."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
