"""Errors raised while loading configuration and scenarios.

Ledger operations never raise for precondition violations; they return
result values (see ``medtrace.models``).
"""


class ConfigError(ValueError):
    """Configuration file is malformed."""


class ScenarioError(ValueError):
    """Replay scenario is malformed."""
