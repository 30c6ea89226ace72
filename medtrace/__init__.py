"""medtrace - provenance ledger for tracked medicines."""

__version__ = "0.1.0"
