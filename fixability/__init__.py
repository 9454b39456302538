"""Fixability: heuristic triage of open issues by how actionable they are."""

__version__ = "0.1.0"
