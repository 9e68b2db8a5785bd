"""
Exceptions raised by the simulation core.

All errors derive from ValueError so callers that already guard
parameter handling with ``except ValueError`` keep working.
"""


class Turing2DError(ValueError):
    """Base class for simulator errors."""


class ConstructionError(Turing2DError):
    """Program parameters make initialization undefined (e.g. num_symbols < 2)."""


class RuleImportError(Turing2DError):
    """A supplied transition rule cannot be resolved into the table."""


class InvalidRecordError(Turing2DError):
    """An interchange record is missing required blocks or fields."""
