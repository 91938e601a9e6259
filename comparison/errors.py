"""Error taxonomy for document comparison failures.

Every error carries a human-readable message that the orchestrator keeps
verbatim when it moves to the failed state.
"""
from __future__ import annotations


class ComparisonError(Exception):
    """Base class for all comparison failures."""


class MissingDocument(ComparisonError):
    """One or both document inputs were not supplied."""


class KindMismatch(ComparisonError):
    """The two documents do not belong to the same comparable category."""


class UnsupportedKind(ComparisonError):
    """The document is neither text-like nor image-like."""


class DependencyNotReady(ComparisonError):
    """An external decoding capability is still initializing."""


class DependencyUnavailable(ComparisonError):
    """An external decoding capability failed to initialize."""


class DecodeFailure(ComparisonError):
    """Document bytes are malformed or unreadable."""


class IncomparableDimensions(ComparisonError):
    """Image sizes cannot be reconciled under the active dimension policy."""


class StaleResult(ComparisonError):
    """A comparison finished after it was superseded by reset() or a newer comparison."""
