"""Pipeline module - orchestrates end-to-end document comparison."""
from pipeline.document_kind import DocumentInput, DocumentKind, detect_kind
from pipeline.orchestrator import (
    ComparisonConfig,
    ComparisonOrchestrator,
    HighlightMode,
    OrchestratorState,
)

__all__ = [
    "ComparisonConfig",
    "ComparisonOrchestrator",
    "DocumentInput",
    "DocumentKind",
    "HighlightMode",
    "OrchestratorState",
    "detect_kind",
]
