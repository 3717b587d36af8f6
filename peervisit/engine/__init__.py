"""Save workflows."""

from .orchestrator import SaveOutcome, VisitOrchestrator

__all__ = [
    "SaveOutcome",
    "VisitOrchestrator",
]
