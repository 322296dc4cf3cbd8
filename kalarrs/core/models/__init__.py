"""
Domain models: Pydantic types for kalarrs.

All models are re-exported here for convenient access:

    from kalarrs.core.models import DependencySpec, VerificationReport, Settings
"""

from kalarrs.core.models.dependency import (
    Classifier,
    CustomPredicate,
    DefaultHeuristic,
    DependencySpec,
    ExecutionResult,
    Outcome,
    Platform,
    ReportStatus,
    TreatAsInstalled,
    VerificationReport,
    looks_like_command_not_found,
)
from kalarrs.core.models.settings import EngineConfig, Settings

__all__ = [
    # dependency.py
    "Classifier",
    "CustomPredicate",
    "DefaultHeuristic",
    "DependencySpec",
    # settings.py
    "EngineConfig",
    "ExecutionResult",
    "Outcome",
    "Platform",
    "ReportStatus",
    "Settings",
    "TreatAsInstalled",
    "VerificationReport",
    "looks_like_command_not_found",
]
