from __future__ import annotations

from .applier import apply_override
from .capability import CAPABLE_KINDS, has_capability
from .orchestrator import (
    ModuleOutcome,
    OverrideOrchestrator,
    OverrideReport,
    enforce_policy,
    run_build,
)

__all__ = [
    "apply_override",
    "CAPABLE_KINDS",
    "has_capability",
    "ModuleOutcome",
    "OverrideOrchestrator",
    "OverrideReport",
    "enforce_policy",
    "run_build",
]
