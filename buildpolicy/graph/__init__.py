from __future__ import annotations

from .models import (
    DEFAULT_POLICY,
    MODULE_KIND_VALUES,
    EnforcedPolicy,
    LintOptions,
    Module,
    ModuleConfig,
    ModuleKind,
    is_valid_module_kind,
)

from .errors import (
    BuildPolicyError,
    CapabilityMismatchError,
    DoubleEvaluationError,
    GraphTraversalError,
    NotFoundError,
    PolicyNotAppliedError,
    ValidationError,
)

from .contracts import (
    CapabilityProbe,
    ModuleRegistry,
    OverrideApplier,
)

from .gate import EvaluationGate
from .project import GraphModuleRegistry, ProjectGraph

__all__ = [
    "DEFAULT_POLICY",
    "MODULE_KIND_VALUES",
    "EnforcedPolicy",
    "LintOptions",
    "Module",
    "ModuleConfig",
    "ModuleKind",
    "is_valid_module_kind",
    "BuildPolicyError",
    "CapabilityMismatchError",
    "DoubleEvaluationError",
    "GraphTraversalError",
    "NotFoundError",
    "PolicyNotAppliedError",
    "ValidationError",
    "CapabilityProbe",
    "ModuleRegistry",
    "OverrideApplier",
    "EvaluationGate",
    "GraphModuleRegistry",
    "ProjectGraph",
]
