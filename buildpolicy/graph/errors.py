from __future__ import annotations

from typing import Optional


class BuildPolicyError(Exception):
    """Base class for build-policy errors. Every subclass is fatal to the build."""

    def __init__(self, message: str, *, module: Optional[str] = None):
        super().__init__(message)
        self.module = module


class GraphTraversalError(BuildPolicyError):
    """Raised when the module list cannot be obtained from the graph."""


class CapabilityMismatchError(BuildPolicyError):
    """Raised when a module asserted capable does not expose the expected configuration surface."""


class DoubleEvaluationError(BuildPolicyError):
    """Raised when a module is evaluated, or processed by the override pass, more than once."""


class PolicyNotAppliedError(BuildPolicyError):
    """Raised when a deferred override never fired because its module was never evaluated."""


class ValidationError(BuildPolicyError):
    """Raised when a policy file or module definition fails validation."""


class NotFoundError(BuildPolicyError):
    """Raised when a requested module cannot be found."""
