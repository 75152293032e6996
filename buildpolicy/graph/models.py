from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Tuple

# Canonical module classification. This is the single source of truth for allowed `kind` values.
ModuleKind = Literal["application", "library", "plugin", "other"]
MODULE_KIND_VALUES: Tuple[str, ...] = ("application", "library", "plugin", "other")

EvaluationState = Literal["pending", "evaluated"]
STATE_PENDING: EvaluationState = "pending"
STATE_EVALUATED: EvaluationState = "evaluated"


def is_valid_module_kind(value: Any) -> bool:
    return str(value or "").strip() in MODULE_KIND_VALUES


@dataclass
class LintOptions:
    check_release_builds: bool = True
    abort_on_error: bool = True


@dataclass
class ModuleConfig:
    """Mutable configuration surface of a module, read by the downstream toolchain."""

    compile_sdk: Optional[int] = None
    lint: LintOptions = field(default_factory=LintOptions)

    def as_dict(self) -> dict:
        return {
            "compile_sdk": self.compile_sdk,
            "lint": {
                "check_release_builds": self.lint.check_release_builds,
                "abort_on_error": self.lint.abort_on_error,
            },
        }


@dataclass(frozen=True)
class EnforcedPolicy:
    """The single value every capable module ends up with."""

    target_version: int
    lint_fatal: bool


# Hard-coded policy used when no policy file is present.
DEFAULT_POLICY = EnforcedPolicy(target_version=36, lint_fatal=False)


@dataclass
class Module:
    """A unit in the build graph.

    `configure` is the module's own configuration step. It runs once, when the
    host graph evaluates the module, and may set any value on `config`.
    """

    name: str
    kind: ModuleKind = "other"
    config: ModuleConfig = field(default_factory=ModuleConfig)
    configure: Optional[Callable[["Module"], None]] = None
    state: EvaluationState = STATE_PENDING
    build_dir: Optional[Path] = None

    @property
    def is_evaluated(self) -> bool:
        return self.state == STATE_EVALUATED
