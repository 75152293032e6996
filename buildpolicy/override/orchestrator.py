from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Set

from ..graph.contracts import CapabilityProbe, ModuleRegistry, OverrideApplier
from ..graph.errors import DoubleEvaluationError, PolicyNotAppliedError
from ..graph.gate import EvaluationGate
from ..graph.models import EnforcedPolicy, Module
from ..graph.project import GraphModuleRegistry, ProjectGraph
from .applier import apply_override
from .capability import has_capability

log = logging.getLogger("buildpolicy.orchestrator")

OutcomeAction = Literal["pending", "applied", "skipped"]


@dataclass
class ModuleOutcome:
    module: str
    deferred: bool = False
    action: OutcomeAction = "pending"

    def as_dict(self) -> Dict[str, object]:
        return {"module": self.module, "deferred": self.deferred, "action": self.action}


@dataclass
class OverrideReport:
    policy: EnforcedPolicy
    outcomes: Dict[str, ModuleOutcome] = field(default_factory=dict)

    def by_action(self, action: OutcomeAction) -> List[str]:
        return [name for name, o in self.outcomes.items() if o.action == action]

    def as_dict(self) -> Dict[str, object]:
        return {
            "policy": {"target_version": self.policy.target_version, "lint_fatal": self.policy.lint_fatal},
            "modules": [o.as_dict() for o in self.outcomes.values()],
        }


class OverrideOrchestrator:
    """Applies an EnforcedPolicy to every capable module, after its own configuration.

    For each module the registry lists:
      - already evaluated: probe and apply now;
      - still pending: register a one-shot callback on the gate that probes and
        applies the moment the module becomes evaluated.

    Every module is processed exactly once. Errors from the probe or the applier
    propagate unchanged and abort the pass.
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        gate: EvaluationGate,
        policy: EnforcedPolicy,
        *,
        probe: CapabilityProbe = has_capability,
        applier: OverrideApplier = apply_override,
    ):
        self.registry = registry
        self.gate = gate
        self.policy = policy
        self.probe = probe
        self.applier = applier
        self.report = OverrideReport(policy=policy)
        self._processed: Set[str] = set()

    def run(self) -> OverrideReport:
        modules = self.registry.list_modules()
        for m in modules:
            if self.gate.is_evaluated(m):
                self.report.outcomes[m.name] = ModuleOutcome(module=m.name)
                self._process(m)
            else:
                self.report.outcomes[m.name] = ModuleOutcome(module=m.name, deferred=True)
                self.gate.on_evaluated(m, self._process)
        log.info(
            "override pass registered: modules=%d deferred=%d",
            len(modules),
            sum(1 for o in self.report.outcomes.values() if o.deferred),
        )
        return self.report

    def _process(self, module: Module) -> None:
        if module.name in self._processed:
            raise DoubleEvaluationError(
                f"Override callback fired twice for module {module.name}", module=module.name
            )
        self._processed.add(module.name)

        outcome = self.report.outcomes.setdefault(module.name, ModuleOutcome(module=module.name))
        if not self.probe(module):
            outcome.action = "skipped"
            log.debug("skipped %s (kind=%s)", module.name, module.kind)
            return
        self.applier(module, self.policy)
        outcome.action = "applied"
        log.debug("applied policy to %s (deferred=%s)", module.name, outcome.deferred)

    def assert_complete(self) -> OverrideReport:
        """Fail if any deferred override never fired."""
        missing = self.report.by_action("pending")
        if missing:
            raise PolicyNotAppliedError(
                f"Override never applied; modules not evaluated: {missing}", module=missing[0]
            )
        return self.report


def enforce_policy(
    registry: ModuleRegistry,
    gate: EvaluationGate,
    policy: EnforcedPolicy,
    *,
    probe: Optional[CapabilityProbe] = None,
    applier: Optional[OverrideApplier] = None,
) -> OverrideOrchestrator:
    orch = OverrideOrchestrator(
        registry,
        gate,
        policy,
        probe=probe or has_capability,
        applier=applier or apply_override,
    )
    orch.run()
    return orch


def run_build(graph: ProjectGraph, policy: EnforcedPolicy) -> OverrideReport:
    """Run one configuration pass over `graph` with `policy` enforced.

    The evaluation dependency is evaluated first, then the override pass is
    wired, then the remaining modules are evaluated. Returns once every module
    is evaluated and every capable module carries the policy.
    """
    graph.evaluate_dependency()
    orch = enforce_policy(GraphModuleRegistry(graph), graph.gate, policy)
    graph.evaluate_all()
    report = orch.assert_complete()
    log.info(
        "policy enforced: target_version=%d lint_fatal=%s applied=%d skipped=%d",
        policy.target_version,
        policy.lint_fatal,
        len(report.by_action("applied")),
        len(report.by_action("skipped")),
    )
    return report
