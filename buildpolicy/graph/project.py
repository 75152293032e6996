from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Set

from .errors import GraphTraversalError, NotFoundError, ValidationError
from .gate import EvaluationGate
from .models import Module

log = logging.getLogger("buildpolicy.graph")


class ProjectGraph:
    """In-memory host build graph.

    Modules are evaluated lazily: nothing runs until `evaluate` or
    `evaluate_all` is called. One module may be declared as the evaluation
    dependency of all others; it is evaluated before any other module,
    whichever module is requested first.
    """

    def __init__(self, modules: Iterable[Module] = (), *, gate: Optional[EvaluationGate] = None):
        self.gate = gate or EvaluationGate()
        self._modules: Dict[str, Module] = {}
        self._evaluation_dependency: Optional[str] = None
        self._in_progress: Set[str] = set()
        for m in modules:
            self.add_module(m)

    def add_module(self, module: Module) -> Module:
        name = str(module.name or "").strip()
        if not name:
            raise ValidationError("Module name must be non-empty")
        if name in self._modules:
            raise ValidationError(f"Duplicate module name: {name}", module=name)
        self._modules[name] = module
        return module

    def module(self, name: str) -> Module:
        m = self._modules.get(name)
        if m is None:
            raise NotFoundError(f"Module not found: {name}", module=name)
        return m

    def modules(self) -> List[Module]:
        return list(self._modules.values())

    def evaluation_depends_on(self, name: str) -> None:
        """Declare `name` as the module every other module's evaluation depends on."""
        self.module(name)
        self._evaluation_dependency = name

    @property
    def evaluation_dependency(self) -> Optional[str]:
        return self._evaluation_dependency

    def evaluate(self, name: str) -> Module:
        """Evaluate one module if still pending. Evaluating an evaluated module is a no-op."""
        m = self.module(name)
        if self.gate.is_evaluated(m):
            return m
        dep = self._evaluation_dependency
        if dep is not None and dep != m.name and dep not in self._in_progress:
            self.evaluate_dependency()
        self._in_progress.add(m.name)
        try:
            if m.configure is not None:
                m.configure(m)
        finally:
            self._in_progress.discard(m.name)
        self.gate.mark_evaluated(m)
        log.debug("evaluated %s", m.name)
        return m

    def evaluate_dependency(self) -> Optional[Module]:
        if self._evaluation_dependency is None:
            return None
        return self.evaluate(self._evaluation_dependency)

    def evaluate_all(self) -> None:
        self.evaluate_dependency()
        for m in self.modules():
            self.evaluate(m.name)


class GraphModuleRegistry:
    """ModuleRegistry over a ProjectGraph."""

    def __init__(self, graph: ProjectGraph):
        self.graph = graph

    def list_modules(self) -> List[Module]:
        try:
            return list(self.graph.modules())
        except Exception as e:
            raise GraphTraversalError(f"Cannot enumerate modules: {e}") from e
