from __future__ import annotations

from typing import Callable, List, Protocol

from .models import EnforcedPolicy, Module


EvaluationCallback = Callable[[Module], None]


class ModuleRegistry(Protocol):
    def list_modules(self) -> List[Module]:
        raise NotImplementedError


class CapabilityProbe(Protocol):
    def __call__(self, module: Module) -> bool:
        raise NotImplementedError


class OverrideApplier(Protocol):
    def __call__(self, module: Module, policy: EnforcedPolicy) -> None:
        raise NotImplementedError
