from __future__ import annotations

import logging
from typing import Dict, List

from .contracts import EvaluationCallback
from .errors import DoubleEvaluationError
from .models import STATE_EVALUATED, Module

log = logging.getLogger("buildpolicy.gate")


class EvaluationGate:
    """Tracks module evaluation and holds one-shot callbacks for pending modules.

    The host graph calls `mark_evaluated` right after a module's own configuration
    step returns. Callbacks registered for that module are drained synchronously
    inside that call, so they run before control returns to whatever triggered
    the evaluation.

    Check-and-register in `on_evaluated` is atomic with respect to the single
    build thread: nothing can evaluate the module between the state check and
    the append.
    """

    def __init__(self) -> None:
        self._callbacks: Dict[str, List[EvaluationCallback]] = {}

    def is_evaluated(self, module: Module) -> bool:
        return module.state == STATE_EVALUATED

    def on_evaluated(self, module: Module, callback: EvaluationCallback) -> None:
        if self.is_evaluated(module):
            callback(module)
            return
        self._callbacks.setdefault(module.name, []).append(callback)
        log.debug("deferred callback for %s", module.name)

    def mark_evaluated(self, module: Module) -> None:
        if self.is_evaluated(module):
            raise DoubleEvaluationError(f"Module evaluated twice: {module.name}", module=module.name)
        module.state = STATE_EVALUATED
        # Pop before running so a callback cannot observe or re-trigger its own list.
        callbacks = self._callbacks.pop(module.name, [])
        for i, cb in enumerate(callbacks):
            try:
                cb(module)
            except Exception:
                # Unrun callbacks stay visible through pending_callbacks().
                rest = callbacks[i + 1:]
                if rest:
                    self._callbacks[module.name] = rest
                raise

    def pending_callbacks(self) -> List[str]:
        return sorted(name for name, cbs in self._callbacks.items() if cbs)
