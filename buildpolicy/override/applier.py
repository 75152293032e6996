from __future__ import annotations

from ..graph.errors import CapabilityMismatchError
from ..graph.models import EnforcedPolicy, LintOptions, Module, ModuleConfig, STATE_EVALUATED


def apply_override(module: Module, policy: EnforcedPolicy) -> None:
    """Overwrite the module's platform version and lint policy with `policy`.

    Whatever the module's own configuration step set is replaced. Applying the
    same policy twice leaves the module unchanged the second time.

    Raises:
        CapabilityMismatchError: the module is still pending, or its configuration
        surface is missing or cannot be read.
    """
    if module.state != STATE_EVALUATED:
        raise CapabilityMismatchError(
            f"Override applied before module evaluation: {module.name}", module=module.name
        )
    try:
        config = module.config
        lint = config.lint
    except Exception as e:
        raise CapabilityMismatchError(
            f"Cannot read configuration of {module.name}: {e}", module=module.name
        ) from e

    if not isinstance(config, ModuleConfig) or not isinstance(lint, LintOptions):
        raise CapabilityMismatchError(
            f"Module {module.name} does not expose the platform configuration surface",
            module=module.name,
        )

    config.compile_sdk = int(policy.target_version)
    lint.check_release_builds = bool(policy.lint_fatal)
    lint.abort_on_error = bool(policy.lint_fatal)
