from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from ..graph.errors import ValidationError
from ..graph.models import DEFAULT_POLICY, EnforcedPolicy
from ..utils.yamlio import read_yaml


DEFAULT_POLICY_REL_PATH = Path("config/build_policy.yml")
DEFAULT_PRIMARY_MODULE = ":app"
DEFAULT_BUILD_DIR = "../../build"

POLICY_FILE_ENV = "BUILDPOLICY_POLICY_FILE"


@dataclass(frozen=True)
class PolicySettings:
    policy: EnforcedPolicy
    primary_module: str = DEFAULT_PRIMARY_MODULE
    # True when the policy file names primary_module rather than relying on the default.
    primary_module_explicit: bool = False
    build_dir: str = DEFAULT_BUILD_DIR
    source_path: str = ""


def _policy_schema() -> Dict[str, Any]:
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "required": ["target_version", "lint_fatal"],
        "properties": {
            "target_version": {"type": "integer", "minimum": 1},
            "lint_fatal": {"type": "boolean"},
            "primary_module": {"type": "string", "minLength": 1},
            "build_dir": {"type": "string", "minLength": 1},
            "description": {"type": "string"},
        },
        "additionalProperties": False,
    }


def resolve_policy_path(project_root: Path, cli_path: Optional[str] = None) -> Path:
    """Resolve the policy YAML path.

    Precedence:
      1) CLI flag --policy
      2) BUILDPOLICY_POLICY_FILE
      3) <project_root>/config/build_policy.yml
    """
    if cli_path and str(cli_path).strip():
        return Path(str(cli_path).strip()).expanduser().resolve()

    env_path = str(os.environ.get(POLICY_FILE_ENV, "") or "").strip()
    if env_path:
        return Path(env_path).expanduser().resolve()

    return (project_root / DEFAULT_POLICY_REL_PATH).resolve()


def validate_policy_dict(data: Dict[str, Any]) -> None:
    try:
        jsonschema.validate(instance=data, schema=_policy_schema())
    except jsonschema.ValidationError as e:
        raise ValidationError(f"build policy schema validation failed: {e.message}") from e


def load_policy_settings(project_root: Path, cli_path: Optional[str] = None) -> PolicySettings:
    """Load and validate the build policy.

    An explicitly requested file (CLI flag or env var) must exist. When only the
    default location applies and nothing is there, the hard-coded policy is used.
    """
    explicit = bool((cli_path and str(cli_path).strip()) or str(os.environ.get(POLICY_FILE_ENV, "") or "").strip())
    path = resolve_policy_path(project_root, cli_path)
    if not path.exists():
        if explicit:
            raise ValidationError(f"build policy not found: {path}")
        return PolicySettings(policy=DEFAULT_POLICY)

    data = read_yaml(path)
    validate_policy_dict(data)

    policy = EnforcedPolicy(
        target_version=int(data["target_version"]),
        lint_fatal=bool(data["lint_fatal"]),
    )
    return PolicySettings(
        policy=policy,
        primary_module=str(data.get("primary_module") or DEFAULT_PRIMARY_MODULE).strip(),
        primary_module_explicit="primary_module" in data,
        build_dir=str(data.get("build_dir") or DEFAULT_BUILD_DIR).strip(),
        source_path=str(path),
    )
