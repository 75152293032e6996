from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import jsonschema

from ...utils.yamlio import read_yaml
from ..errors import GraphTraversalError, NotFoundError, ValidationError
from ..models import MODULE_KIND_VALUES, LintOptions, Module, ModuleConfig, is_valid_module_kind
from ..project import ProjectGraph


MODULE_FILE = "module.yml"


def _module_schema() -> Dict[str, Any]:
    return {
        "type": "object",
        "required": ["kind"],
        "properties": {
            "kind": {"type": "string"},
            "description": {"type": "string"},
            "compile_sdk": {"type": "integer", "minimum": 1},
            "lint": {
                "type": "object",
                "properties": {
                    "check_release_builds": {"type": "boolean"},
                    "abort_on_error": {"type": "boolean"},
                },
                "additionalProperties": False,
            },
        },
        "additionalProperties": False,
    }


def _declared_configure(declared: Dict[str, Any]):
    """Build a module's own configuration step from its module.yml values."""

    def configure(module: Module) -> None:
        if "compile_sdk" in declared:
            module.config.compile_sdk = int(declared["compile_sdk"])
        lint = declared.get("lint") or {}
        if "check_release_builds" in lint:
            module.config.lint.check_release_builds = bool(lint["check_release_builds"])
        if "abort_on_error" in lint:
            module.config.lint.abort_on_error = bool(lint["abort_on_error"])

    return configure


class RepoModuleRegistry:
    """ModuleRegistry reading <project_root>/modules/**/module.yml.

    A module's name is its directory path under modules/, joined with ':'
    (modules/feature/login -> ':feature:login'). Nested directories are
    transitive sub-modules.
    """

    def __init__(self, project_root: Path):
        self.project_root = Path(project_root)
        self._graph: ProjectGraph | None = None

    @property
    def modules_dir(self) -> Path:
        return self.project_root / "modules"

    def module_names(self) -> List[str]:
        if not self.modules_dir.exists():
            return []
        try:
            found = sorted(p.parent for p in self.modules_dir.rglob(MODULE_FILE) if p.is_file())
        except OSError as e:
            raise GraphTraversalError(f"Cannot traverse {self.modules_dir}: {e}") from e
        if self.modules_dir in found:
            raise ValidationError(
                f"{MODULE_FILE} directly under {self.modules_dir} has no module name; move it into a module directory"
            )
        return [":" + ":".join(p.relative_to(self.modules_dir).parts) for p in found]

    def module_path(self, name: str) -> Path:
        parts = [x for x in str(name).split(":") if x]
        p = self.modules_dir.joinpath(*parts) if parts else self.modules_dir
        if not parts or not (p / MODULE_FILE).exists():
            raise NotFoundError(f"Module not found: {name}", module=name)
        return p

    def load_module_yaml(self, name: str) -> Dict[str, Any]:
        p = self.module_path(name) / MODULE_FILE
        data = read_yaml(p)
        try:
            jsonschema.validate(instance=data, schema=_module_schema())
        except jsonschema.ValidationError as e:
            raise ValidationError(f"Invalid {MODULE_FILE} for {name}: {e.message}", module=name) from e

        kind = str(data.get("kind") or "").strip()
        if not is_valid_module_kind(kind):
            raise ValidationError(
                f"{MODULE_FILE} has invalid kind={kind!r} for {name} (allowed: {list(MODULE_KIND_VALUES)})",
                module=name,
            )
        return data

    def build_graph(self) -> ProjectGraph:
        graph = ProjectGraph()
        for name in self.module_names():
            data = self.load_module_yaml(name)
            graph.add_module(
                Module(
                    name=name,
                    kind=str(data["kind"]).strip(),  # type: ignore[arg-type]
                    config=ModuleConfig(lint=LintOptions()),
                    configure=_declared_configure(data),
                )
            )
        return graph

    @property
    def graph(self) -> ProjectGraph:
        if self._graph is None:
            self._graph = self.build_graph()
        return self._graph

    def list_modules(self) -> List[Module]:
        return self.graph.modules()
