from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .config.policy import PolicySettings, load_policy_settings
from .graph.adapters.registry_repo import RepoModuleRegistry
from .graph.errors import BuildPolicyError
from .graph.project import ProjectGraph
from .layout import assign_build_dirs, clean_build_dir, resolve_root_build_dir
from .override.orchestrator import run_build


def _load(args: argparse.Namespace) -> Tuple[Path, PolicySettings, ProjectGraph]:
    project_root = Path(args.project_dir).resolve()
    settings = load_policy_settings(project_root, cli_path=args.policy)
    graph = RepoModuleRegistry(project_root).build_graph()
    # An explicitly named primary module must exist; the implicit ":app" is optional.
    if settings.primary_module_explicit or settings.primary_module in {m.name for m in graph.modules()}:
        graph.evaluation_depends_on(settings.primary_module)
    return project_root, settings, graph


def cmd_resolve(args: argparse.Namespace) -> int:
    project_root, settings, graph = _load(args)
    assign_build_dirs(graph, resolve_root_build_dir(project_root, settings.build_dir))
    report = run_build(graph, settings.policy)

    modules: List[Dict[str, Any]] = []
    for m in graph.modules():
        outcome = report.outcomes[m.name]
        modules.append({
            "module": m.name,
            "kind": m.kind,
            "deferred": outcome.deferred,
            "action": outcome.action,
            "config": m.config.as_dict(),
            "build_dir": str(m.build_dir) if m.build_dir else "",
        })
    out = {
        "policy": report.as_dict()["policy"],
        "policy_source": settings.source_path or "<default>",
        "evaluation_dependency": graph.evaluation_dependency or "",
        "modules": modules,
    }
    print(json.dumps(out, indent=2))
    return 0


def cmd_layout(args: argparse.Namespace) -> int:
    project_root, settings, graph = _load(args)
    root = resolve_root_build_dir(project_root, settings.build_dir)
    dirs = assign_build_dirs(graph, root)
    print(json.dumps({"root_build_dir": str(root), "modules": {k: str(v) for k, v in dirs.items()}}, indent=2))
    return 0


def cmd_clean(args: argparse.Namespace) -> int:
    project_root = Path(args.project_dir).resolve()
    settings = load_policy_settings(project_root, cli_path=args.policy)
    root = resolve_root_build_dir(project_root, settings.build_dir)
    removed = clean_build_dir(root, dry_run=bool(args.dry_run))
    print(json.dumps({"root_build_dir": str(root), "removed": removed, "dry_run": bool(args.dry_run)}))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="buildpolicy")
    p.add_argument("--project-dir", default=".")
    p.add_argument("--policy", default=None, help="Path to build policy YAML")
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("resolve", help="Evaluate all modules with the build policy enforced")
    sp.set_defaults(func=cmd_resolve)

    sp = sub.add_parser("layout", help="Show per-module build directories")
    sp.set_defaults(func=cmd_layout)

    sp = sub.add_parser("clean", help="Delete the root build directory")
    sp.add_argument("--dry-run", action="store_true")
    sp.set_defaults(func=cmd_clean)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(name)s] %(levelname)s: %(message)s",
    )
    try:
        return int(args.func(args) or 0)
    except BuildPolicyError as e:
        where = f" module={e.module}" if e.module else ""
        print(f"[buildpolicy] ERROR:{where} {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
