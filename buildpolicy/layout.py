from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict

from .graph.project import ProjectGraph

log = logging.getLogger("buildpolicy.layout")


def resolve_root_build_dir(project_root: Path, build_dir: str) -> Path:
    """Resolve the shared root build directory. Relative paths are taken from `project_root`."""
    p = Path(build_dir).expanduser()
    if not p.is_absolute():
        p = Path(project_root) / p
    return p.resolve()


def module_short_name(name: str) -> str:
    parts = [x for x in str(name).split(":") if x]
    return parts[-1] if parts else str(name)


def assign_build_dirs(graph: ProjectGraph, root_build_dir: Path) -> Dict[str, Path]:
    """Point every module's build directory at <root_build_dir>/<module short name>."""
    out: Dict[str, Path] = {}
    for m in graph.modules():
        m.build_dir = Path(root_build_dir) / module_short_name(m.name)
        out[m.name] = m.build_dir
    return out


def clean_build_dir(root_build_dir: Path, dry_run: bool = False) -> bool:
    """Delete the root build directory. Returns True if something was (or would be) removed."""
    root = Path(root_build_dir)
    if not root.exists():
        return False
    if dry_run:
        log.info("would delete %s", root)
        return True
    shutil.rmtree(root)
    log.info("deleted %s", root)
    return True
