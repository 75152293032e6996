from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from ..graph.errors import ValidationError


def read_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"Expected a mapping at top level of {path}")
    return data
