from __future__ import annotations

from ..graph.models import Module

# Kinds whose configuration exposes the platform-version and lint settings.
# Third-party plugin modules carry their own, often outdated, compile SDK.
CAPABLE_KINDS = ("library", "plugin")


def has_capability(module: Module) -> bool:
    return module.kind in CAPABLE_KINDS
