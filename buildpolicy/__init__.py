"""Uniform build-policy enforcement across a lazily evaluated module graph.

Every library module of a multi-module build ends up with the same target
platform version and lint-failure policy, no matter when its own
configuration step runs relative to the override pass.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
