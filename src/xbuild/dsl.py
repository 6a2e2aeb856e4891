# src/xbuild/dsl.py
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .model import Action, ConfigurationError, Target


# ---------------------------------------------------------------------
# Target helpers
# ---------------------------------------------------------------------

def target(name: str, needs: Optional[Iterable[str]] = None, action: Optional[Action] = None) -> Target:
    """Create a target that runs `action` after everything in `needs`."""
    if not name:
        raise ValueError("target name must not be empty")
    if isinstance(needs, str):
        raise TypeError(f"needs of target {name!r} must be a list of names, not a string: {needs!r}")
    return Target(name=name, needs=tuple(needs or ()), action=action)


def meta(name: str, *needs: str) -> Target:
    """Create an aggregation target: no action, only needs."""
    return target(name, needs)


# ---------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------

def registry(*targets: Target) -> Mapping[str, Target]:
    """
    Assemble targets into a read-only name -> Target mapping.

    Usage:
        targets = registry(
            meta("CI", "Build", "Test"),
            target("Build", ["Restore"], cmd_build),
            ...
        )
    """
    by_name: dict[str, Target] = {}
    for t in targets:
        if t.name in by_name:
            raise ConfigurationError(f"Duplicate target name: {t.name}")
        by_name[t.name] = t
    return MappingProxyType(by_name)
