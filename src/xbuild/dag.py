# dag.py
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

from .model import CircularDependencyError, ConfigurationError, Target

_WHITE, _GREY, _BLACK = 0, 1, 2


def validate_request(registry: Mapping[str, Target], requested: Iterable[str]) -> List[str]:
    """Check the requested names against the registry; returns them as a list."""
    names = list(requested)
    if not names:
        raise ConfigurationError("No targets requested")

    unknown = [n for n in names if n not in registry]
    if unknown:
        raise ConfigurationError(
            f"Target(s) not found: {', '.join(unknown)}. "
            f"Known targets: {sorted(registry)}"
        )
    return names


def execution_order(registry: Mapping[str, Target], requested: Iterable[str]) -> List[str]:
    """
    Topological order of every target reachable from `requested`.

    Depth-first, post-order: requested names are visited in request order and
    each target's needs in declaration order, so the result is deterministic.

    Raises:
      ConfigurationError: unknown requested name or missing dependency
      CircularDependencyError: a cycle among reachable targets
    """
    names = validate_request(registry, requested)

    color: Dict[str, int] = {}
    order: List[str] = []

    for root in names:
        if color.get(root, _WHITE) == _BLACK:
            continue

        # explicit stack: (name, index of next need to visit)
        path: List[str] = [root]
        stack: List[List] = [[root, 0]]
        color[root] = _GREY

        while stack:
            frame = stack[-1]
            node, idx = frame
            needs = registry[node].needs

            if idx < len(needs):
                frame[1] += 1
                dep = needs[idx]
                if dep not in registry:
                    raise ConfigurationError(
                        f"Target '{node}' depends on missing target '{dep}'"
                    )
                state = color.get(dep, _WHITE)
                if state == _GREY:
                    start = path.index(dep)
                    raise CircularDependencyError(path[start:] + [dep])
                if state == _WHITE:
                    color[dep] = _GREY
                    path.append(dep)
                    stack.append([dep, 0])
                continue

            stack.pop()
            path.pop()
            color[node] = _BLACK
            order.append(node)

    return order
