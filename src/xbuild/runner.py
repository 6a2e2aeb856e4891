# runner.py
from __future__ import annotations

import time
from typing import Iterable, Mapping, Optional

from .dag import execution_order
from .model import BuildError, Outcome, RunOptions, RunResult, Target
from .ui.console import Console


async def _run_target(target: Target, console: Console) -> Outcome:
    """
    Run a single target's action.

    Returns Outcome.SUCCEEDED or Outcome.SKIPPED. Raises on failure.
    """
    console.target_starting(target.name)
    start = time.perf_counter()
    try:
        outcome = await target.action()
        if outcome is Outcome.FAILED:
            # an action may report failure without raising
            raise BuildError(f"Target '{target.name}' reported failure")
    except Exception as e:
        console.target_failed(target.name, e, time.perf_counter() - start)
        raise

    elapsed = time.perf_counter() - start
    if outcome is Outcome.SKIPPED:
        console.target_skipped(target.name, elapsed)
        return Outcome.SKIPPED

    console.target_succeeded(target.name, elapsed)
    return Outcome.SUCCEEDED


async def run_targets(
    registry: Mapping[str, Target],
    requested: Iterable[str],
    options: RunOptions = RunOptions(),
    console: Optional[Console] = None,
) -> RunResult:
    """
    Run the requested targets and everything they need.

    - Validates the request and the reachable graph (unknown names, missing
      dependencies, cycles) BEFORE any action runs; those raise
      ConfigurationError.
    - Runs actions one at a time in topological order, each at most once.
    - With options.skip_dependencies, only the requested targets' own actions
      run; their dependencies are still validated.
    - The first failing action stops the run; its error is returned in the
      RunResult, nothing is rolled back.
    """
    if console is None:
        console = Console(no_color=options.no_color, verbose=options.verbose)

    names = list(requested)
    order = execution_order(registry, names)
    if options.skip_dependencies:
        wanted = set(names)
        order = [n for n in order if n in wanted]

    result = RunResult(succeeded=True)
    console.run_starting(names)
    start = time.perf_counter()

    for name in order:
        target = registry[name]
        if target.is_meta:
            result.outcomes[name] = Outcome.SUCCEEDED
            continue

        result.executed.append(name)
        try:
            result.outcomes[name] = await _run_target(target, console)
        except Exception as e:
            result.outcomes[name] = Outcome.FAILED
            result.succeeded = False
            result.failed_target = name
            result.error = e
            console.run_failed(names, time.perf_counter() - start)
            return result

    console.run_succeeded(names, time.perf_counter() - start)
    return result
