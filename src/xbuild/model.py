# model.py
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

Action = Callable[[], Awaitable[Optional["Outcome"]]]

GENERIC_FAILURE_EXIT_CODE = 1


def exit_code_for(error: BaseException | None) -> int:
    """Process exit status for a failed run: the tool's own code when it is usable, else the generic code."""
    if isinstance(error, NonZeroExitCodeError) and 0 < error.exit_code < 256:
        return error.exit_code
    return GENERIC_FAILURE_EXIT_CODE


class Outcome(str, enum.Enum):
    """Result of a single target action."""
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class Target:
    """
    A named node in the build graph.

    `needs` lists the targets that must complete BEFORE this one.
    A target without an action is a meta target: it only groups its needs.
    """
    name: str
    needs: tuple[str, ...] = ()
    action: Optional[Action] = field(default=None, compare=False, repr=False)

    @property
    def is_meta(self) -> bool:
        return self.action is None


@dataclass(frozen=True)
class RunOptions:
    skip_dependencies: bool = False
    verbose: bool = False
    no_color: bool = False


@dataclass
class RunResult:
    """Aggregate outcome of a run."""
    succeeded: bool
    executed: List[str] = field(default_factory=list)
    outcomes: Dict[str, Outcome] = field(default_factory=dict)
    failed_target: str | None = None
    error: BaseException | None = None

    @property
    def exit_code(self) -> int:
        if self.succeeded:
            return 0
        return exit_code_for(self.error)

    def raise_for_failure(self) -> None:
        if not self.succeeded:
            raise TargetFailedError(target=self.failed_target or "", error=self.error)


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

class BuildError(Exception):
    """Base class for every error raised by xbuild."""


class ConfigurationError(BuildError):
    """The target graph or the run request is invalid. Raised before any action runs."""


class CircularDependencyError(ConfigurationError):
    def __init__(self, cycle: List[str]):
        self.cycle = list(cycle)
        super().__init__(f"Circular dependency: {' -> '.join(self.cycle)}")


@dataclass
class NonZeroExitCodeError(BuildError):
    exit_code: int
    command: str | None = None

    def __str__(self) -> str:
        if self.command:
            return f"Command exited with code {self.exit_code}: {self.command}"
        return f"Exited with code {self.exit_code}"


@dataclass
class DownloadError(BuildError):
    url: str
    status: int
    reason: str = ""

    def __str__(self) -> str:
        return f"Download of {self.url} failed: HTTP {self.status} {self.reason}".rstrip()


@dataclass
class TargetFailedError(BuildError):
    target: str
    error: BaseException | None

    def __str__(self) -> str:
        return f"Target '{self.target}' failed: {self.error}"
