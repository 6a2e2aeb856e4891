from .dsl import meta, registry, target
from .runner import run_targets
from .model import Outcome, RunOptions, RunResult, Target

__all__ = ["meta", "registry", "target", "run_targets", "Outcome", "RunOptions", "RunResult", "Target"]
