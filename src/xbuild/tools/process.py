# tools/process.py
from __future__ import annotations

import asyncio
import shlex
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from ..model import NonZeroExitCodeError
from ..ui.console import Console

REDACTED = "[redacted]"


def needs_mono() -> bool:
    """.exe tools have to go through mono everywhere but Windows."""
    return not sys.platform.startswith("win")


def redact(text: str, *secrets: Optional[str]) -> str:
    """Replace every (non-empty) secret in `text` with a placeholder."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def format_command(name: str, args: Sequence[str]) -> str:
    return shlex.join([name, *args])


def resolve_command(name: str, args: Sequence[str], *, use_mono: Optional[bool] = None) -> List[str]:
    """Full argv for running `name` with `args`, wrapping .exe tools in mono when needed."""
    if use_mono is None:
        use_mono = needs_mono()
    if use_mono and name.lower().endswith(".exe"):
        return ["mono", name, *args]
    return [name, *args]


async def exec_command(
    name: str,
    args: Sequence[str],
    *,
    console: Console,
    secrets: Sequence[Optional[str]] = (),
    cwd: str | Path | None = None,
    use_mono: Optional[bool] = None,
) -> None:
    """
    Run an external tool and wait for it.

    The command line is echoed with every secret redacted. Output is not
    captured; the tool writes straight to our stdout/stderr.

    Raises:
      NonZeroExitCodeError: the tool exited with a non-zero code
      FileNotFoundError: the tool could not be found
    """
    argv = resolve_command(name, args, use_mono=use_mono)
    shown = format_command(argv[0], [redact(a, *secrets) for a in argv[1:]])
    console.exec_line(shown)

    proc = await asyncio.create_subprocess_exec(
        *argv,
        cwd=str(cwd) if cwd is not None else None,
    )
    returncode = await proc.wait()
    console.info()

    if returncode < 0:
        # killed by a signal; report it the way a shell does
        returncode = 128 - returncode

    if returncode != 0:
        raise NonZeroExitCodeError(exit_code=returncode, command=shown)
