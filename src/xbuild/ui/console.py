"""Console output formatting utilities for xbuild."""

from __future__ import annotations

import traceback
from typing import IO, Iterable, Optional

import click


class Console:
    """Centralized console output formatting."""

    def __init__(self, no_color: bool = False, verbose: bool = False, stream: Optional[IO[str]] = None):
        """
        Initialize console formatter.

        Args:
            no_color: If True, never emit ANSI colour codes
            verbose: If True, print per-target start and elapsed time lines
            stream: Output stream (defaults to stdout)
        """
        self.no_color = no_color
        self.verbose = verbose
        self.stream = stream

    def _echo(self, text: str = "", fg: Optional[str] = None, bold: bool = False, dim: bool = False) -> None:
        if fg and not self.no_color:
            text = click.style(text, fg=fg, bold=bold, dim=dim)
        click.echo(text, file=self.stream)

    # ---- build script output ----

    def build_step(self, message: str) -> None:
        """Print a section header."""
        self._echo(f"==> {message} <==", fg="white", bold=True)
        self._echo()

    def exec_line(self, command: str) -> None:
        self._echo(f"EXEC: {command}", fg="bright_black")
        self._echo()

    def patch_line(self, path: str) -> None:
        self._echo(f"PATCH: {path}", fg="bright_black")

    def info(self, message: str = "") -> None:
        self._echo(message)

    def warning(self, message: str) -> None:
        self._echo(message, fg="yellow")

    def error(self, message: str) -> None:
        self._echo(message, fg="red")

    # ---- target runner output ----

    def run_starting(self, names: Iterable[str]) -> None:
        if self.verbose:
            self._echo(f"Starting... ({', '.join(names)})", fg="white")

    def target_starting(self, name: str) -> None:
        if self.verbose:
            self._echo(f"{name}: Starting...", fg="white")

    def target_succeeded(self, name: str, elapsed: float) -> None:
        if self.verbose:
            self._echo(f"{name}: Succeeded. ({_fmt(elapsed)})", fg="green")

    def target_skipped(self, name: str, elapsed: float) -> None:
        if self.verbose:
            self._echo(f"{name}: Skipped. ({_fmt(elapsed)})", fg="yellow")

    def target_failed(self, name: str, error: BaseException, elapsed: float) -> None:
        self._echo(f"{name}: Failed! {error} ({_fmt(elapsed)})", fg="red")

    def run_succeeded(self, names: Iterable[str], elapsed: float) -> None:
        if self.verbose:
            self._echo(f"Succeeded. ({', '.join(names)}) ({_fmt(elapsed)})", fg="green")

    def run_failed(self, names: Iterable[str], elapsed: float) -> None:
        self._echo(f"Failed! ({', '.join(names)}) ({_fmt(elapsed)})", fg="red")

    # ---- final banner ----

    def banner_succeeded(self) -> None:
        self._echo("==> Build succeeded! <==", fg="green")

    def banner_failed(self, unhandled: bool = False) -> None:
        if unhandled:
            self._echo("==> Build failed! An unhandled exception was thrown <==", fg="red")
        else:
            self._echo("==> Build failed! <==", fg="red")

    def exception(self, exc: BaseException) -> None:
        """Print the full traceback of an unstructured failure."""
        self._echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip())


def _fmt(elapsed: float) -> str:
    if elapsed < 1:
        return f"{elapsed * 1000:.0f} ms"
    if elapsed < 60:
        return f"{elapsed:.2f} s"
    minutes, seconds = divmod(elapsed, 60)
    return f"{int(minutes)} min {seconds:.0f} s"
