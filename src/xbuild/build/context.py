# build/context.py
from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from ..tools.process import exec_command
from ..ui.console import Console

NUGET_VERSION = "4.9.2"
SIGN_CLIENT_VERSION = "0.9.1"

PARALLEL_FLAGS = ["-parallel", "all", "-maxthreads", "16"]
NONPARALLEL_FLAGS = ["-parallel", "none", "-maxthreads", "1"]

PLACEHOLDER_ASSEMBLY_VERSION = "99.99.99.0"
PLACEHOLDER_SEMANTIC_VERSION = "99.99.99-dev"


class Configuration(str, enum.Enum):
    DEBUG = "Debug"
    RELEASE = "Release"


@dataclass
class BuildContext:
    """
    Everything the build targets need: folders, versions, configuration,
    credentials source and the console to write to.
    """
    base_folder: Path
    console: Console
    configuration: Configuration = Configuration.RELEASE
    build_assembly_version: Optional[str] = None
    build_semantic_version: Optional[str] = None
    nuget_version: str = NUGET_VERSION
    sign_client_version: str = SIGN_CLIENT_VERSION
    env: Mapping[str, str] = field(default_factory=lambda: os.environ)
    home_folder: Optional[Path] = None
    parallel_flags: List[str] = field(default_factory=lambda: list(PARALLEL_FLAGS))

    def __post_init__(self) -> None:
        self.base_folder = Path(self.base_folder).resolve()
        if self.home_folder is None:
            self.home_folder = Path.home()

    # ---- derived paths ----

    @property
    def configuration_text(self) -> str:
        return self.configuration.value

    @property
    def nuget_cli_folder(self) -> Path:
        return Path(self.home_folder) / ".nuget" / "cli" / self.nuget_version

    @property
    def nuget_exe(self) -> Path:
        return self.nuget_cli_folder / "nuget.exe"

    @property
    def nuget_url(self) -> str:
        return f"https://dist.nuget.org/win-x86-commandline/v{self.nuget_version}/nuget.exe"

    @property
    def package_output_folder(self) -> Path:
        return self.base_folder / "artifacts" / "packages"

    @property
    def test_output_folder(self) -> Path:
        return self.base_folder / "artifacts" / "test"

    @property
    def sign_client_folder(self) -> Path:
        return self.base_folder / "packages" / f"SignClient.{self.sign_client_version}"

    @property
    def sign_client_app_settings(self) -> Path:
        return self.base_folder / "tools" / "SignClient" / "appsettings.json"

    @property
    def submodule_folders(self) -> List[Path]:
        return [self.base_folder / "src" / "xunit.assert" / "Asserts"]

    # ---- helpers used by targets ----

    def prepare(self) -> None:
        """Create the folders every run expects to exist."""
        self.nuget_cli_folder.mkdir(parents=True, exist_ok=True)
        self.test_output_folder.mkdir(parents=True, exist_ok=True)

    def use_nonparallel_tests(self) -> None:
        self.parallel_flags = list(NONPARALLEL_FLAGS)

    def build_step(self, message: str) -> None:
        self.console.build_step(message)

    async def exec(self, name: str, args: List[str], *, secrets=(), cwd=None) -> None:
        await exec_command(
            name,
            args,
            console=self.console,
            secrets=secrets,
            cwd=cwd if cwd is not None else self.base_folder,
        )
