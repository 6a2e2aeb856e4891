# build/targets.py
# The xUnit.net build: every target and its needs, registered in one place.
from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import List, Mapping

from ..dsl import meta, registry, target
from ..model import NonZeroExitCodeError, Outcome, Target
from ..tools.files import find_files, has_files, patch_file, relative_paths
from ..tools.http import download
from .context import (
    PLACEHOLDER_ASSEMBLY_VERSION,
    PLACEHOLDER_SEMANTIC_VERSION,
    BuildContext,
)

MYGET_SOURCE = "https://www.myget.org/F/xunit/api/v2/package"


# ---------------------------------------------------------------------
# Core targets
# ---------------------------------------------------------------------

async def cmd_build(ctx: BuildContext) -> None:
    ctx.build_step("Compiling binaries")
    await ctx.exec("dotnet", ["build", "--no-restore", "--configuration", ctx.configuration_text])


async def cmd_restore(ctx: BuildContext) -> None:
    ctx.build_step("Restoring NuGet packages")
    await ctx.exec("dotnet", ["restore"])


async def cmd_packages(ctx: BuildContext) -> None:
    ctx.build_step("Creating NuGet packages")

    nuspec_files = relative_paths(ctx.base_folder, find_files(ctx.base_folder, "*.nuspec"))
    for nuspec_file in nuspec_files:
        await ctx.exec(str(ctx.nuget_exe), [
            "pack", nuspec_file,
            "-NonInteractive",
            "-NoPackageAnalysis",
            "-OutputDirectory", str(ctx.package_output_folder),
            "-Properties", f"Configuration={ctx.configuration_text}",
        ])


def _package_files(ctx: BuildContext) -> List[str]:
    return relative_paths(ctx.base_folder, find_files(ctx.package_output_folder, "*.nupkg"))


async def cmd_push_myget(ctx: BuildContext) -> Outcome:
    ctx.build_step("Pushing packages to MyGet")

    api_key = ctx.env.get("MyGetApiKey")
    if not api_key:
        ctx.console.warning("Skipping MyGet push because environment variable 'MyGetApiKey' is not set.")
        return Outcome.SKIPPED

    for package_file in _package_files(ctx):
        await ctx.exec(
            str(ctx.nuget_exe),
            ["push", "-source", MYGET_SOURCE, "-apiKey", api_key, package_file],
            secrets=[api_key],
        )
    return Outcome.SUCCEEDED


async def cmd_set_version(ctx: BuildContext) -> None:
    if ctx.build_assembly_version:
        ctx.build_step(f"Setting assembly version: {ctx.build_assembly_version}")

        for file_to_patch in find_files(ctx.base_folder, "GlobalAssemblyInfo.cs"):
            ctx.console.patch_line(str(file_to_patch))
            patch_file(file_to_patch, PLACEHOLDER_ASSEMBLY_VERSION, ctx.build_assembly_version)

        ctx.console.info()

    if ctx.build_semantic_version:
        ctx.build_step(f"Setting semantic version: {ctx.build_semantic_version}")

        files_to_patch = find_files(ctx.base_folder, "GlobalAssemblyInfo.cs") + find_files(ctx.base_folder, "*.nuspec")
        for file_to_patch in files_to_patch:
            ctx.console.patch_line(str(file_to_patch))
            patch_file(file_to_patch, PLACEHOLDER_SEMANTIC_VERSION, ctx.build_semantic_version)

        ctx.console.info()


async def cmd_sign_packages(ctx: BuildContext) -> Outcome:
    user = ctx.env.get("SignClientUser")
    secret = ctx.env.get("SignClientSecret")
    if not user or not secret:
        ctx.console.warning(
            "Skipping package signing because environment variables "
            "'SignClientUser' and/or 'SignClientSecret' are not set."
        )
        return Outcome.SKIPPED

    if not ctx.sign_client_folder.is_dir():
        ctx.build_step(f"Downloading SignClient {ctx.sign_client_version}")
        await ctx.exec(str(ctx.nuget_exe), [
            "install", "SignClient",
            "-version", ctx.sign_client_version,
            "-SolutionDir", str(ctx.base_folder),
            "-Verbosity", "quiet",
            "-NonInteractive",
        ])

    ctx.build_step("Signing NuGet packages")

    app_path = ctx.sign_client_folder / "tools" / "netcoreapp2.0" / "SignClient.dll"
    for package_file in _package_files(ctx):
        await ctx.exec(
            "dotnet",
            [
                str(app_path), "sign",
                "-c", str(ctx.sign_client_app_settings),
                "-r", user,
                "-s", secret,
                "-n", "xUnit.net",
                "-d", "xUnit.net",
                "-u", "https://github.com/xunit/xunit",
                "-i", package_file,
            ],
            secrets=[user, secret],
        )
    return Outcome.SUCCEEDED


def _test_dlls(ctx: BuildContext, framework: str) -> List[str]:
    subpath = str(Path("bin") / ctx.configuration_text / framework)
    dlls = [p for p in find_files(ctx.base_folder, "test.xunit.*.dll") if subpath in str(p)]
    return relative_paths(ctx.base_folder, dlls)


async def cmd_test_core(ctx: BuildContext) -> None:
    ctx.build_step("Running .NET Core tests")

    test_dlls = _test_dlls(ctx, "netcoreapp")
    ctx.console.info(f"Would run: {' '.join(test_dlls)}")
    ctx.console.info()


async def cmd_test_fx(ctx: BuildContext) -> None:
    ctx.build_step("Running .NET Framework tests")

    cfg = ctx.configuration_text
    test_v1_dll = str(Path("test") / "test.xunit1" / "bin" / cfg / "net45" / "test.xunit1.dll")
    test_dlls = _test_dlls(ctx, "net472")

    ctx.console.info(f"Would run: {test_v1_dll}")
    ctx.console.info(f"Would run: {' '.join(test_dlls + ctx.parallel_flags)}")
    ctx.console.info()


async def cmd_validate_environment(ctx: BuildContext) -> None:
    for submodule_folder in ctx.submodule_folders:
        if not has_files(submodule_folder):
            ctx.console.error("One or more submodules is missing. Please run 'git submodule update --init'.")
            raise NonZeroExitCodeError(exit_code=1)


# ---------------------------------------------------------------------
# Utility targets
# ---------------------------------------------------------------------

async def cmd_download_nuget(ctx: BuildContext) -> Outcome:
    if ctx.nuget_exe.exists():
        return Outcome.SKIPPED

    ctx.build_step(f"Downloading {ctx.nuget_url} to {ctx.nuget_exe}")
    await download(ctx.nuget_url, ctx.nuget_exe)
    return Outcome.SUCCEEDED


# ---------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------

def create_registry(ctx: BuildContext) -> Mapping[str, Target]:
    def act(fn):
        return partial(fn, ctx)

    return registry(
        # Meta targets
        meta("CI", "SetVersion", "Test", "Packages", "SignPackages", "PushMyGet"),
        meta("Test", "TestCore", "TestFx"),

        # Core targets
        target("Build", ["Restore"], act(cmd_build)),
        target("Packages", ["Build", "DownloadNuGet"], act(cmd_packages)),
        target("PushMyGet", ["DownloadNuGet"], act(cmd_push_myget)),
        target("Restore", ["ValidateEnvironment"], act(cmd_restore)),
        target("SetVersion", None, act(cmd_set_version)),
        target("SignPackages", ["Packages"], act(cmd_sign_packages)),
        target("TestCore", ["Build"], act(cmd_test_core)),
        target("TestFx", ["Build"], act(cmd_test_fx)),
        target("ValidateEnvironment", None, act(cmd_validate_environment)),

        # Utility targets
        target("DownloadNuGet", None, act(cmd_download_nuget)),
    )
