# cli.py
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from xbuild.build.context import BuildContext, Configuration
from xbuild.build.targets import create_registry
from xbuild.model import (
    GENERIC_FAILURE_EXIT_CODE,
    ConfigurationError,
    NonZeroExitCodeError,
    RunOptions,
    exit_code_for,
)
from xbuild.runner import run_targets
from xbuild.ui.console import Console


def resolve_target_names(requested, known) -> list[str]:
    """
    Map names typed on the command line to registered target names.

    Matching is case-insensitive; unknown names are passed through unchanged
    so the runner reports them.
    """
    by_lower = {name.lower(): name for name in known}
    return [by_lower.get(name.lower(), name) for name in requested]


@click.command(context_settings={"help_option_names": ["-?", "-h", "--help"]})
@click.argument("targets", nargs=-1)
@click.option("--buildAssemblyVersion", "build_assembly_version", default=None,
              help="Set the build assembly version (default: '99.99.99.0')")
@click.option("--buildSemanticVersion", "build_semantic_version", default=None,
              help="Set the build semantic version (default: '99.99.99-dev')")
@click.option("-c", "--configuration", type=click.Choice([c.value for c in Configuration], case_sensitive=False),
              default=Configuration.RELEASE.value, show_default=True, help="The target configuration")
@click.option("-N", "--no-color", is_flag=True, default=False, help="Disable colored output")
@click.option("-s", "--skip-dependencies", is_flag=True, default=False, help="Do not run targets' dependencies")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable verbose output")
@click.option("--base-folder", type=click.Path(file_okay=False, path_type=Path), default=".",
              show_default=True, help="Repository root to build")
def cli(targets, build_assembly_version, build_semantic_version, configuration,
        no_color, skip_dependencies, verbose, base_folder):
    """Build utility for xUnit.net. TARGETS default to 'Test'."""
    options = RunOptions(skip_dependencies=skip_dependencies, verbose=verbose, no_color=no_color)
    console = Console(no_color=no_color, verbose=verbose)

    ctx = BuildContext(
        base_folder=base_folder,
        console=console,
        configuration=Configuration(configuration),
        build_assembly_version=build_assembly_version,
        build_semantic_version=build_semantic_version,
    )

    error = None
    try:
        ctx.prepare()
        registry = create_registry(ctx)
        names = resolve_target_names(targets or ("Test",), registry)
        if "CI" in names:
            ctx.use_nonparallel_tests()

        result = asyncio.run(run_targets(registry, names, options, console))
        if result.succeeded:
            console.info()
            console.banner_succeeded()
            sys.exit(0)
        error = result.error
    except KeyboardInterrupt:
        console.info("\nInterrupted by user")
        sys.exit(130)
    except ConfigurationError as e:
        console.info()
        console.error(str(e))
        console.banner_failed()
        sys.exit(GENERIC_FAILURE_EXIT_CODE)
    except Exception as e:
        error = e

    console.info()

    if isinstance(error, NonZeroExitCodeError):
        console.banner_failed()
        sys.exit(exit_code_for(error))

    console.banner_failed(unhandled=True)
    console.exception(error)
    sys.exit(GENERIC_FAILURE_EXIT_CODE)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
