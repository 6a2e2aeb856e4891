"""
Tests for the command line front end.

Uses click's CliRunner; the build registry is replaced so no external tool runs.
"""

import pytest
from click.testing import CliRunner

from xbuild import cli as cli_module
from xbuild.cli import cli, resolve_target_names
from xbuild.dsl import meta, registry, target
from xbuild.model import NonZeroExitCodeError, Outcome

runner = CliRunner()
contexts = []


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("USERPROFILE", str(tmp_path / "home"))


def fake_registry(trace, fail=None):
    def act(name):
        async def run():
            trace.append(name)
            if name == fail:
                if fail == "Build":
                    raise NonZeroExitCodeError(exit_code=7, command="dotnet build")
                raise RuntimeError("kaboom")
            return Outcome.SUCCEEDED
        return run

    def factory(ctx):
        trace.append(("ctx", ctx.configuration_text))
        contexts.append(ctx)
        return registry(
            meta("CI", "Test"),
            meta("Test", "TestCore"),
            target("Restore", [], act("Restore")),
            target("Build", ["Restore"], act("Build")),
            target("TestCore", ["Build"], act("TestCore")),
        )
    return factory


def test_resolve_target_names_is_case_insensitive():
    assert resolve_target_names(["test", "BUILD", "Nope"], ["Test", "Build"]) == ["Test", "Build", "Nope"]


def test_help():
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "--skip-dependencies" in result.output
    assert "--buildSemanticVersion" in result.output


def test_default_target_is_test(monkeypatch, tmp_path):
    trace = []
    monkeypatch.setattr(cli_module, "create_registry", fake_registry(trace))

    result = runner.invoke(cli, ["--base-folder", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert trace == [("ctx", "Release"), "Restore", "Build", "TestCore"]


def test_configuration_and_ci_flags(monkeypatch, tmp_path):
    trace = []
    monkeypatch.setattr(cli_module, "create_registry", fake_registry(trace))

    result = runner.invoke(cli, ["ci", "-c", "debug", "--base-folder", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert trace[0] == ("ctx", "Debug")
    assert contexts[-1].parallel_flags[1] == "none"


def test_skip_dependencies(monkeypatch, tmp_path):
    trace = []
    monkeypatch.setattr(cli_module, "create_registry", fake_registry(trace))

    result = runner.invoke(cli, ["Build", "-s", "--base-folder", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert trace[1:] == ["Build"]


def test_explicit_exit_code_is_propagated(monkeypatch, tmp_path):
    trace = []
    monkeypatch.setattr(cli_module, "create_registry", fake_registry(trace, fail="Build"))

    result = runner.invoke(cli, ["Test", "-N", "--base-folder", str(tmp_path)])

    assert result.exit_code == 7
    assert "==> Build failed! <==" in result.output
    assert "TestCore" not in trace


def test_unhandled_error_prints_traceback(monkeypatch, tmp_path):
    trace = []
    monkeypatch.setattr(cli_module, "create_registry", fake_registry(trace, fail="Restore"))

    result = runner.invoke(cli, ["Build", "-N", "--base-folder", str(tmp_path)])

    assert result.exit_code == 1
    assert "An unhandled exception was thrown" in result.output
    assert "RuntimeError: kaboom" in result.output


def test_unknown_target(monkeypatch, tmp_path):
    trace = []
    monkeypatch.setattr(cli_module, "create_registry", fake_registry(trace))

    result = runner.invoke(cli, ["Deploy", "--base-folder", str(tmp_path)])

    assert result.exit_code == 1
    assert "Deploy" in result.output
    assert trace == [("ctx", "Release")]


def test_verbose_logs_targets(monkeypatch, tmp_path):
    trace = []
    monkeypatch.setattr(cli_module, "create_registry", fake_registry(trace))

    result = runner.invoke(cli, ["Build", "-v", "-N", "--base-folder", str(tmp_path)])

    assert result.exit_code == 0
    assert "Restore: Starting..." in result.output
    assert "Build: Succeeded." in result.output


def test_success_prints_banner(monkeypatch, tmp_path):
    trace = []
    monkeypatch.setattr(cli_module, "create_registry", fake_registry(trace))

    result = runner.invoke(cli, ["Build", "-N", "--base-folder", str(tmp_path)])

    assert result.exit_code == 0
    assert "==> Build succeeded! <==" in result.output
    assert "Build failed" not in result.output


@pytest.mark.parametrize("code", [0, -9, 300])
def test_unusable_exit_code_becomes_generic_failure(monkeypatch, tmp_path, code):
    async def broken():
        raise NonZeroExitCodeError(exit_code=code)

    monkeypatch.setattr(cli_module, "create_registry", lambda ctx: registry(target("Build", [], broken)))

    result = runner.invoke(cli, ["Build", "-N", "--base-folder", str(tmp_path)])

    assert result.exit_code == 1
    assert "==> Build failed! <==" in result.output
