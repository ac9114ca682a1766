"""Tests for the packaging orchestrator."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from distpack.command import CommandExecutor, CommandResult
from distpack.orchestrator import Orchestrator, Step
from distpack.packagers import ProcessorState
from tests._fixtures.project_builder import (
    DEFAULT_CONFIG,
    ProjectBuilder,
    RecordingRunner,
    produce_nupkg,
)

TWO_DISTRIBUTIONS = DEFAULT_CONFIG.replace(
    "distributions:\n",
    "distributions:\n"
    "  bar:\n"
    "    executable: bar\n"
    "    artifacts: [build/bar-1.0.0.zip]\n",
)


def _orchestrator(runner, host_os: str = "windows") -> Orchestrator:
    return Orchestrator(executor=CommandExecutor(runner), host_os=host_os)


def test_package_step_reports_packaged_state(project_builder: ProjectBuilder) -> None:
    runner = RecordingRunner()

    report = _orchestrator(runner).run(project_builder.path(), Step.PACKAGE)

    assert report.succeeded
    assert [(o.distribution, o.packager, o.state) for o in report.outcomes] == [
        ("foo", "chocolatey", ProcessorState.PACKAGED)
    ]
    assert runner.subcommands() == ["pack"]


def test_prepare_step_runs_no_tools(project_builder: ProjectBuilder) -> None:
    runner = RecordingRunner()

    report = _orchestrator(runner).run(str(project_builder.path()), "prepare")

    assert report.outcomes[0].state is ProcessorState.PREPARED
    assert runner.calls == []
    assert (
        project_builder.path() / "out" / "distpack" / "foo" / "prepare" / "chocolatey"
    ).is_dir()


def test_publish_step_packages_then_publishes(project_builder: ProjectBuilder) -> None:
    runner = RecordingRunner(on_call=produce_nupkg())

    report = _orchestrator(runner).run(project_builder.path(), Step.PUBLISH)

    assert report.outcomes[0].state is ProcessorState.PUBLISHED
    assert runner.subcommands() == ["pack", "apikey", "push"]


def test_dry_run_publish_skips_upload(project_builder: ProjectBuilder) -> None:
    runner = RecordingRunner()

    report = _orchestrator(runner).run(project_builder.path(), Step.PUBLISH, dry_run=True)

    assert report.dry_run
    assert report.outcomes[0].state is ProcessorState.SKIPPED
    assert runner.subcommands() == ["pack"]


def test_failure_is_recorded_and_next_pair_still_runs(tmp_path: Path) -> None:
    builder = ProjectBuilder(tmp_path)
    builder.write_config(TWO_DISTRIBUTIONS)
    seen: List[str] = []

    def runner(args, *, cwd, timeout=None):  # type: ignore[no-untyped-def]
        seen.append(Path(cwd).name)
        return CommandResult(command=list(args), returncode=1 if Path(cwd).name == "bar" else 0)

    report = _orchestrator(runner).run(builder.path(), Step.PACKAGE)

    assert seen == ["bar", "foo"]
    assert not report.succeeded
    [failure] = report.failures
    assert failure.distribution == "bar"
    assert "exit code 1" in (failure.error or "")
    assert report.outcomes[1].state is ProcessorState.PACKAGED


def test_distribution_filter(tmp_path: Path) -> None:
    builder = ProjectBuilder(tmp_path)
    builder.write_config(TWO_DISTRIBUTIONS)

    report = _orchestrator(RecordingRunner()).run(
        builder.path(), Step.PACKAGE, distributions=["foo"]
    )

    assert [o.distribution for o in report.outcomes] == ["foo"]


def test_unknown_distribution_is_rejected(project_builder: ProjectBuilder) -> None:
    with pytest.raises(ValueError, match="Unknown distributions requested: nope"):
        _orchestrator(RecordingRunner()).run(
            project_builder.path(), Step.PACKAGE, distributions=["nope"]
        )


def test_unknown_packager_is_rejected(project_builder: ProjectBuilder) -> None:
    with pytest.raises(ValueError, match="brew"):
        _orchestrator(RecordingRunner()).run(
            project_builder.path(), Step.PACKAGE, packagers=["brew"]
        )


def test_disabled_packager_is_not_run(tmp_path: Path) -> None:
    builder = ProjectBuilder(tmp_path)
    builder.write_config(
        DEFAULT_CONFIG.replace("    api_key: secret-key", "    api_key: secret-key\n    enabled: false")
    )
    runner = RecordingRunner()

    report = _orchestrator(runner).run(builder.path(), Step.PACKAGE)

    assert report.outcomes == []
    assert runner.calls == []


def test_unsupported_host_is_skipped_not_failed(project_builder: ProjectBuilder) -> None:
    report = _orchestrator(RecordingRunner(), host_os="linux").run(
        project_builder.path(), Step.PUBLISH
    )

    assert report.succeeded
    assert report.outcomes[0].state is ProcessorState.SKIPPED


def test_missing_project_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        _orchestrator(RecordingRunner()).run(tmp_path, Step.PACKAGE)


def test_unreadable_artifact_is_recorded_and_next_pair_still_runs(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    builder = ProjectBuilder(tmp_path)
    builder.write_config(TWO_DISTRIBUTIONS)
    builder.write_artifact()
    builder.write_artifact("build/bar-1.0.0.zip")
    original_open = Path.open

    def _open(self: Path, *args, **kwargs):  # type: ignore[no-untyped-def]
        if self.name == "bar-1.0.0.zip":
            raise OSError(5, "Input/output error")
        return original_open(self, *args, **kwargs)

    monkeypatch.setattr(Path, "open", _open)

    report = _orchestrator(RecordingRunner()).run(builder.path(), Step.PREPARE)

    [failure] = report.failures
    assert failure.distribution == "bar"
    assert "when preparing" in (failure.error or "")
    assert [(o.distribution, o.state) for o in report.outcomes] == [
        ("bar", ProcessorState.IDLE),
        ("foo", ProcessorState.PREPARED),
    ]
