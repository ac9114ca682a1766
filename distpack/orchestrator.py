"""Pipeline orchestration for prepare/package/publish runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from .command import CommandExecutor
from .config import DistPackConfig, load_config
from .context import ExecutionContext
from .errors import PackagerProcessingError
from .git.publisher import RepositoryPublisher
from .logging import get_logger
from .models import Distribution
from .packagers import PackagerBackend, PackagerProcessor, ProcessorState, discover_packagers


class Step(str, Enum):
    PREPARE = "prepare"
    PACKAGE = "package"
    PUBLISH = "publish"


@dataclass
class StepOutcome:
    """Final state of one (distribution, packager) pair."""

    distribution: str
    packager: str
    state: ProcessorState
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class RunReport:
    """Aggregated outcomes of an orchestrator run."""

    step: Step
    dry_run: bool
    outcomes: List[StepOutcome] = field(default_factory=list)

    @property
    def failures(self) -> List[StepOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]

    @property
    def succeeded(self) -> bool:
        return not self.failures


class Orchestrator:
    """Runs a packaging step for every selected distribution and packager."""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        publisher: RepositoryPublisher | None = None,
        host_os: str | None = None,
    ) -> None:
        self.executor = executor
        self.publisher = publisher
        self.host_os = host_os
        self.logger = get_logger("orchestrator")

    def run(
        self,
        path: str | Path,
        step: Step | str,
        *,
        dry_run: bool = False,
        distributions: Optional[Sequence[str]] = None,
        packagers: Optional[Sequence[str]] = None,
    ) -> RunReport:
        """Run ``step`` for the project at ``path``.

        A failing pair is logged and recorded in the report; the remaining
        pairs still run.
        """
        step = Step(step)
        project_path = Path(path).expanduser().resolve()
        self.logger.info("Starting %s run for %s", step.value, project_path)

        config = load_config(project_path)
        context = ExecutionContext.create(
            config,
            dry_run=dry_run,
            logger=get_logger("packager"),
            host_os=self.host_os,
        )
        selected_distributions = self._select_distributions(config, distributions)
        backends = self._select_packagers(context, packagers)

        report = RunReport(step=step, dry_run=dry_run)
        for distribution in selected_distributions:
            for backend in backends:
                report.outcomes.append(self._run_pair(context, backend, distribution, step))

        self.logger.info(
            "Finished %s run: %d succeeded, %d failed",
            step.value,
            len(report.outcomes) - len(report.failures),
            len(report.failures),
        )
        return report

    def _run_pair(
        self,
        context: ExecutionContext,
        backend: PackagerBackend,
        distribution: Distribution,
        step: Step,
    ) -> StepOutcome:
        processor = PackagerProcessor(
            context,
            backend,
            distribution,
            executor=self.executor,
            publisher=self.publisher,
        )
        try:
            if step is Step.PREPARE:
                processor.prepare()
            elif step is Step.PACKAGE:
                processor.package()
            else:
                processor.package()
                processor.publish()
        except PackagerProcessingError as exc:
            self.logger.error(
                "%s of %s with %s failed: %s",
                step.value.capitalize(),
                distribution.name,
                backend.name,
                exc,
            )
            return StepOutcome(distribution.name, backend.name, processor.state, str(exc))
        return StepOutcome(distribution.name, backend.name, processor.state)

    @staticmethod
    def _select_distributions(
        config: DistPackConfig, requested: Optional[Sequence[str]]
    ) -> List[Distribution]:
        if not requested:
            return list(config.distributions.values())
        missing = [name for name in requested if name not in config.distributions]
        if missing:
            raise ValueError(f"Unknown distributions requested: {', '.join(sorted(missing))}")
        return [config.distributions[name] for name in requested]

    def _select_packagers(
        self, context: ExecutionContext, requested: Optional[Sequence[str]]
    ) -> List[PackagerBackend]:
        configured = context.config.packagers
        if requested:
            backends = discover_packagers(context, requested)
            missing = [backend.name for backend in backends if backend.name not in configured]
            if missing:
                raise ValueError(f"Packagers not configured: {', '.join(sorted(missing))}")
        else:
            backends = [
                backend
                for backend in discover_packagers(context)
                if backend.name in configured
            ]

        selected: List[PackagerBackend] = []
        for backend in backends:
            if not backend.enabled:
                self.logger.info("Packager %s is disabled", backend.name)
                continue
            selected.append(backend)
        return selected


__all__ = ["Orchestrator", "RunReport", "Step", "StepOutcome"]
