"""FastAPI application entrypoint for distpack service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..orchestrator import Orchestrator, RunReport, Step


class StepRequest(BaseModel):
    path: str
    dry_run: bool = False
    distributions: Optional[List[str]] = None
    packagers: Optional[List[str]] = None


class OutcomeModel(BaseModel):
    distribution: str
    packager: str
    state: str
    error: Optional[str] = None


class StepResponse(BaseModel):
    status: str
    step: str
    dry_run: bool
    outcomes: List[OutcomeModel]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def _to_response(report: RunReport) -> StepResponse:
    return StepResponse(
        status="ok" if report.succeeded else "failed",
        step=report.step.value,
        dry_run=report.dry_run,
        outcomes=[
            OutcomeModel(
                distribution=outcome.distribution,
                packager=outcome.packager,
                state=outcome.state.value,
                error=outcome.error,
            )
            for outcome in report.outcomes
        ],
    )


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing distpack operations."""

    app = FastAPI(title="distpack Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Lazy-instantiate per request to keep state predictable.
        return orchestrator_factory()

    async def _run_step(
        step: Step, payload: StepRequest, orchestrator: Orchestrator, response: Response
    ) -> StepResponse:
        def _run() -> RunReport:
            return orchestrator.run(
                payload.path,
                step,
                dry_run=payload.dry_run,
                distributions=payload.distributions,
                packagers=payload.packagers,
            )

        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, _run)
        if not report.succeeded:
            response.status_code = 400
        return _to_response(report)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/prepare", response_model=StepResponse)
    async def prepare(
        payload: StepRequest,
        response: Response,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> StepResponse:
        return await _run_step(Step.PREPARE, payload, orchestrator, response)

    @app.post("/package", response_model=StepResponse)
    async def package(
        payload: StepRequest,
        response: Response,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> StepResponse:
        return await _run_step(Step.PACKAGE, payload, orchestrator, response)

    @app.post("/publish", response_model=StepResponse)
    async def publish(
        payload: StepRequest,
        response: Response,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> StepResponse:
        return await _run_step(Step.PUBLISH, payload, orchestrator, response)

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
