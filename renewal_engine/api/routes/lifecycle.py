from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from renewal_engine.api.deps import get_clock, get_config, require_admin
from renewal_engine.schemas import (
    DeadlineConfig,
    DecisionResponse,
    EvaluateRequest,
    SimulateRequest,
    SimulationConfig,
    SweepResponse,
)
from renewal_engine.services.clock import Clock
from renewal_engine.services.deadline_config import apply_deadline_overrides
from renewal_engine.services.errors import ConfigValidationError, MissingSessionDataError
from renewal_engine.services.lifecycle import evaluate_student
from renewal_engine.services.sweep import SweepReport, run_lifecycle_sweep

router = APIRouter(prefix="/lifecycle", tags=["lifecycle"], dependencies=[Depends(require_admin)])


def serialize_report(report: SweepReport) -> SweepResponse:
    return SweepResponse(
        run_at=report.run_at,
        simulated=report.simulated,
        processed=report.processed,
        soft_blocks=report.soft_blocks,
        hard_deletes=report.hard_deletes,
        urgent_warnings=report.urgent_warnings,
        decisions=[DecisionResponse(**asdict(decision)) for decision in report.decisions],
        errors=[asdict(failure) for failure in report.errors],
    )


@router.post("/evaluate", response_model=DecisionResponse)
def evaluate(
    payload: EvaluateRequest,
    config: DeadlineConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
) -> DecisionResponse:
    try:
        decision = evaluate_student(payload.student, config, payload.simulation, clock)
    except MissingSessionDataError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return DecisionResponse(**asdict(decision))


@router.post("/simulate", response_model=SweepResponse)
def simulate(
    payload: SimulateRequest,
    config: DeadlineConfig = Depends(get_config),
) -> SweepResponse:
    if payload.overrides:
        try:
            config = apply_deadline_overrides(config, payload.overrides)
        except ConfigValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    simulation = SimulationConfig.for_date(
        payload.simulated_date,
        sync_session_with_simulated_date=payload.sync_session_with_simulated_date,
    )
    return serialize_report(run_lifecycle_sweep(payload.students, config, simulation))
