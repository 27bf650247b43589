from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from renewal_engine.api.deps import get_clock, get_config, require_admin
from renewal_engine.config import get_settings
from renewal_engine.schemas import (
    ComputeDatesRequest,
    ComputeDatesResponse,
    ComputedDatesResponse,
    DeadlineConfig,
    PreviewError,
    PreviewRequest,
    PreviewResponse,
)
from renewal_engine.services.clock import Clock
from renewal_engine.services.dates import compute_dates_for_student, days_until_hard_delete, days_until_soft_block
from renewal_engine.services.deadline_config import parse_deadline_config
from renewal_engine.services.errors import ConfigValidationError
from renewal_engine.services.preview import generate_date_preview, summarize_previews

router = APIRouter(prefix="/deadlines", tags=["deadlines"], dependencies=[Depends(require_admin)])


@router.get("/config", response_model=DeadlineConfig)
def show_config(config: DeadlineConfig = Depends(get_config)) -> DeadlineConfig:
    return config


@router.post("/compute", response_model=ComputeDatesResponse)
def compute_dates(
    payload: ComputeDatesRequest,
    config: DeadlineConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
) -> ComputeDatesResponse:
    computed = compute_dates_for_student(payload.session_end_year, config, payload.simulation)
    return ComputeDatesResponse(
        session_end_year=payload.session_end_year,
        config_version=config.version,
        computed_dates=ComputedDatesResponse(**asdict(computed)),
        days_until_soft_block=days_until_soft_block(payload.session_end_year, config, payload.simulation, clock),
        days_until_hard_delete=days_until_hard_delete(payload.session_end_year, config, payload.simulation, clock),
    )


@router.post("/preview", response_model=PreviewResponse)
def preview(
    payload: PreviewRequest,
    config: DeadlineConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
) -> PreviewResponse:
    if len(payload.students) > get_settings().max_preview_students:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {get_settings().max_preview_students} students can be previewed at once",
        )
    if payload.config is not None:
        try:
            config = parse_deadline_config(payload.config)
        except ConfigValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    previews = []
    errors = []
    for student in payload.students:
        result = generate_date_preview(student, config, payload.simulation, clock)
        if result is None:
            errors.append(
                PreviewError(
                    student_id=student.id,
                    student_name=student.name or "Unknown",
                    error="Student missing session end year",
                )
            )
            continue
        previews.append(result)

    return PreviewResponse(
        previews=previews,
        errors=errors,
        summary=summarize_previews(previews, len(payload.students), config, payload.simulation),
    )
