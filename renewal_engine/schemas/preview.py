from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from renewal_engine.schemas.deadlines import ComputedDatesResponse
from renewal_engine.schemas.simulation import SimulationConfig
from renewal_engine.schemas.student import Student, StudentStatus


class TodayActions(BaseModel):
    would_soft_block: bool
    would_send_urgent_warning: bool
    would_hard_delete: bool


class DaysUntil(BaseModel):
    service_expiry: int
    renewal_deadline: int
    soft_block: int
    hard_delete: int
    urgent_warning: int


class FormattedDates(BaseModel):
    service_expiry: str
    renewal_notification: str
    renewal_deadline: str
    soft_block: str
    hard_delete: str
    urgent_warning: str


class PreviewResult(BaseModel):
    student_id: str
    student_name: str
    student_email: str | None = None
    session_end_year: int
    current_status: StudentStatus
    valid_until: datetime | None = None
    computed_dates: ComputedDatesResponse
    formatted_dates: FormattedDates
    today_actions: TodayActions
    days_until: DaysUntil
    is_simulation: bool
    simulation_year: int | None = None
    preview_date: datetime


class PreviewError(BaseModel):
    student_id: str
    student_name: str
    error: str


class PreviewSummary(BaseModel):
    total_students: int
    successful_previews: int
    would_soft_block: int
    would_hard_delete: int
    config_version: str
    simulation_mode: bool
    simulation_year: int | None = None


class PreviewRequest(BaseModel):
    students: list[Student] = Field(..., min_length=1)
    simulation: SimulationConfig | None = None
    config: dict[str, Any] | None = None


class PreviewResponse(BaseModel):
    previews: list[PreviewResult]
    errors: list[PreviewError]
    summary: PreviewSummary
