from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from renewal_engine.schemas.simulation import SimulationConfig
from renewal_engine.schemas.student import MAX_SESSION_END_YEAR, Student, StudentStatus


class EvaluateRequest(BaseModel):
    student: Student
    simulation: SimulationConfig | None = None


class DecisionResponse(BaseModel):
    student_id: str
    current_status: StudentStatus
    soft_block: bool
    hard_delete: bool
    urgent_warning: bool
    next_status: StudentStatus | None
    message: str | None


class SimulateRequest(BaseModel):
    students: list[dict[str, Any]] = Field(..., min_length=1)
    simulated_date: date
    sync_session_with_simulated_date: bool = True
    overrides: dict[str, dict[str, Any]] | None = None

    @field_validator("simulated_date")
    @classmethod
    def check_simulated_year(cls, value: date) -> date:
        if value.year > MAX_SESSION_END_YEAR:
            raise ValueError(f"simulated_date year must be at most {MAX_SESSION_END_YEAR}")
        return value


class SweepFailureResponse(BaseModel):
    student_id: str
    error: str


class SweepResponse(BaseModel):
    run_at: datetime
    simulated: bool
    processed: int
    soft_blocks: int
    hard_deletes: int
    urgent_warnings: int
    decisions: list[DecisionResponse]
    errors: list[SweepFailureResponse]
