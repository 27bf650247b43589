from datetime import datetime

from pydantic import BaseModel, Field

from renewal_engine.schemas.simulation import SimulationConfig
from renewal_engine.schemas.student import MAX_SESSION_END_YEAR


class ComputedDatesResponse(BaseModel):
    service_expiry_date: datetime
    renewal_notification_date: datetime
    renewal_deadline_date: datetime
    soft_block_date: datetime
    hard_delete_date: datetime
    urgent_warning_date: datetime
    effective_year: int
    is_simulated: bool


class ComputeDatesRequest(BaseModel):
    session_end_year: int = Field(..., ge=1970, le=MAX_SESSION_END_YEAR)
    simulation: SimulationConfig | None = None


class ComputeDatesResponse(BaseModel):
    session_end_year: int
    config_version: str
    computed_dates: ComputedDatesResponse
    days_until_soft_block: int
    days_until_hard_delete: int
