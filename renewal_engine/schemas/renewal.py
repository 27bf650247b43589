from datetime import datetime

from pydantic import BaseModel, StrictInt, field_validator

from renewal_engine.schemas.student import check_valid_until_year


class RenewalCalculateRequest(BaseModel):
    current_valid_until: datetime | None = None
    duration_years: StrictInt

    @field_validator("current_valid_until")
    @classmethod
    def check_current_valid_until(cls, value: datetime | None) -> datetime | None:
        return check_valid_until_year(value)


class RenewalCalculateResponse(BaseModel):
    new_valid_until: datetime
    old_valid_until: datetime | None
    soft_block: datetime
    hard_block: datetime
    session_end_year: int
    price: int
