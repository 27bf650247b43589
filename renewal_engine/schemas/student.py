import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Hard delete falls one year after the session end year.
MAX_SESSION_END_YEAR = 9998
# A four-year renewal followed by the stored hard block two years later.
MAX_VALID_UNTIL_YEAR = 9995


def check_valid_until_year(value: datetime | None) -> datetime | None:
    if value is not None and value.year > MAX_VALID_UNTIL_YEAR:
        raise ValueError(f"valid_until year must be at most {MAX_VALID_UNTIL_YEAR}")
    return value


class StudentStatus(str, enum.Enum):
    active = "active"
    soft_blocked = "soft_blocked"
    pending_deletion = "pending_deletion"
    deleted = "deleted"


class Student(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, max_length=128)
    name: str | None = None
    email: str | None = None
    session_end_year: int | None = Field(default=None, ge=1970, le=MAX_SESSION_END_YEAR)
    valid_until: datetime | None = None
    status: StudentStatus = StudentStatus.active
    last_renewal_date: datetime | None = None
    stored_soft_block: datetime | None = None
    stored_hard_block: datetime | None = None

    @field_validator("valid_until")
    @classmethod
    def check_valid_until(cls, value: datetime | None) -> datetime | None:
        return check_valid_until_year(value)
