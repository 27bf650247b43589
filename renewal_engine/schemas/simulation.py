import calendar
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from renewal_engine.schemas.student import MAX_SESSION_END_YEAR


class SimulationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    custom_year: int | None = Field(default=None, ge=1970, le=MAX_SESSION_END_YEAR)
    custom_month: int = Field(default=0, ge=0, le=11)
    custom_day: int = Field(default=1, ge=1, le=31)
    sync_session_with_simulated_date: bool = True

    @model_validator(mode="after")
    def check_simulated_date(self) -> "SimulationConfig":
        if not self.enabled:
            return self
        if self.custom_year is None:
            raise ValueError("custom_year is required when simulation is enabled")
        last_day = calendar.monthrange(self.custom_year, self.custom_month + 1)[1]
        if self.custom_day > last_day:
            raise ValueError(f"Invalid simulated date {self.custom_year}-{self.custom_month + 1}-{self.custom_day}")
        return self

    @classmethod
    def for_date(cls, value: date, sync_session_with_simulated_date: bool = True) -> "SimulationConfig":
        return cls(
            enabled=True,
            custom_year=value.year,
            custom_month=value.month - 1,
            custom_day=value.day,
            sync_session_with_simulated_date=sync_session_with_simulated_date,
        )

    def simulated_date(self) -> date:
        return date(self.custom_year, self.custom_month + 1, self.custom_day)
