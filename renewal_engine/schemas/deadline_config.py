import calendar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Feb 29 must stay a legal anchor, so day validity is checked against a leap year.
LEAP_REFERENCE_YEAR = 2024


class MonthDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=0, le=11)
    day: int = Field(..., ge=1, le=31)

    @model_validator(mode="after")
    def check_real_date(self) -> "MonthDay":
        last_day = calendar.monthrange(LEAP_REFERENCE_YEAR, self.month + 1)[1]
        if self.day > last_day:
            raise ValueError(f"Invalid day {self.day} for {calendar.month_name[self.month + 1]}")
        return self

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month + 1]


class LabeledMonthDay(MonthDay):
    label: str = Field(default="", max_length=255)


class TimedMonthDay(MonthDay):
    hour: int = Field(default=23, ge=0, le=23)
    minute: int = Field(default=59, ge=0, le=59)


class LabeledTimedMonthDay(TimedMonthDay):
    label: str = Field(default="", max_length=255)


class UrgentWarningThreshold(BaseModel):
    model_config = ConfigDict(frozen=True)

    days: int = Field(default=15, ge=0, le=365)


class TimelineEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, max_length=64)
    date: MonthDay
    label: str
    critical: bool = False


class ContactInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    office_name: str = ""
    phone: str = ""
    email: str = ""
    office_hours: str = ""
    address: str = ""


class DeadlineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str = "1.0.0"
    description: str = ""
    timezone: str = "UTC"
    academic_year_anchor: MonthDay = MonthDay(month=5, day=30)
    renewal_notification: MonthDay = MonthDay(month=5, day=1)
    renewal_deadline: LabeledMonthDay = LabeledMonthDay(month=6, day=1, label="renewal deadline")
    soft_block: TimedMonthDay = TimedMonthDay(month=6, day=31, hour=23, minute=59)
    hard_delete: LabeledTimedMonthDay = LabeledTimedMonthDay(
        month=7, day=31, hour=23, minute=59, label="permanent deactivation"
    )
    urgent_warning_threshold: UrgentWarningThreshold = UrgentWarningThreshold()
    timeline_events: tuple[TimelineEvent, ...] = ()
    contact_info: ContactInfo = ContactInfo()

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)
