from dataclasses import dataclass
from datetime import datetime, time

from renewal_engine.schemas.deadline_config import DeadlineConfig
from renewal_engine.schemas.student import Student, StudentStatus
from renewal_engine.services.calendar_math import END_OF_DAY, anchored_datetime, as_zone
from renewal_engine.services.clock import Clock, resolve_clock
from renewal_engine.services.errors import InvalidDurationError

MIN_DURATION_YEARS = 1
MAX_DURATION_YEARS = 4
# Stored hard-block checkpoints sit two cycles after the validity year.
STORED_HARD_BLOCK_OFFSET_YEARS = 2


@dataclass(frozen=True)
class RenewalDates:
    new_valid_until: datetime
    old_valid_until: datetime | None


@dataclass(frozen=True)
class BlockDates:
    soft_block: datetime
    hard_block: datetime


@dataclass(frozen=True)
class RenewalUpdate:
    student_id: str
    status: StudentStatus
    valid_until: datetime
    session_end_year: int
    soft_block: datetime
    hard_block: datetime
    last_renewal_date: datetime
    old_valid_until: datetime | None


def validate_duration(duration_years: int) -> int:
    if isinstance(duration_years, bool) or not isinstance(duration_years, int):
        raise InvalidDurationError(f"Duration must be a whole number of years, got {duration_years!r}")
    if not MIN_DURATION_YEARS <= duration_years <= MAX_DURATION_YEARS:
        raise InvalidDurationError(
            f"Duration must be between {MIN_DURATION_YEARS} and {MAX_DURATION_YEARS} years, got {duration_years}"
        )
    return duration_years


def calculate_renewal_date(
    current_valid_until: datetime | None,
    duration_years: int,
    config: DeadlineConfig,
    clock: Clock | None = None,
) -> RenewalDates:
    validate_duration(duration_years)
    zone = config.zone
    now = resolve_clock(clock=clock).now(zone)

    old_valid_until = None
    base_year = now.year
    if current_valid_until is not None:
        current = as_zone(current_valid_until, zone)
        if current > now:
            old_valid_until = current
            base_year = current.year

    anchor = config.academic_year_anchor
    new_valid_until = anchored_datetime(base_year + duration_years, anchor.month, anchor.day, END_OF_DAY, zone)
    return RenewalDates(new_valid_until=new_valid_until, old_valid_until=old_valid_until)


def compute_block_dates_from_valid_until(valid_until: datetime, config: DeadlineConfig) -> BlockDates:
    zone = config.zone
    year = as_zone(valid_until, zone).year
    soft, hard = config.soft_block, config.hard_delete

    return BlockDates(
        soft_block=anchored_datetime(year, soft.month, soft.day, time(soft.hour, soft.minute, 59, 999000), zone),
        hard_block=anchored_datetime(
            year + STORED_HARD_BLOCK_OFFSET_YEARS,
            hard.month,
            hard.day,
            time(hard.hour, hard.minute, 59, 999000),
            zone,
        ),
    )


def apply_renewal(
    student: Student,
    duration_years: int,
    config: DeadlineConfig,
    clock: Clock | None = None,
) -> RenewalUpdate:
    clock = resolve_clock(clock=clock)
    renewal = calculate_renewal_date(student.valid_until, duration_years, config, clock)
    blocks = compute_block_dates_from_valid_until(renewal.new_valid_until, config)
    return RenewalUpdate(
        student_id=student.id,
        status=StudentStatus.active,
        valid_until=renewal.new_valid_until,
        session_end_year=renewal.new_valid_until.year,
        soft_block=blocks.soft_block,
        hard_block=blocks.hard_block,
        last_renewal_date=clock.now(config.zone),
        old_valid_until=renewal.old_valid_until,
    )


def calculate_renewal_price(duration_years: int, base_fee: int) -> int:
    return validate_duration(duration_years) * base_fee


def is_service_expired(valid_until: datetime | None, config: DeadlineConfig, clock: Clock | None = None) -> bool:
    if valid_until is None:
        return True
    return as_zone(valid_until, config.zone) <= resolve_clock(clock=clock).now(config.zone)
