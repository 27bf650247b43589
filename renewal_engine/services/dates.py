from dataclasses import dataclass
from datetime import datetime, timedelta

from renewal_engine.schemas.deadline_config import DeadlineConfig
from renewal_engine.schemas.simulation import SimulationConfig
from renewal_engine.services.calendar_math import (
    END_OF_DAY,
    START_OF_DAY,
    anchored_datetime,
    days_between,
    start_of_day,
)
from renewal_engine.services.clock import Clock, is_simulating, resolve_clock


@dataclass(frozen=True)
class ComputedDates:
    service_expiry_date: datetime
    renewal_notification_date: datetime
    renewal_deadline_date: datetime
    soft_block_date: datetime
    hard_delete_date: datetime
    urgent_warning_date: datetime
    effective_year: int
    is_simulated: bool


def effective_year_for(session_end_year: int, simulation: SimulationConfig | None = None) -> int:
    if is_simulating(simulation):
        return simulation.custom_year
    return session_end_year


def compute_dates_for_student(
    session_end_year: int,
    config: DeadlineConfig,
    simulation: SimulationConfig | None = None,
) -> ComputedDates:
    zone = config.zone
    year = effective_year_for(session_end_year, simulation)

    hard_delete_date = anchored_datetime(
        year + 1, config.hard_delete.month, config.hard_delete.day, END_OF_DAY, zone
    )
    urgent_warning_date = start_of_day(
        hard_delete_date - timedelta(days=config.urgent_warning_threshold.days)
    )

    return ComputedDates(
        service_expiry_date=anchored_datetime(
            year, config.academic_year_anchor.month, config.academic_year_anchor.day, END_OF_DAY, zone
        ),
        renewal_notification_date=anchored_datetime(
            year, config.renewal_notification.month, config.renewal_notification.day, START_OF_DAY, zone
        ),
        renewal_deadline_date=anchored_datetime(
            year, config.renewal_deadline.month, config.renewal_deadline.day, END_OF_DAY, zone
        ),
        soft_block_date=anchored_datetime(
            year, config.soft_block.month, config.soft_block.day, END_OF_DAY, zone
        ),
        hard_delete_date=hard_delete_date,
        urgent_warning_date=urgent_warning_date,
        effective_year=year,
        is_simulated=is_simulating(simulation),
    )


def days_until_soft_block(
    session_end_year: int,
    config: DeadlineConfig,
    simulation: SimulationConfig | None = None,
    clock: Clock | None = None,
) -> int:
    now = resolve_clock(simulation, clock).now(config.zone)
    computed = compute_dates_for_student(session_end_year, config, simulation)
    return max(0, days_between(now, computed.soft_block_date))


def days_until_hard_delete(
    session_end_year: int,
    config: DeadlineConfig,
    simulation: SimulationConfig | None = None,
    clock: Clock | None = None,
) -> int:
    now = resolve_clock(simulation, clock).now(config.zone)
    computed = compute_dates_for_student(session_end_year, config, simulation)
    return max(0, days_between(now, computed.hard_delete_date))


@dataclass(frozen=True)
class TimelineDate:
    id: str
    label: str
    date: datetime
    critical: bool


def timeline_events_for_year(config: DeadlineConfig, year: int) -> list[TimelineDate]:
    return [
        TimelineDate(
            id=event.id,
            label=event.label,
            date=anchored_datetime(year, event.date.month, event.date.day, START_OF_DAY, config.zone),
            critical=event.critical,
        )
        for event in config.timeline_events
    ]
