from dataclasses import asdict

from renewal_engine.schemas.deadline_config import DeadlineConfig
from renewal_engine.schemas.deadlines import ComputedDatesResponse
from renewal_engine.schemas.preview import (
    DaysUntil,
    FormattedDates,
    PreviewResult,
    PreviewSummary,
    TodayActions,
)
from renewal_engine.schemas.simulation import SimulationConfig
from renewal_engine.schemas.student import Student
from renewal_engine.services.calendar_math import (
    as_zone,
    days_between,
    format_date_with_ordinal,
    is_same_day,
)
from renewal_engine.services.clock import Clock, is_simulating, resolve_clock
from renewal_engine.services.dates import compute_dates_for_student
from renewal_engine.services.lifecycle import HARD_DELETE_CANDIDATES, SOFT_BLOCK_CANDIDATES


def generate_date_preview(
    student: Student,
    config: DeadlineConfig,
    simulation: SimulationConfig | None = None,
    clock: Clock | None = None,
) -> PreviewResult | None:
    if student.session_end_year is None:
        return None

    zone = config.zone
    today = resolve_clock(simulation, clock).now(zone)
    computed = compute_dates_for_student(student.session_end_year, config, simulation)

    return PreviewResult(
        student_id=student.id,
        student_name=student.name or "Unknown",
        student_email=student.email,
        session_end_year=student.session_end_year,
        current_status=student.status,
        valid_until=as_zone(student.valid_until, zone) if student.valid_until else None,
        computed_dates=ComputedDatesResponse(**asdict(computed)),
        formatted_dates=FormattedDates(
            service_expiry=format_date_with_ordinal(computed.service_expiry_date.date()),
            renewal_notification=format_date_with_ordinal(computed.renewal_notification_date.date()),
            renewal_deadline=format_date_with_ordinal(computed.renewal_deadline_date.date()),
            soft_block=format_date_with_ordinal(computed.soft_block_date.date()),
            hard_delete=format_date_with_ordinal(computed.hard_delete_date.date()),
            urgent_warning=format_date_with_ordinal(computed.urgent_warning_date.date()),
        ),
        today_actions=TodayActions(
            would_soft_block=SOFT_BLOCK_CANDIDATES[student.status]
            and is_same_day(today, computed.soft_block_date),
            would_send_urgent_warning=HARD_DELETE_CANDIDATES[student.status]
            and is_same_day(today, computed.urgent_warning_date),
            would_hard_delete=HARD_DELETE_CANDIDATES[student.status]
            and is_same_day(today, computed.hard_delete_date),
        ),
        days_until=DaysUntil(
            service_expiry=days_between(today, computed.service_expiry_date),
            renewal_deadline=days_between(today, computed.renewal_deadline_date),
            soft_block=days_between(today, computed.soft_block_date),
            hard_delete=days_between(today, computed.hard_delete_date),
            urgent_warning=days_between(today, computed.urgent_warning_date),
        ),
        is_simulation=computed.is_simulated,
        simulation_year=computed.effective_year if computed.is_simulated else None,
        preview_date=today,
    )


def summarize_previews(
    previews: list[PreviewResult],
    total_students: int,
    config: DeadlineConfig,
    simulation: SimulationConfig | None = None,
) -> PreviewSummary:
    simulating = is_simulating(simulation)
    return PreviewSummary(
        total_students=total_students,
        successful_previews=len(previews),
        would_soft_block=sum(1 for preview in previews if preview.today_actions.would_soft_block),
        would_hard_delete=sum(1 for preview in previews if preview.today_actions.would_hard_delete),
        config_version=config.version,
        simulation_mode=simulating,
        simulation_year=simulation.custom_year if simulating else None,
    )
