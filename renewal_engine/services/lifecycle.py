import logging
from dataclasses import dataclass
from datetime import datetime

from renewal_engine.config import get_settings
from renewal_engine.schemas.deadline_config import DeadlineConfig
from renewal_engine.schemas.simulation import SimulationConfig
from renewal_engine.schemas.student import Student, StudentStatus
from renewal_engine.services.calendar_math import (
    END_OF_DAY,
    anchored_datetime,
    as_zone,
    days_between,
    format_date_with_ordinal,
    is_on_or_after,
    is_same_day,
)
from renewal_engine.services.clock import Clock, is_simulating, resolve_clock
from renewal_engine.services.dates import ComputedDates, compute_dates_for_student
from renewal_engine.services.errors import IllegalTransitionError, MissingSessionDataError

logger = logging.getLogger(__name__)

# Every status must appear in each table; a missing member raises KeyError.
SOFT_BLOCK_CANDIDATES = {
    StudentStatus.active: True,
    StudentStatus.soft_blocked: False,
    StudentStatus.pending_deletion: False,
    StudentStatus.deleted: False,
}

HARD_DELETE_CANDIDATES = {
    StudentStatus.active: True,
    StudentStatus.soft_blocked: True,
    StudentStatus.pending_deletion: False,
    StudentStatus.deleted: False,
}

TRANSITIONS = {
    StudentStatus.active: {StudentStatus.soft_blocked, StudentStatus.pending_deletion},
    StudentStatus.soft_blocked: {StudentStatus.pending_deletion},
    StudentStatus.pending_deletion: {StudentStatus.deleted},
    StudentStatus.deleted: set(),
}


@dataclass(frozen=True)
class LifecycleReference:
    now: datetime
    computed: ComputedDates
    valid_until: datetime | None
    stored_soft_block: datetime | None
    stored_hard_block: datetime | None


@dataclass(frozen=True)
class LifecycleDecision:
    student_id: str
    current_status: StudentStatus
    soft_block: bool
    hard_delete: bool
    urgent_warning: bool
    next_status: StudentStatus | None
    message: str | None


def advance_status(current: StudentStatus, new_status: StudentStatus) -> StudentStatus:
    if new_status not in TRANSITIONS[current]:
        raise IllegalTransitionError(f"illegal transition {current.value} -> {new_status.value}")
    return new_status


def require_session_end_year(student: Student) -> int:
    if student.session_end_year is None:
        raise MissingSessionDataError(student.id)
    return student.session_end_year


def build_reference(
    student: Student,
    config: DeadlineConfig,
    simulation: SimulationConfig | None = None,
    clock: Clock | None = None,
) -> LifecycleReference:
    zone = config.zone
    now = resolve_clock(simulation, clock).now(zone)
    computed = compute_dates_for_student(require_session_end_year(student), config, simulation)

    if is_simulating(simulation) and simulation.sync_session_with_simulated_date:
        # The simulated cycle replaces the student's own validity and stored checkpoints.
        return LifecycleReference(
            now=now,
            computed=computed,
            valid_until=computed.service_expiry_date,
            stored_soft_block=None,
            stored_hard_block=None,
        )

    return LifecycleReference(
        now=now,
        computed=computed,
        valid_until=as_zone(student.valid_until, zone) if student.valid_until else None,
        stored_soft_block=as_zone(student.stored_soft_block, zone) if student.stored_soft_block else None,
        stored_hard_block=as_zone(student.stored_hard_block, zone) if student.stored_hard_block else None,
    )


def renewed_after_expiry(student: Student, reference: LifecycleReference) -> bool:
    if student.last_renewal_date is None or reference.valid_until is None:
        return False
    return as_zone(student.last_renewal_date, reference.now.tzinfo) > reference.valid_until


def still_valid(reference: LifecycleReference) -> bool:
    return reference.valid_until is not None and reference.valid_until > reference.now


def stored_checkpoint_reached(
    reference: LifecycleReference, checkpoint: datetime, simulation: SimulationConfig | None
) -> bool:
    # A simulated "now" is pinned to the start of the day, so compare by day.
    if is_simulating(simulation):
        return is_on_or_after(reference.now, checkpoint)
    return reference.now >= checkpoint


def should_soft_block(
    student: Student,
    config: DeadlineConfig,
    simulation: SimulationConfig | None = None,
    clock: Clock | None = None,
) -> bool:
    if not SOFT_BLOCK_CANDIDATES[student.status]:
        return False
    if student.session_end_year is None:
        return False

    reference = build_reference(student, config, simulation, clock)
    if still_valid(reference):
        return False

    if reference.stored_soft_block is not None:
        reached = stored_checkpoint_reached(reference, reference.stored_soft_block, simulation)
    else:
        reached = is_on_or_after(reference.now, reference.computed.soft_block_date)
    if not reached:
        return False

    return not renewed_after_expiry(student, reference)


def should_hard_delete(
    student: Student,
    config: DeadlineConfig,
    simulation: SimulationConfig | None = None,
    clock: Clock | None = None,
    grace_days: int | None = None,
) -> bool:
    if not HARD_DELETE_CANDIDATES[student.status]:
        return False
    if student.session_end_year is None:
        return False
    if grace_days is None:
        grace_days = get_settings().renewal_grace_days

    reference = build_reference(student, config, simulation, clock)

    if student.last_renewal_date is not None:
        days_since_renewal = days_between(as_zone(student.last_renewal_date, reference.now.tzinfo), reference.now)
        if days_since_renewal < grace_days:
            logger.info(
                "Student %s renewed %s days ago, skipping hard delete", student.id, days_since_renewal
            )
            return False

    if still_valid(reference):
        logger.info(
            "Student %s is valid until %s, skipping hard delete", student.id, reference.valid_until.isoformat()
        )
        return False

    if reference.stored_hard_block is not None:
        reached = stored_checkpoint_reached(reference, reference.stored_hard_block, simulation)
    else:
        reached = is_on_or_after(reference.now, reference.computed.hard_delete_date)
    if not reached:
        return False

    return not renewed_after_expiry(student, reference)


def get_blocking_message(
    valid_until: datetime | None,
    simulation: SimulationConfig | None,
    config: DeadlineConfig,
    clock: Clock | None = None,
) -> str:
    zone = config.zone
    if is_simulating(simulation):
        reference_year = simulation.custom_year
    elif valid_until is not None:
        reference_year = as_zone(valid_until, zone).year
    else:
        reference_year = resolve_clock(clock=clock).now(zone).year

    deadline = config.renewal_deadline
    hard = config.hard_delete
    deadline_date = anchored_datetime(reference_year, deadline.month, deadline.day, END_OF_DAY, zone)
    delete_date = anchored_datetime(reference_year + 1, hard.month, hard.day, END_OF_DAY, zone)
    office = config.contact_info.office_name or "the admin office"

    return (
        f"Your service has expired. The {deadline.label or 'renewal deadline'} was "
        f"{format_date_with_ordinal(deadline_date.date())}. Please contact {office} to renew your service. "
        f"If not renewed by {format_date_with_ordinal(delete_date.date())}, your account is scheduled for "
        f"{hard.label or 'permanent deactivation'}."
    )


def evaluate_student(
    student: Student,
    config: DeadlineConfig,
    simulation: SimulationConfig | None = None,
    clock: Clock | None = None,
    grace_days: int | None = None,
) -> LifecycleDecision:
    clock = resolve_clock(simulation, clock)
    reference = build_reference(student, config, simulation, clock)
    soft_block = should_soft_block(student, config, simulation, clock)
    hard_delete = should_hard_delete(student, config, simulation, clock, grace_days)

    next_status = None
    if hard_delete:
        next_status = advance_status(student.status, StudentStatus.pending_deletion)
    elif soft_block:
        next_status = advance_status(student.status, StudentStatus.soft_blocked)

    urgent_warning = HARD_DELETE_CANDIDATES[student.status] and is_same_day(
        reference.now, reference.computed.urgent_warning_date
    )

    message = None
    if next_status is not None or student.status is StudentStatus.soft_blocked:
        message = get_blocking_message(student.valid_until, simulation, config, clock)

    return LifecycleDecision(
        student_id=student.id,
        current_status=student.status,
        soft_block=soft_block,
        hard_delete=hard_delete,
        urgent_warning=urgent_warning,
        next_status=next_status,
        message=message,
    )
