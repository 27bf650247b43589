import logging
from datetime import date

import pytest
from conftest import at, end_of

from renewal_engine.schemas import SimulationConfig, Student, StudentStatus
from renewal_engine.services.errors import IllegalTransitionError, MissingSessionDataError
from renewal_engine.services.lifecycle import (
    HARD_DELETE_CANDIDATES,
    SOFT_BLOCK_CANDIDATES,
    TRANSITIONS,
    advance_status,
    evaluate_student,
    get_blocking_message,
    should_hard_delete,
    should_soft_block,
)


def make_student(**overrides) -> Student:
    fields = {
        "id": "stu-1",
        "name": "Asha Rao",
        "session_end_year": 2026,
        "valid_until": end_of(2026, 6, 30),
        "status": StudentStatus.active,
    }
    fields.update(overrides)
    return Student(**fields)


def test_decision_tables_cover_every_status():
    for table in (SOFT_BLOCK_CANDIDATES, HARD_DELETE_CANDIDATES, TRANSITIONS):
        assert set(table) == set(StudentStatus)


def test_soft_block_after_soft_block_date(config):
    assert should_soft_block(make_student(), config, clock=at(2026, 8, 1)) is True


def test_soft_block_on_soft_block_day(config):
    assert should_soft_block(make_student(), config, clock=at(2026, 7, 31, hour=0)) is True


def test_no_soft_block_before_soft_block_date(config):
    assert should_soft_block(make_student(), config, clock=at(2026, 7, 15)) is False


@pytest.mark.parametrize(
    "status", [StudentStatus.soft_blocked, StudentStatus.pending_deletion, StudentStatus.deleted]
)
def test_soft_block_is_idempotent(config, status):
    assert should_soft_block(make_student(status=status), config, clock=at(2026, 8, 1)) is False


def test_soft_block_requires_session_end_year(config):
    assert should_soft_block(make_student(session_end_year=None), config, clock=at(2026, 8, 1)) is False


def test_no_soft_block_while_still_valid(config):
    student = make_student(valid_until=end_of(2027, 6, 30))

    assert should_soft_block(student, config, clock=at(2026, 8, 1)) is False


def test_late_renewal_prevents_soft_block(config):
    student = make_student(last_renewal_date=end_of(2026, 7, 10))

    assert should_soft_block(student, config, clock=at(2026, 8, 1)) is False


def test_renewal_before_expiry_does_not_prevent_soft_block(config):
    student = make_student(last_renewal_date=end_of(2025, 6, 1))

    assert should_soft_block(student, config, clock=at(2026, 8, 1)) is True


def test_stored_soft_block_preferred(config):
    student = make_student(stored_soft_block=end_of(2026, 9, 30))

    assert should_soft_block(student, config, clock=at(2026, 8, 1)) is False
    assert should_soft_block(student, config, clock=at(2026, 10, 1)) is True


def test_missing_valid_until_is_treated_as_expired(config):
    assert should_soft_block(make_student(valid_until=None), config, clock=at(2026, 8, 1)) is True


def test_hard_delete_after_hard_delete_date(config):
    assert should_hard_delete(make_student(), config, clock=at(2027, 9, 1)) is True
    assert should_hard_delete(make_student(status=StudentStatus.soft_blocked), config, clock=at(2027, 9, 1)) is True


def test_no_hard_delete_before_hard_delete_date(config):
    assert should_hard_delete(make_student(), config, clock=at(2027, 8, 30)) is False


@pytest.mark.parametrize("status", [StudentStatus.pending_deletion, StudentStatus.deleted])
def test_hard_delete_is_idempotent(config, status):
    assert should_hard_delete(make_student(status=status), config, clock=at(2027, 9, 1)) is False


def test_hard_delete_requires_session_end_year(config):
    assert should_hard_delete(make_student(session_end_year=None), config, clock=at(2027, 9, 1)) is False


def test_grace_period_blocks_hard_delete(config, caplog):
    student = make_student(valid_until=None, last_renewal_date=end_of(2027, 8, 20))

    with caplog.at_level(logging.INFO):
        assert should_hard_delete(student, config, clock=at(2027, 9, 1)) is False

    assert "skipping hard delete" in caplog.text


def test_grace_period_expires_after_thirty_days(config):
    student = make_student(valid_until=None, last_renewal_date=end_of(2027, 8, 2))

    assert should_hard_delete(student, config, clock=at(2027, 9, 1)) is True


def test_grace_period_length_is_configurable(config):
    student = make_student(valid_until=None, last_renewal_date=end_of(2027, 8, 20))

    assert should_hard_delete(student, config, clock=at(2027, 9, 1), grace_days=7) is True


def test_future_validity_blocks_hard_delete(config):
    student = make_student(valid_until=end_of(2028, 6, 30))

    assert should_hard_delete(student, config, clock=at(2027, 9, 1)) is False


def test_stored_hard_block_preferred(config):
    student = make_student(stored_hard_block=end_of(2028, 8, 31))

    assert should_hard_delete(student, config, clock=at(2027, 9, 1)) is False
    assert should_hard_delete(student, config, clock=at(2028, 9, 1)) is True


def test_forward_transitions():
    assert advance_status(StudentStatus.active, StudentStatus.soft_blocked) is StudentStatus.soft_blocked
    assert advance_status(StudentStatus.soft_blocked, StudentStatus.pending_deletion) is StudentStatus.pending_deletion
    assert advance_status(StudentStatus.pending_deletion, StudentStatus.deleted) is StudentStatus.deleted


@pytest.mark.parametrize(
    "current, target",
    [
        (StudentStatus.soft_blocked, StudentStatus.active),
        (StudentStatus.deleted, StudentStatus.active),
        (StudentStatus.active, StudentStatus.deleted),
        (StudentStatus.pending_deletion, StudentStatus.soft_blocked),
    ],
)
def test_illegal_transitions_raise(current, target):
    with pytest.raises(IllegalTransitionError):
        advance_status(current, target)


def test_evaluate_soft_block(config):
    decision = evaluate_student(make_student(), config, clock=at(2026, 8, 1))

    assert decision.soft_block is True
    assert decision.hard_delete is False
    assert decision.next_status is StudentStatus.soft_blocked
    assert "July 1st, 2026" in decision.message
    assert "August 31st, 2027" in decision.message


def test_evaluate_hard_delete(config):
    decision = evaluate_student(make_student(status=StudentStatus.soft_blocked), config, clock=at(2027, 9, 1))

    assert decision.soft_block is False
    assert decision.hard_delete is True
    assert decision.next_status is StudentStatus.pending_deletion


def test_evaluate_no_action(config):
    decision = evaluate_student(make_student(), config, clock=at(2026, 3, 1))

    assert decision.next_status is None
    assert decision.message is None
    assert decision.urgent_warning is False


def test_evaluate_urgent_warning_day(config):
    decision = evaluate_student(make_student(status=StudentStatus.soft_blocked), config, clock=at(2027, 8, 16))

    assert decision.urgent_warning is True
    assert decision.hard_delete is False


def test_evaluate_requires_session_end_year(config):
    with pytest.raises(MissingSessionDataError):
        evaluate_student(make_student(session_end_year=None), config, clock=at(2026, 8, 1))


def test_simulation_does_not_leak_into_real_evaluation(config):
    student = make_student(session_end_year=2030, valid_until=end_of(2030, 6, 30))
    simulation = SimulationConfig.for_date(date(2026, 8, 1))

    assert should_soft_block(student, config, simulation) is True
    assert should_soft_block(student, config, clock=at(2026, 8, 1)) is False
    assert should_soft_block(student, config, simulation) is True


def test_simulation_ignores_stored_checkpoints_when_syncing(config):
    student = make_student(stored_soft_block=end_of(2030, 7, 31))
    simulation = SimulationConfig.for_date(date(2026, 8, 1))

    assert should_soft_block(student, config, simulation) is True


def test_simulation_without_sync_keeps_stored_checkpoints(config):
    student = make_student(
        session_end_year=2030, valid_until=end_of(2030, 6, 30), stored_hard_block=end_of(2031, 8, 31)
    )

    unsynced = SimulationConfig.for_date(date(2031, 9, 1), sync_session_with_simulated_date=False)
    synced = SimulationConfig.for_date(date(2031, 9, 1))

    assert should_hard_delete(student, config, unsynced) is True
    assert should_hard_delete(student, config, synced) is False


def test_simulated_stored_soft_block_applies_on_its_day(config):
    student = make_student(stored_soft_block=end_of(2026, 9, 30))

    on_day = SimulationConfig.for_date(date(2026, 9, 30), sync_session_with_simulated_date=False)
    day_before = SimulationConfig.for_date(date(2026, 9, 29), sync_session_with_simulated_date=False)

    assert should_soft_block(student, config, on_day) is True
    assert should_soft_block(student, config, day_before) is False


def test_simulated_stored_hard_block_applies_on_its_day(config):
    student = make_student(stored_hard_block=end_of(2028, 8, 31))
    simulation = SimulationConfig.for_date(date(2028, 8, 31), sync_session_with_simulated_date=False)

    assert should_hard_delete(student, config, simulation) is True


def test_real_clock_compares_stored_checkpoint_by_instant(config):
    student = make_student(stored_soft_block=end_of(2026, 9, 30))

    assert should_soft_block(student, config, clock=at(2026, 9, 30)) is False


def test_blocking_message(config):
    message = get_blocking_message(end_of(2026, 6, 30), None, config)

    assert message == (
        "Your service has expired. The renewal deadline was July 1st, 2026. "
        "Please contact the admin office to renew your service. "
        "If not renewed by August 31st, 2027, your account is scheduled for permanent deactivation."
    )


def test_blocking_message_uses_simulated_year(config):
    simulation = SimulationConfig.for_date(date(2030, 8, 1))

    message = get_blocking_message(end_of(2026, 6, 30), simulation, config)

    assert "July 1st, 2030" in message
    assert "August 31st, 2031" in message


def test_blocking_message_without_validity_uses_current_year(config):
    message = get_blocking_message(None, None, config, clock=at(2028, 1, 5))

    assert "July 1st, 2028" in message
    assert "August 31st, 2029" in message
