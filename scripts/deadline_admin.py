import argparse
import json
import logging
from datetime import date, datetime, time, timezone
from pathlib import Path

from renewal_engine.config import get_settings
from renewal_engine.schemas import DeadlineConfig, SimulationConfig, Student
from renewal_engine.services.calendar_math import format_date_with_ordinal
from renewal_engine.services.dates import compute_dates_for_student
from renewal_engine.services.deadline_config import get_deadline_config
from renewal_engine.services.errors import ConfigValidationError, DateOutOfRangeError, InvalidDurationError
from renewal_engine.services.preview import generate_date_preview
from renewal_engine.services.renewal import calculate_renewal_date, compute_block_dates_from_valid_until
from renewal_engine.services.sweep import run_lifecycle_sweep


def parse_datetime(value: str) -> datetime:
    if "T" not in value:
        parsed_date = date.fromisoformat(value)
        parsed = datetime.combine(parsed_date, time(23, 59, 59))
    else:
        parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_simulation(value: str | None) -> SimulationConfig | None:
    if not value:
        return None
    return SimulationConfig.for_date(date.fromisoformat(value))


def read_students(path: str) -> list[dict]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = [data]
    return data


def show_config(config: DeadlineConfig) -> int:
    print(f"version: {config.version}")
    print(f"timezone: {config.timezone}")
    anchor = config.academic_year_anchor
    print(f"academic_year_anchor: {anchor.month_name} {anchor.day}")
    print(f"renewal_notification: {config.renewal_notification.month_name} {config.renewal_notification.day}")
    print(f"renewal_deadline: {config.renewal_deadline.month_name} {config.renewal_deadline.day}")
    soft = config.soft_block
    print(f"soft_block: {soft.month_name} {soft.day} {soft.hour:02d}:{soft.minute:02d}")
    hard = config.hard_delete
    print(f"hard_delete: {hard.month_name} {hard.day} {hard.hour:02d}:{hard.minute:02d} (next cycle)")
    print(f"urgent_warning_days: {config.urgent_warning_threshold.days}")
    return 0


def compute(config: DeadlineConfig, session_end_year: int, simulation: SimulationConfig | None) -> int:
    try:
        computed = compute_dates_for_student(session_end_year, config, simulation)
    except DateOutOfRangeError as exc:
        print(str(exc))
        return 1
    print(f"effective_year: {computed.effective_year}")
    print(f"service_expiry: {format_date_with_ordinal(computed.service_expiry_date.date())}")
    print(f"renewal_notification: {format_date_with_ordinal(computed.renewal_notification_date.date())}")
    print(f"renewal_deadline: {format_date_with_ordinal(computed.renewal_deadline_date.date())}")
    print(f"soft_block: {format_date_with_ordinal(computed.soft_block_date.date())}")
    print(f"hard_delete: {format_date_with_ordinal(computed.hard_delete_date.date())}")
    print(f"urgent_warning: {format_date_with_ordinal(computed.urgent_warning_date.date())}")
    return 0


def renew(config: DeadlineConfig, valid_until: datetime | None, years: int) -> int:
    try:
        renewal = calculate_renewal_date(valid_until, years, config)
        blocks = compute_block_dates_from_valid_until(renewal.new_valid_until, config)
    except (InvalidDurationError, DateOutOfRangeError) as exc:
        print(str(exc))
        return 1
    old = renewal.old_valid_until.isoformat() if renewal.old_valid_until else "expired/new"
    print(f"old_valid_until: {old}")
    print(f"new_valid_until: {renewal.new_valid_until.isoformat()}")
    print(f"soft_block: {blocks.soft_block.isoformat()}")
    print(f"hard_block: {blocks.hard_block.isoformat()}")
    return 0


def preview(config: DeadlineConfig, path: str, simulation: SimulationConfig | None) -> int:
    students = [Student.model_validate(record) for record in read_students(path)]
    if not students:
        print("No students found")
        return 0
    for student in students:
        result = generate_date_preview(student, config, simulation)
        if result is None:
            print(f"{student.id}\tmissing session end year")
            continue
        print(
            f"{result.student_id}\t{result.current_status.value}\t"
            f"soft_block in {result.days_until.soft_block}d\t"
            f"hard_delete in {result.days_until.hard_delete}d\t"
            f"today: soft={result.today_actions.would_soft_block} hard={result.today_actions.would_hard_delete}"
        )
    return 0


def sweep(config: DeadlineConfig, path: str, simulation: SimulationConfig | None) -> int:
    report = run_lifecycle_sweep(read_students(path), config, simulation)
    for decision in report.decisions:
        next_status = decision.next_status.value if decision.next_status else "-"
        print(f"{decision.student_id}\t{decision.current_status.value}\t{next_status}")
    for failure in report.errors:
        print(f"{failure.student_id}\terror\t{failure.error}")
    print(f"processed: {report.processed}, soft_blocks: {report.soft_blocks}, hard_deletes: {report.hard_deletes}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Admin console for renewal deadlines")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("show-config")

    compute_parser = subparsers.add_parser("compute")
    compute_parser.add_argument("--session-end-year", type=int, required=True)
    compute_parser.add_argument("--simulate-date", default=None)

    renew_parser = subparsers.add_parser("renew")
    renew_parser.add_argument("--valid-until", default=None)
    renew_parser.add_argument("--years", type=int, required=True)

    preview_parser = subparsers.add_parser("preview")
    preview_parser.add_argument("--file", required=True)
    preview_parser.add_argument("--simulate-date", default=None)

    sweep_parser = subparsers.add_parser("sweep")
    sweep_parser.add_argument("--file", required=True)
    sweep_parser.add_argument("--simulate-date", default=None)

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(level=get_settings().log_level)

    try:
        config = get_deadline_config()
    except ConfigValidationError as exc:
        print(str(exc))
        return 1

    if args.command == "show-config":
        return show_config(config)
    if args.command == "compute":
        return compute(config, args.session_end_year, parse_simulation(args.simulate_date))
    if args.command == "renew":
        valid_until = parse_datetime(args.valid_until) if args.valid_until else None
        return renew(config, valid_until, args.years)
    if args.command == "preview":
        return preview(config, args.file, parse_simulation(args.simulate_date))
    if args.command == "sweep":
        return sweep(config, args.file, parse_simulation(args.simulate_date))
    print("Unknown command")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
