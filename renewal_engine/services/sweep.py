import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from renewal_engine.schemas.deadline_config import DeadlineConfig
from renewal_engine.schemas.simulation import SimulationConfig
from renewal_engine.schemas.student import Student
from renewal_engine.services.clock import Clock, is_simulating, resolve_clock
from renewal_engine.services.errors import DeadlineEngineError
from renewal_engine.services.lifecycle import LifecycleDecision, evaluate_student

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepFailure:
    student_id: str
    error: str


@dataclass
class SweepReport:
    run_at: datetime
    simulated: bool
    decisions: list[LifecycleDecision] = field(default_factory=list)
    errors: list[SweepFailure] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.decisions) + len(self.errors)

    @property
    def soft_blocks(self) -> int:
        return sum(1 for decision in self.decisions if decision.soft_block and not decision.hard_delete)

    @property
    def hard_deletes(self) -> int:
        return sum(1 for decision in self.decisions if decision.hard_delete)

    @property
    def urgent_warnings(self) -> int:
        return sum(1 for decision in self.decisions if decision.urgent_warning)


def record_id(record: Any) -> str:
    if isinstance(record, Student):
        return record.id
    if isinstance(record, Mapping):
        return str(record.get("id") or "unknown")
    return "unknown"


def run_lifecycle_sweep(
    records: Iterable[Student | Mapping[str, Any]],
    config: DeadlineConfig,
    simulation: SimulationConfig | None = None,
    clock: Clock | None = None,
    grace_days: int | None = None,
) -> SweepReport:
    clock = resolve_clock(simulation, clock)
    report = SweepReport(run_at=clock.now(config.zone), simulated=is_simulating(simulation))

    for record in records:
        student_id = record_id(record)
        try:
            student = record if isinstance(record, Student) else Student.model_validate(record)
            decision = evaluate_student(student, config, simulation, clock, grace_days)
        except ValidationError as exc:
            logger.warning("Skipping malformed student record %s: %s", student_id, exc.error_count())
            report.errors.append(SweepFailure(student_id=student_id, error="Malformed student record"))
            continue
        except DeadlineEngineError as exc:
            logger.warning("Skipping student %s: %s", student_id, exc)
            report.errors.append(SweepFailure(student_id=student_id, error=str(exc)))
            continue
        report.decisions.append(decision)

    logger.info(
        "Lifecycle sweep processed %s students: %s soft blocks, %s hard deletes, %s errors",
        report.processed,
        report.soft_blocks,
        report.hard_deletes,
        len(report.errors),
    )
    return report
