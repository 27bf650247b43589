from dataclasses import dataclass
from datetime import datetime, time, tzinfo
from typing import Protocol

from renewal_engine.schemas.simulation import SimulationConfig
from renewal_engine.utils.time import utcnow


class Clock(Protocol):
    def now(self, zone: tzinfo) -> datetime: ...


class SystemClock:
    def now(self, zone: tzinfo) -> datetime:
        return utcnow().astimezone(zone)


@dataclass(frozen=True)
class FixedClock:
    moment: datetime

    def now(self, zone: tzinfo) -> datetime:
        if self.moment.tzinfo is None:
            return self.moment.replace(tzinfo=zone)
        return self.moment.astimezone(zone)


@dataclass(frozen=True)
class SimulatedClock:
    simulation: SimulationConfig

    def now(self, zone: tzinfo) -> datetime:
        return datetime.combine(self.simulation.simulated_date(), time(0, 0), tzinfo=zone)


def is_simulating(simulation: SimulationConfig | None) -> bool:
    return simulation is not None and simulation.enabled


def resolve_clock(simulation: SimulationConfig | None = None, clock: Clock | None = None) -> Clock:
    if is_simulating(simulation):
        return SimulatedClock(simulation)
    return clock or SystemClock()
