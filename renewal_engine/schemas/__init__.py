from renewal_engine.schemas.deadline_config import DeadlineConfig
from renewal_engine.schemas.deadlines import ComputeDatesRequest, ComputeDatesResponse, ComputedDatesResponse
from renewal_engine.schemas.lifecycle import DecisionResponse, EvaluateRequest, SimulateRequest, SweepResponse
from renewal_engine.schemas.preview import PreviewError, PreviewRequest, PreviewResponse, PreviewResult
from renewal_engine.schemas.renewal import RenewalCalculateRequest, RenewalCalculateResponse
from renewal_engine.schemas.simulation import SimulationConfig
from renewal_engine.schemas.student import Student, StudentStatus

__all__ = [
    "DeadlineConfig",
    "ComputeDatesRequest",
    "ComputeDatesResponse",
    "ComputedDatesResponse",
    "DecisionResponse",
    "EvaluateRequest",
    "SimulateRequest",
    "SweepResponse",
    "PreviewError",
    "PreviewRequest",
    "PreviewResponse",
    "PreviewResult",
    "RenewalCalculateRequest",
    "RenewalCalculateResponse",
    "SimulationConfig",
    "Student",
    "StudentStatus",
]
