from fastapi import APIRouter, Depends, HTTPException

from renewal_engine.api.deps import get_clock, get_config, require_admin
from renewal_engine.config import get_settings
from renewal_engine.schemas import DeadlineConfig, RenewalCalculateRequest, RenewalCalculateResponse
from renewal_engine.services.clock import Clock
from renewal_engine.services.errors import DateOutOfRangeError, InvalidDurationError
from renewal_engine.services.renewal import (
    calculate_renewal_date,
    calculate_renewal_price,
    compute_block_dates_from_valid_until,
)

router = APIRouter(prefix="/renewals", tags=["renewals"], dependencies=[Depends(require_admin)])


@router.post("/calculate", response_model=RenewalCalculateResponse)
def calculate(
    payload: RenewalCalculateRequest,
    config: DeadlineConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
) -> RenewalCalculateResponse:
    try:
        renewal = calculate_renewal_date(payload.current_valid_until, payload.duration_years, config, clock)
        blocks = compute_block_dates_from_valid_until(renewal.new_valid_until, config)
    except (InvalidDurationError, DateOutOfRangeError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return RenewalCalculateResponse(
        new_valid_until=renewal.new_valid_until,
        old_valid_until=renewal.old_valid_until,
        soft_block=blocks.soft_block,
        hard_block=blocks.hard_block,
        session_end_year=renewal.new_valid_until.year,
        price=calculate_renewal_price(payload.duration_years, get_settings().renewal_base_fee),
    )
