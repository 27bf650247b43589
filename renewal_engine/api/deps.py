import hmac

from fastapi import Header, HTTPException

from renewal_engine.config import get_settings
from renewal_engine.schemas.deadline_config import DeadlineConfig
from renewal_engine.services.clock import Clock, SystemClock
from renewal_engine.services.deadline_config import get_deadline_config
from renewal_engine.services.errors import ConfigValidationError


def require_admin(x_admin_token: str | None = Header(default=None)) -> None:
    admin_token = get_settings().admin_token
    if not admin_token:
        raise HTTPException(status_code=503, detail="Admin token not configured")
    if not x_admin_token or not hmac.compare_digest(x_admin_token, admin_token):
        raise HTTPException(status_code=401, detail="Admin token invalid")


def get_config() -> DeadlineConfig:
    try:
        return get_deadline_config()
    except ConfigValidationError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def get_clock() -> Clock:
    return SystemClock()
