import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from renewal_engine.config import get_settings
from renewal_engine.schemas.deadline_config import DeadlineConfig
from renewal_engine.services.errors import ConfigValidationError

logger = logging.getLogger(__name__)

OVERRIDABLE_SECTIONS = ("renewal_deadline", "soft_block", "hard_delete")


def describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "config"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def parse_deadline_config(data: dict[str, Any]) -> DeadlineConfig:
    try:
        return DeadlineConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid deadline configuration: {describe_validation_error(exc)}") from exc


def load_deadline_config(path: str | Path) -> DeadlineConfig:
    config_path = Path(path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigValidationError(f"Cannot read deadline configuration {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigValidationError(f"Deadline configuration {config_path} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ConfigValidationError(f"Deadline configuration {config_path} must be a JSON object")
    config = parse_deadline_config(data)
    logger.info("Loaded deadline configuration %s from %s", config.version, config_path)
    return config


@lru_cache
def get_deadline_config() -> DeadlineConfig:
    path = get_settings().deadline_config_path
    if not path:
        return DeadlineConfig()
    return load_deadline_config(path)


def apply_deadline_overrides(config: DeadlineConfig, overrides: dict[str, dict[str, Any]]) -> DeadlineConfig:
    unknown = set(overrides) - set(OVERRIDABLE_SECTIONS)
    if unknown:
        raise ConfigValidationError(f"Cannot override sections: {', '.join(sorted(unknown))}")

    data = config.model_dump()
    for section, values in overrides.items():
        data[section] = {**data[section], **values}
    return parse_deadline_config(data)
