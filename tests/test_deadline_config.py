import json

import pytest
from pydantic import ValidationError

from renewal_engine.config import get_settings
from renewal_engine.schemas import DeadlineConfig
from renewal_engine.services.deadline_config import (
    apply_deadline_overrides,
    get_deadline_config,
    load_deadline_config,
    parse_deadline_config,
)
from renewal_engine.services.errors import ConfigValidationError


def test_defaults_match_academic_calendar(config):
    assert (config.academic_year_anchor.month, config.academic_year_anchor.day) == (5, 30)
    assert (config.soft_block.month, config.soft_block.day) == (6, 31)
    assert (config.hard_delete.month, config.hard_delete.day) == (7, 31)
    assert config.urgent_warning_threshold.days == 15


def test_rejects_day_not_in_month():
    with pytest.raises(ConfigValidationError) as exc_info:
        parse_deadline_config({"soft_block": {"month": 1, "day": 30}})

    assert "Invalid day 30 for February" in str(exc_info.value)


def test_rejects_april_31():
    with pytest.raises(ConfigValidationError):
        parse_deadline_config({"academic_year_anchor": {"month": 3, "day": 31}})


@pytest.mark.parametrize("month", [-1, 12])
def test_rejects_month_out_of_range(month):
    with pytest.raises(ConfigValidationError):
        parse_deadline_config({"renewal_notification": {"month": month, "day": 1}})


def test_accepts_feb_29_anchor():
    config = parse_deadline_config({"hard_delete": {"month": 1, "day": 29}})

    assert config.hard_delete.day == 29


def test_rejects_unknown_timezone():
    with pytest.raises(ConfigValidationError):
        parse_deadline_config({"timezone": "Mars/Olympus_Mons"})


def test_config_is_immutable(config):
    with pytest.raises(ValidationError):
        config.version = "2.0.0"


def test_load_from_file(tmp_path):
    path = tmp_path / "deadlines.json"
    path.write_text(
        json.dumps({"version": "2.1.0", "timezone": "Asia/Kolkata", "urgent_warning_threshold": {"days": 30}}),
        encoding="utf-8",
    )

    config = load_deadline_config(path)

    assert config.version == "2.1.0"
    assert config.timezone == "Asia/Kolkata"
    assert config.urgent_warning_threshold.days == 30


def test_load_rejects_invalid_json(tmp_path):
    path = tmp_path / "deadlines.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigValidationError):
        load_deadline_config(path)


def test_load_rejects_missing_file(tmp_path):
    with pytest.raises(ConfigValidationError, match="Cannot read deadline configuration"):
        load_deadline_config(tmp_path / "missing.json")


def test_load_rejects_non_object(tmp_path):
    path = tmp_path / "deadlines.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ConfigValidationError):
        load_deadline_config(path)


def test_get_deadline_config_reads_configured_path(tmp_path, monkeypatch):
    path = tmp_path / "deadlines.json"
    path.write_text(json.dumps({"version": "9.9.9"}), encoding="utf-8")
    monkeypatch.setenv("DEADLINE_CONFIG_PATH", str(path))
    get_settings.cache_clear()
    get_deadline_config.cache_clear()
    try:
        assert get_deadline_config().version == "9.9.9"
    finally:
        monkeypatch.delenv("DEADLINE_CONFIG_PATH")
        get_settings.cache_clear()
        get_deadline_config.cache_clear()


def test_overrides_return_new_config(config):
    updated = apply_deadline_overrides(config, {"soft_block": {"month": 7, "day": 15}})

    assert (updated.soft_block.month, updated.soft_block.day) == (7, 15)
    assert updated.soft_block.hour == config.soft_block.hour
    assert (config.soft_block.month, config.soft_block.day) == (6, 31)


def test_overrides_are_validated(config):
    with pytest.raises(ConfigValidationError):
        apply_deadline_overrides(config, {"hard_delete": {"month": 10, "day": 31}})


def test_overrides_reject_unknown_sections(config):
    with pytest.raises(ConfigValidationError):
        apply_deadline_overrides(config, {"academic_year_anchor": {"month": 4, "day": 1}})


def test_config_validation_error_is_value_error():
    with pytest.raises(ValueError):
        parse_deadline_config({"renewal_deadline": {"month": 5, "day": 31}})


def test_direct_construction_uses_defaults():
    assert DeadlineConfig().version == "1.0.0"
