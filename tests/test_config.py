import pytest

from planning_engine.config import EngineConfig


def test_defaults():
    config = EngineConfig.from_env({})
    assert config == EngineConfig()
    assert config.week_start == "sunday"
    assert config.cycle_week_count == 12
    assert config.authentic_weekly_cap == 14
    assert config.min_display_minutes == 30


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("PLANNING_ENGINE_WEEK_START", "Monday")
    monkeypatch.setenv("PLANNING_ENGINE_CYCLE_WEEK_COUNT", "13")
    monkeypatch.setenv("PLANNING_ENGINE_MONTH_PADDING_DAYS", "0")
    monkeypatch.setenv("PLANNING_ENGINE_LOG_LEVEL", "debug")
    config = EngineConfig.from_env()
    assert config.week_start == "monday"
    assert config.cycle_week_count == 13
    assert config.month_padding_days == 0
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize(
    "environ",
    [
        {"PLANNING_ENGINE_WEEK_START": "friday"},
        {"PLANNING_ENGINE_CYCLE_WEEK_COUNT": "twelve"},
        {"PLANNING_ENGINE_AUTHENTIC_WEEKLY_CAP": "0"},
        {"PLANNING_ENGINE_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values_raise(environ):
    with pytest.raises(ValueError):
        EngineConfig.from_env(environ)
