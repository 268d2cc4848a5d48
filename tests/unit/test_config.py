"""Configuration resolution: defaults, environment and overrides."""

from __future__ import annotations

import pytest

from quill.config import Config, load_env, resolve_config
from quill.errors import ConfigurationError

pytestmark = pytest.mark.unit


def test_defaults() -> None:
    assert resolve_config() == Config(max_workers=4, log_plans=False)


def test_environment_is_read(monkeypatch) -> None:
    monkeypatch.setenv("QUILL_MAX_WORKERS", "9")
    monkeypatch.setenv("QUILL_LOG_PLANS", "yes")
    monkeypatch.setenv("QUILL_UNRELATED", "ignored")

    assert load_env() == {"max_workers": "9", "log_plans": "yes"}
    assert resolve_config() == Config(max_workers=9, log_plans=True)


def test_overrides_win_over_environment(monkeypatch) -> None:
    monkeypatch.setenv("QUILL_MAX_WORKERS", "9")

    assert resolve_config({"max_workers": 2}).max_workers == 2


@pytest.mark.parametrize("raw", ["", "0", "off", "False"])
def test_false_flag_spellings(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("QUILL_LOG_PLANS", raw)
    assert resolve_config().log_plans is False


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"max_workers": 0}, "max_workers"),
        ({"max_workers": "many"}, "max_workers"),
        ({"log_plans": "maybe"}, "log_plans"),
        ({"verbose": True}, "verbose"),
    ],
)
def test_invalid_values_raise_configuration_error(overrides, field: str) -> None:
    with pytest.raises(ConfigurationError) as exc:
        resolve_config(overrides)

    assert field in str(exc.value)
    assert exc.value.hint is not None


def test_dotenv_is_loaded_before_reading_env(monkeypatch) -> None:
    def fake_load_dotenv(*_args, **_kwargs) -> bool:
        monkeypatch.setenv("QUILL_MAX_WORKERS", "3")
        return True

    monkeypatch.setattr("quill.config.load_dotenv", fake_load_dotenv)

    assert resolve_config().max_workers == 3


def test_config_is_frozen() -> None:
    with pytest.raises(AttributeError):
        Config().max_workers = 2  # type: ignore[misc]
