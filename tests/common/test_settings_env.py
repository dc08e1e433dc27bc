from __future__ import annotations

import logging

import pytest

from common import settings
from common.env import env_bool, env_float, env_int, env_str
from common.logging import resolve_level


@pytest.fixture()
def reset_settings(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "SFP_SANDBOX_TIME_BUDGET",
        "SFP_MAX_RESOLUTION",
        "SFP_INDICES_CACHE_MAXSIZE",
        "SFP_DEBUG_SAMPLES",
        "SFP_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    monkeypatch.undo()
    settings.reload_from_env()


def test_env_int_parsing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SFP_TEST_INT", " 12 ")
    assert env_int("SFP_TEST_INT", 3) == 12
    monkeypatch.setenv("SFP_TEST_INT", "abc")
    assert env_int("SFP_TEST_INT", 3) == 3
    monkeypatch.setenv("SFP_TEST_INT", "-5")
    assert env_int("SFP_TEST_INT", 3, min_value=0) == 0
    monkeypatch.delenv("SFP_TEST_INT")
    assert env_int("SFP_TEST_INT", None) is None


@pytest.mark.parametrize("raw,expected", [("1.5", 1.5), ("nan", None), ("inf", None), ("x", None)])
def test_env_float_rejects_non_finite(monkeypatch: pytest.MonkeyPatch, raw: str, expected) -> None:
    monkeypatch.setenv("SFP_TEST_FLOAT", raw)
    assert env_float("SFP_TEST_FLOAT", None) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [("1", True), ("0", False), ("yes", True), ("OFF", False), ("maybe", False)],
)
def test_env_bool_words(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("SFP_TEST_BOOL", raw)
    assert env_bool("SFP_TEST_BOOL", False) is expected


def test_env_str_blank_is_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SFP_TEST_STR", "   ")
    assert env_str("SFP_TEST_STR", "d") == "d"


def test_settings_defaults(reset_settings) -> None:
    settings.reload_from_env()
    s = settings.get()
    assert s.SANDBOX_TIME_BUDGET is None
    assert s.MAX_RESOLUTION == 2000
    assert s.INDICES_CACHE_MAXSIZE == 32
    assert s.DEBUG_SAMPLES is False
    assert s.LOG_LEVEL is None


def test_settings_read_environment(reset_settings) -> None:
    reset_settings.setenv("SFP_MAX_RESOLUTION", "0")
    reset_settings.setenv("SFP_INDICES_CACHE_MAXSIZE", "-1")
    reset_settings.setenv("SFP_DEBUG_SAMPLES", "true")
    reset_settings.setenv("SFP_LOG_LEVEL", "debug")
    settings.reload_from_env()
    s = settings.get()
    # 下限へ丸める
    assert s.MAX_RESOLUTION == 1
    assert s.INDICES_CACHE_MAXSIZE == 0
    assert s.DEBUG_SAMPLES is True
    assert s.LOG_LEVEL == "debug"


def test_resolve_level() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Warning ") == logging.WARNING
    assert resolve_level(None) == logging.INFO
    assert resolve_level("nonsense", logging.ERROR) == logging.ERROR
    assert resolve_level(30) == 30
