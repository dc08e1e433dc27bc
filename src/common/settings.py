"""
どこで: `common.settings`
何を: `SFP_*` 環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: YAML 設定（`util.utils.load_config`）より優先する実行時上書きを、既定値/型の一貫性を保って扱うため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_int, env_str


@dataclass
class _Settings:
    # Sandbox（None は YAML/既定値に委ねる）
    SANDBOX_TIME_BUDGET: float | None = None

    # Tessellation
    MAX_RESOLUTION: int = 2000
    INDICES_CACHE_MAXSIZE: int = 32
    DEBUG_SAMPLES: bool = False

    # Logging（None は YAML/既定値に委ねる）
    LOG_LEVEL: str | None = None


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込する。不正値は既定値へフォールバックし、下限は丸める。"""
    _settings.SANDBOX_TIME_BUDGET = env_float("SFP_SANDBOX_TIME_BUDGET", None, min_value=0.0)

    _settings.MAX_RESOLUTION = env_int("SFP_MAX_RESOLUTION", 2000, min_value=1) or 2000
    _settings.INDICES_CACHE_MAXSIZE = env_int("SFP_INDICES_CACHE_MAXSIZE", 32, min_value=0) or 0
    _settings.DEBUG_SAMPLES = env_bool("SFP_DEBUG_SAMPLES", False)

    _settings.LOG_LEVEL = env_str("SFP_LOG_LEVEL", None)


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
