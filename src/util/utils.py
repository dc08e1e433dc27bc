"""
どこで: `util.utils`。
何を: YAML 構成の読み込み（フェイルソフト）とセクション/値の取り出しヘルパ。
なぜ: ランナー/コンポーザが既定値を一箇所（`configs/default.yaml`）から解決できるようにするため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

logger = logging.getLogger(__name__)


def _safe_load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("failed to read config %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _find_project_root(start: Path) -> Path:
    """プロジェクトルートを推定して返す。

    - 上位に `pyproject.toml`、`configs/`、`.git` のいずれかがある最も近いディレクトリ。
    - 見つからない場合は `start.parent.parent`（典型: `<repo>/src/util` -> `<repo>`）。
    """
    cur = start.resolve()
    for parent in [cur] + list(cur.parents):
        if (
            (parent / "pyproject.toml").exists()
            or (parent / "configs").exists()
            or (parent / ".git").exists()
        ):
            return parent
    return cur.parent.parent


def load_config(root: Path | None = None) -> Dict[str, Any]:
    """構成を読み込んで辞書で返す（フェイルソフト）。

    優先順:
    1) `configs/default.yaml`（ベース）
    2) ルート `config.yaml`（トップレベルキー単位で上書き）

    いずれも存在しない/不正な場合は空辞書を返す。
    """
    project_root = root if root is not None else _find_project_root(Path(__file__).parent)
    base: Dict[str, Any] = {}

    default_path = project_root / "configs" / "default.yaml"
    if default_path.exists():
        base.update(_safe_load_yaml(default_path))

    root_config_path = project_root / "config.yaml"
    if root_config_path.exists():
        base.update(_safe_load_yaml(root_config_path))

    return base


def config_section(cfg: Mapping[str, Any] | None, name: str) -> Dict[str, Any]:
    """`cfg[name]` が辞書ならそのコピーを、それ以外は空辞書を返す。"""
    if not isinstance(cfg, Mapping):
        return {}
    section = cfg.get(name)
    return dict(section) if isinstance(section, Mapping) else {}


def config_float(section: Mapping[str, Any], key: str, default: float) -> float:
    """セクションから float を取り出す（欠落/不正は既定値）。"""
    try:
        return float(section.get(key, default))
    except (TypeError, ValueError):
        return float(default)


def config_int(section: Mapping[str, Any], key: str, default: int) -> int:
    """セクションから int を取り出す（欠落/不正は既定値）。"""
    try:
        return int(section.get(key, default))
    except (TypeError, ValueError):
        return int(default)
