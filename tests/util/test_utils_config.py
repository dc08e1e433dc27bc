from __future__ import annotations

from pathlib import Path

from util.utils import _find_project_root, config_float, config_int, config_section, load_config


def test_find_project_root_fallback(tmp_path: Path) -> None:
    # 上流に .git/pyproject.toml/configs が無い構造では start.parent.parent を返す
    a = tmp_path / "a" / "b"
    a.mkdir(parents=True)
    assert _find_project_root(a) == a.parent.parent


def test_load_config_overlays_root_config(tmp_path: Path) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text(
        "render:\n  resolution: 15\napp:\n  fps: 60\n", encoding="utf-8"
    )
    (tmp_path / "config.yaml").write_text("render:\n  resolution: 40\n", encoding="utf-8")
    cfg = load_config(tmp_path)
    # トップレベルキー単位で上書き
    assert cfg["render"] == {"resolution": 40}
    assert cfg["app"] == {"fps": 60}


def test_load_config_is_fail_soft(tmp_path: Path) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("render: [unclosed\n", encoding="utf-8")
    (tmp_path / "config.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    assert load_config(tmp_path) == {}
    assert load_config(tmp_path / "nowhere") == {}


def test_config_value_helpers() -> None:
    cfg = {"clock": {"fps": "30", "bad": "x"}, "other": 5}
    clock = config_section(cfg, "clock")
    assert config_float(clock, "fps", 60.0) == 30.0
    assert config_float(clock, "bad", 60.0) == 60.0
    assert config_int(clock, "missing", 7) == 7
    assert config_section(cfg, "other") == {}
    assert config_section(None, "clock") == {}
