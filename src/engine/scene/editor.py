"""
どこで: `engine.scene.editor`。
何を: エディタの現在テキストを取り出す pull 型インターフェースと、メモリ/ファイルの 2 実装。
なぜ: コンポーザがテキストウィジェットに依存せず、コンパイル要求のたびに最新テキストを引けるようにするため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class EditorSource(Protocol):
    def get_current_text(self) -> str: ...


class TextEditorSource:
    """メモリ上のテキスト（テスト/埋め込み用）。"""

    def __init__(self, text: str = "") -> None:
        self._text = text

    def set_text(self, text: str) -> None:
        self._text = text

    def get_current_text(self) -> str:
        return self._text


class FileEditorSource:
    """UTF-8 ファイルを都度読み込む。読めない場合は空文字として扱い WARNING を出す。"""

    def __init__(self, path: str | Path, *, encoding: str = "utf-8") -> None:
        self._path = Path(path)
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    def get_current_text(self) -> str:
        try:
            return self._path.read_text(encoding=self._encoding)
        except FileNotFoundError:
            logger.warning("editor file not found: %s", self._path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("failed to read editor file %s: %s", self._path, e)
        return ""

    def __repr__(self) -> str:
        return f"FileEditorSource({str(self._path)!r})"


__all__ = ["EditorSource", "TextEditorSource", "FileEditorSource"]
