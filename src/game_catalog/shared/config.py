"""アプリケーション全体で共有する設定ローダー。"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

EnvName = Literal["local", "test", "staging", "production"]


class StorageSettings(BaseModel):
    """データ保存関連の設定。"""

    sqlite_path: Path = Field(Path("./var/game_catalog.db"), description="SQLite DB のパス")


class SearchSettings(BaseModel):
    """ライブラリ検索の設定。"""

    tag_separator: str = Field(
        ",", min_length=1, description="タグ指定文字列の区切り文字"
    )


class AppSettings(BaseSettings):
    """共有設定。`.env` 読み込みと環境変数バリデーションを担う。"""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: EnvName = Field("local", description="実行環境識別子")
    log_level: str = Field("INFO", description="ルートロガーのログレベル")
    log_json: bool = Field(False, description="True の場合ログを JSON で出力する")
    storage: StorageSettings = Field(default_factory=StorageSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """設定をロードし、再利用する。

    LRU キャッシュによりプロセス内での重複読み込みを防ぎ、
    `pytest` などから `get_settings.cache_clear()` を呼び出すことで再読込できる。
    """

    try:
        return AppSettings()
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


__all__ = [
    "AppSettings",
    "SearchSettings",
    "StorageSettings",
    "EnvName",
    "get_settings",
]
