from __future__ import annotations

import typer

from game_catalog.cli.commands import db, games, library
from game_catalog.shared.config import get_settings
from game_catalog.shared.exceptions import ConfigurationError
from game_catalog.shared.logging import configure_from_settings, configure_logging

app = typer.Typer(help="ゲームカタログ・レビュー検索ツールのCLI")

app.add_typer(db.app, name="db", help="データベースの初期化とサンプル投入")
app.add_typer(library.app, name="library", help="ライブラリの一覧・タグ検索")
app.add_typer(games.app, name="games", help="ゲーム詳細とレビュー")


def main() -> None:
    """エントリポイント。"""

    try:
        configure_from_settings(get_settings())
    except ConfigurationError:
        configure_logging()
    app()


if __name__ == "__main__":  # pragma: no cover - CLI エントリ
    main()
