from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table
from structlog.stdlib import BoundLogger

from game_catalog.core.library.service import LibraryService
from game_catalog.core.projection.views import LibraryGameView
from game_catalog.core.search.tag_resolver import TagResolver
from game_catalog.infra.db.repositories import (
    SQLAlchemyGameRepository,
    SQLAlchemyReviewRepository,
    SQLAlchemyTagRepository,
)
from game_catalog.infra.db.session import DatabaseSessionManager
from game_catalog.shared.config import AppSettings, get_settings
from game_catalog.shared.exceptions import BaseAppError
from game_catalog.shared.logging import get_logger


class OutputFormat(str, Enum):
    """出力形式。"""

    TABLE = "table"
    JSON = "json"


@dataclass(slots=True)
class LibraryContext:
    service: LibraryService
    settings: AppSettings
    logger: BoundLogger = field(
        default_factory=lambda: get_logger(__name__, component="library-cli")
    )
    db_manager: DatabaseSessionManager | None = None

    def close(self) -> None:
        if self.db_manager is not None:
            self.db_manager.close()


app = typer.Typer(help="ライブラリの一覧・検索コマンド")


def _prepare_context(settings: AppSettings, logger: BoundLogger) -> LibraryContext:
    db_manager = DatabaseSessionManager(settings=settings, logger=logger)
    session_factory = db_manager.session_factory

    tag_resolver = TagResolver(
        catalog=SQLAlchemyTagRepository(session_factory, logger=logger),
        separator=settings.search.tag_separator,
        logger=logger,
    )
    service = LibraryService(
        games=SQLAlchemyGameRepository(session_factory, logger=logger),
        reviews=SQLAlchemyReviewRepository(session_factory, logger=logger),
        tag_resolver=tag_resolver,
        logger=logger,
    )
    return LibraryContext(
        service=service, settings=settings, logger=logger, db_manager=db_manager
    )


def load_context(logger: BoundLogger) -> LibraryContext:
    """設定を読み込みコンテキストを作る。失敗時は終了コード 1 で抜ける。"""

    try:
        settings = get_settings()
        return _prepare_context(settings=settings, logger=logger)
    except BaseAppError as exc:
        logger.error("library_context_failed", error=str(exc))
        typer.echo(f"設定の読み込みに失敗しました: {exc}")
        raise typer.Exit(code=1) from exc


def echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _render_table(title: str, items: Iterable[LibraryGameView]) -> None:
    console = Console(force_terminal=False, color_system=None)
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Platform")
    table.add_column("Release")
    table.add_column("Rating")
    table.add_column("Tags")

    for item in items:
        response = item.to_response()
        table.add_row(
            str(item.id),
            item.title,
            item.platform or "-",
            response["releaseDate"] or "-",
            f"{item.rating:.1f}" if item.rating is not None else "-",
            ", ".join(item.tags) if item.tags else "-",
        )

    console.print(table)


def _render(title: str, items: list[LibraryGameView], output: OutputFormat) -> None:
    if output is OutputFormat.JSON:
        echo_json([item.to_response() for item in items])
    else:
        _render_table(title, items)


OutputOption = Annotated[
    OutputFormat,
    typer.Option("--output", "-f", case_sensitive=False, help="出力形式(table/json)"),
]


@app.command()
def search(
    query: Annotated[
        str, typer.Option("--query", "-q", help="タイトルの部分一致（大文字小文字を区別しない）")
    ] = "",
    tags: Annotated[
        str, typer.Option("--tags", "-t", help="カンマ区切りのタグ。すべてを持つゲームに絞り込む")
    ] = "",
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """タイトルとタグでライブラリを検索する。"""

    logger = get_logger("cli.library.search", query=query, tags=tags)
    context = load_context(logger)

    try:
        results = context.service.search(query, tags)
    except BaseAppError as exc:
        logger.error("library_search_failed", error=str(exc))
        typer.echo(f"検索に失敗しました: {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        context.close()

    _render("Library Search", results, output)


@app.command("list")
def list_games(output: OutputOption = OutputFormat.TABLE) -> None:
    """ライブラリの全ゲームをタイトル順に表示する。"""

    logger = get_logger("cli.library.list")
    context = load_context(logger)

    try:
        results = context.service.list_games()
    except BaseAppError as exc:
        logger.error("library_list_failed", error=str(exc))
        typer.echo(f"一覧の取得に失敗しました: {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        context.close()

    _render("Library", results, output)


@app.command("tag-groups")
def tag_groups() -> None:
    """検索フィルタ用の標準タググループを JSON で表示する。"""

    logger = get_logger("cli.library.tag_groups")
    context = load_context(logger)
    try:
        groups = context.service.tag_groups()
    finally:
        context.close()

    echo_json({"groups": [group.to_dict() for group in groups]})


__all__ = ["OutputFormat", "app", "echo_json", "load_context"]
