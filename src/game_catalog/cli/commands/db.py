from __future__ import annotations

from typing import Annotated

import typer
from sqlalchemy.exc import SQLAlchemyError
from structlog.stdlib import BoundLogger

from game_catalog.infra.db.seed import CatalogSeeder
from game_catalog.infra.db.session import DatabaseSessionManager
from game_catalog.shared.config import AppSettings, get_settings
from game_catalog.shared.exceptions import BaseAppError
from game_catalog.shared.logging import get_logger

app = typer.Typer(help="データベースの初期化とサンプル投入")


def _prepare_manager(settings: AppSettings, logger: BoundLogger) -> DatabaseSessionManager:
    return DatabaseSessionManager(settings=settings, logger=logger)


def _open_manager(logger: BoundLogger) -> DatabaseSessionManager:
    try:
        return _prepare_manager(get_settings(), logger)
    except BaseAppError as exc:
        logger.error("db_context_failed", error=str(exc))
        typer.echo(f"設定の読み込みに失敗しました: {exc}")
        raise typer.Exit(code=1) from exc


@app.command()
def init(
    revision: Annotated[str, typer.Option("--revision", help="適用する Alembic リビジョン")] = "head",
) -> None:
    """Alembic マイグレーションを適用する。"""

    logger = get_logger("cli.db.init", revision=revision)
    manager = _open_manager(logger)
    try:
        manager.initialize_schema(revision)
    except BaseAppError as exc:
        logger.error("db_init_failed", error=str(exc))
        typer.echo(f"スキーマの初期化に失敗しました: {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        manager.close()

    typer.echo(f"スキーマを {revision} に更新しました")


@app.command()
def seed(
    reset: Annotated[
        bool, typer.Option("--reset", help="既存のゲームとタグを削除してから投入する")
    ] = False,
) -> None:
    """標準タグとサンプルゲームを投入する。"""

    logger = get_logger("cli.db.seed", reset=reset)
    manager = _open_manager(logger)
    try:
        report = CatalogSeeder(manager.session_factory, logger=logger).run(reset=reset)
    except SQLAlchemyError as exc:
        logger.error("db_seed_failed", error=str(exc))
        typer.echo(f"サンプルの投入に失敗しました: {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        manager.close()

    typer.echo(
        f"tags={report.tags_created} games={report.games_created} links={report.links_created}"
    )


__all__ = ["app"]
