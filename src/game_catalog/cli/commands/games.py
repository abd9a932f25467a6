from __future__ import annotations

from typing import Annotated

import typer

from game_catalog.cli.commands.library import echo_json, load_context
from game_catalog.core.library.service import GameNotFoundError
from game_catalog.shared.exceptions import BaseAppError
from game_catalog.shared.logging import get_logger

NOT_FOUND_EXIT_CODE = 4

app = typer.Typer(help="ゲーム詳細とレビューの参照コマンド")

GameIdOption = Annotated[int, typer.Option("--id", "-i", min=1, help="対象ゲームの ID")]
ViewerOption = Annotated[
    int | None,
    typer.Option("--viewer-id", "-u", min=1, help="自分の投票(myVote)を計算するユーザー ID"),
]


@app.command()
def show(game_id: GameIdOption, viewer_id: ViewerOption = None) -> None:
    """ゲーム詳細をタグ・レビュー込みの JSON で表示する。"""

    logger = get_logger("cli.games.show", game_id=game_id, viewer_id=viewer_id)
    context = load_context(logger)

    try:
        detail = context.service.get_game(game_id, viewer_id=viewer_id)
    except GameNotFoundError as exc:
        typer.echo(f"ゲームが見つかりません: {game_id}")
        raise typer.Exit(code=NOT_FOUND_EXIT_CODE) from exc
    except BaseAppError as exc:
        logger.error("games_show_failed", error=str(exc))
        typer.echo(f"ゲームの取得に失敗しました: {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        context.close()

    echo_json(detail.to_response())


@app.command()
def reviews(game_id: GameIdOption, viewer_id: ViewerOption = None) -> None:
    """レビューを新しい順に、いいね/よくない数と自分の投票込みで表示する。"""

    logger = get_logger("cli.games.reviews", game_id=game_id, viewer_id=viewer_id)
    context = load_context(logger)

    try:
        items = context.service.list_reviews(game_id, viewer_id=viewer_id)
    except BaseAppError as exc:
        logger.error("games_reviews_failed", error=str(exc))
        typer.echo(f"レビューの取得に失敗しました: {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        context.close()

    echo_json([item.to_response() for item in items])


__all__ = ["NOT_FOUND_EXIT_CODE", "app"]
