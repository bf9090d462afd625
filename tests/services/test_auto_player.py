"""Unit tests for src/services/auto_player.py"""

import asyncio
import random

import pytest

from src.api.models import CreateRoomRequest, GetMatchRequest, PlayerRequest
from src.core.settings import Settings
from src.core.shared_types import Color
from src.crosschess.game import Game
from src.services.auto_player import AsyncioMoveScheduler, choose_random_move
from src.services.match_service import MatchService


def test_random_move_is_legal() -> None:
    game = Game.new_game()
    rng = random.Random(1)
    legal = game.legal_moves_for(Color.RED)
    for _ in range(10):
        assert choose_random_move(game, rng) in legal


def test_same_seed_same_move() -> None:
    game = Game.new_game()
    assert choose_random_move(game, random.Random(42)) == choose_random_move(
        game, random.Random(42)
    )


def test_no_move_in_finished_game() -> None:
    game = Game.new_game()
    game.winner = Color.GREEN
    assert choose_random_move(game, random.Random(1)) is None


@pytest.mark.asyncio
async def test_asyncio_scheduler_runs_callback() -> None:
    calls: list[str] = []
    AsyncioMoveScheduler().call_later(0.01, calls.append, "done")
    await asyncio.sleep(0.05)
    assert calls == ["done"]


@pytest.mark.asyncio
async def test_asyncio_scheduler_cancel() -> None:
    calls: list[str] = []
    handle = AsyncioMoveScheduler().call_later(0.01, calls.append, "done")
    handle.cancel()
    await asyncio.sleep(0.05)
    assert calls == []


@pytest.mark.asyncio
async def test_unattended_match_plays_itself() -> None:
    """Nobody connected: the automated player makes the moves on the event loop"""
    settings = Settings(_env_file=None, auto_move_delay_seconds=0.01)
    service = MatchService(scheduler=AsyncioMoveScheduler(), settings=settings)
    room = service.create_room(CreateRoomRequest(room_name="Bots only", player_name="Kim"))
    creator = PlayerRequest(room_id=room.room_id, player_id=room.player.player_id)

    service.disconnect(creator)
    service.start_match(creator)
    await asyncio.sleep(0.3)

    state = service.get_match_state(GetMatchRequest(room_id=room.room_id))
    assert len(state.move_history) >= 1
    assert state.move_history[0].color == Color.RED

    # leaving cancels whatever is still scheduled
    service.leave_room(creator)
    assert room.room_id not in service.rooms
