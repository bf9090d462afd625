"""
Automated player for seats without a connected human.
----

Picks a uniformly random legal move. The coordinator decides *when* it plays (after a delay,
and only if the seat is still unattended by then); scheduling goes through a MoveScheduler
so the delay can be driven by asyncio in production and by hand in tests.
"""

import asyncio
import random
from typing import Any, Callable, Optional, Protocol

from src.crosschess.game import Game
from src.crosschess.moves import Move


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class MoveScheduler(Protocol):
    """Run `callback(*args)` after `delay` seconds, unless the returned handle gets cancelled first."""

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> Cancellable: ...


class AsyncioMoveScheduler:
    """Schedules on the running event loop (must be called from within that loop)."""

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback, *args)


def choose_random_move(game: Game, rng: random.Random) -> Optional[Move]:
    """Uniform choice over every legal move of the color to move. None if there is nothing to play."""
    moves = game.legal_moves_for(game.current_player)
    if not moves:
        return None
    return rng.choice(moves)
