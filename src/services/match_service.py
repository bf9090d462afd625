"""
Orchestration of communication from the transport layer to the rules engine and the archive (and the reverse direction).

One MatchService owns every room it created. A room holds exactly one Game: all mutation of that
game goes through this service, one call at the time.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol
from uuid import uuid4

from pydantic import BaseModel

from src.api.models import (
    BoardViewResponse,
    CreateRoomRequest,
    GetMatchRequest,
    JoinRoomRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MatchStateResponse,
    MoveRecordResponse,
    MoveRequest,
    MoveResponse,
    PlayerInfo,
    PlayerRequest,
    RoomResponse,
    SquareModel,
)
from src.core.exceptions import GameError, GameStateError, RepositoryError, RoomError
from src.core.models import ArchivedMatch
from src.core.settings import Settings, get_settings
from src.core.shared_types import TURN_ORDER, Color, Status
from src.crosschess.game import Game, move_to_model
from src.crosschess.moves import AcceptedMove
from src.crosschess.orientation import view_position
from src.db.repository import MatchArchive
from src.services.auto_player import Cancellable, MoveScheduler, choose_random_move

logger = logging.getLogger(__name__)

ROOM_ID_LENGTH = 6
PLAYER_ID_LENGTH = 8


class RoomNotifier(Protocol):
    """Transport side: relays an event to every participant of a room."""

    def publish(self, room_id: str, event: str, payload: BaseModel) -> None: ...


@dataclass
class Player:
    player_id: str
    name: str
    color: Color
    is_connected: bool = True

    def to_info(self) -> PlayerInfo:
        return PlayerInfo(
            player_id=self.player_id,
            name=self.name,
            color=self.color,
            is_connected=self.is_connected,
        )


@dataclass
class Room:
    room_id: str
    name: str
    players: list[Player]
    game: Game = field(default_factory=Game.new_game)
    started: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    # bumped on every state change. A scheduled automated move armed for an older generation is stale.
    generation: int = 0
    pending_move: Optional[Cancellable] = None

    @property
    def status(self) -> Status:
        if not self.started:
            return Status.WAITING_FOR_PLAYERS
        return self.game.status

    @property
    def creator(self) -> Optional[Player]:
        return self.players[0] if self.players else None

    def player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.player_id == player_id), None)

    def occupant(self, color: Color) -> Optional[Player]:
        return next((p for p in self.players if p.color == color), None)

    def is_unattended(self, color: Color) -> bool:
        """No human in that seat, or the human is disconnected"""
        occupant = self.occupant(color)
        return occupant is None or not occupant.is_connected

    def free_colors(self) -> list[Color]:
        taken = {player.color for player in self.players}
        return [color for color in TURN_ORDER if color not in taken]

    def cancel_pending_move(self) -> None:
        if self.pending_move is not None:
            self.pending_move.cancel()
            self.pending_move = None

    def bump(self) -> int:
        """Mark a state change: invalidates any automated move scheduled before it."""
        self.cancel_pending_move()
        self.generation += 1
        return self.generation


class MatchService:
    """Orchestration of rooms, seats and matches."""

    def __init__(
        self,
        scheduler: MoveScheduler,
        settings: Optional[Settings] = None,
        archive: Optional[MatchArchive] = None,
        notifier: Optional[RoomNotifier] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.scheduler = scheduler
        self.settings = settings or get_settings()
        self.archive = archive
        self.notifier = notifier
        self.rng = rng or random.Random()
        self.rooms: dict[str, Room] = {}

    # -- Room / seat management ---
    def create_room(self, request: CreateRoomRequest) -> RoomResponse:
        """The creator takes the first seat (red) and is the only one allowed to start / reset."""
        room_id = self._new_room_id()
        player = Player(
            player_id=_new_id(PLAYER_ID_LENGTH), name=request.player_name, color=TURN_ORDER[0]
        )
        room = Room(room_id=room_id, name=request.room_name, players=[player])
        self.rooms[room_id] = room
        logger.info(f"Room created: {room_id} by {player.name} ({player.player_id})")
        return self._room_response(room, player)

    def join_room(self, request: JoinRoomRequest) -> RoomResponse:
        """Take the next free color in turn order."""
        room = self._fetch_room(request.room_id)
        if room.started:
            raise RoomError("Game already started")
        if len(room.players) >= self.settings.max_players_per_room:
            raise RoomError("Room is full")

        free_colors = room.free_colors()
        if not free_colors:
            raise RoomError("No available player slots")

        player = Player(
            player_id=_new_id(PLAYER_ID_LENGTH), name=request.player_name, color=free_colors[0]
        )
        room.players.append(player)
        logger.info(
            f"{player.name} ({player.player_id}) joined room {room.room_id} as {player.color}"
        )
        self._publish(room, "player_joined", player.to_info())
        return self._room_response(room, player)

    def rejoin_room(self, request: PlayerRequest) -> RoomResponse:
        """
        A known player reconnects.
        ----

        If it is their turn, the pending automated move is dropped: the human plays again.
        If another unattended seat is to move, the automated player is (re-)armed.
        """
        room = self._fetch_room(request.room_id)
        player = self._fetch_player(room, request.player_id)
        player.is_connected = True
        room.bump()
        logger.info(f"{player.name} ({player.player_id}) reconnected to room {room.room_id}")

        self._publish(room, "player_reconnected", player.to_info())
        self._schedule_if_unattended(room)
        return self._room_response(room, player)

    def disconnect(self, request: PlayerRequest) -> None:
        """The seat stays reserved, but until the player is back the automated player fills in."""
        room = self._fetch_room(request.room_id)
        player = self._fetch_player(room, request.player_id)
        player.is_connected = False
        room.bump()
        logger.info(f"{player.name} ({player.player_id}) disconnected from room {room.room_id}")

        self._publish(room, "player_disconnected", player.to_info())
        self._schedule_if_unattended(room)

    def leave_room(self, request: PlayerRequest) -> None:
        """Give up the seat. The last player leaving deletes the room."""
        room = self._fetch_room(request.room_id)
        player = self._fetch_player(room, request.player_id)
        room.players.remove(player)
        room.bump()

        if not room.players:
            del self.rooms[room.room_id]
            logger.info(f"Room {room.room_id} deleted - no players left")
            return

        self._publish(room, "player_left", player.to_info())
        self._schedule_if_unattended(room)

    def list_open_rooms(self) -> list[RoomResponse]:
        """Rooms that can still be joined"""
        return [
            self._room_response(room)
            for room in self.rooms.values()
            if not room.started and len(room.players) < self.settings.max_players_per_room
        ]

    # -- Match lifecycle ---
    def start_match(self, request: PlayerRequest) -> MatchStateResponse:
        """Only the creator can start. Empty seats are played by the automated player."""
        room = self._fetch_room(request.room_id)
        self._assert_creator(room, request.player_id, "start")
        if room.started:
            raise GameStateError("Game already started")

        room.started = True
        room.bump()
        logger.info(f"Game started in room {room.room_id}")

        state = self._state_response(room)
        self._publish(room, "match_started", state)
        self._schedule_if_unattended(room)
        return state

    def reset_match(self, request: PlayerRequest) -> MatchStateResponse:
        """Throw the current match away (unconditionally) and set up a fresh board."""
        room = self._fetch_room(request.room_id)
        self._assert_creator(room, request.player_id, "reset")

        room.bump()
        room.game = Game.new_game()
        logger.info(f"Game reset in room {room.room_id}")

        state = self._state_response(room)
        self._publish(room, "match_reset", state)
        self._schedule_if_unattended(room)
        return state

    # -- Moves ---
    def make_move(self, request: MoveRequest) -> MoveResponse:
        """
        A human submits a move.
        ----

        Rejections leave the match untouched and only carry a short reason.
        An accepted move cancels any automated move that was pending for this room.
        """
        room = self._fetch_room(request.room_id)
        player = room.player(request.player_id)
        if player is None:
            return self._rejection(room, "Player not found or unauthorized")
        if not room.started:
            return self._rejection(room, "Game not started")

        try:
            accepted_move = room.game.make_move(
                request.from_square.to_square(), request.to_square.to_square(), player.color
            )
        except GameError as exc:
            logger.info(
                f"Move rejected in room {room.room_id} for {player.name} ({player.color}): {exc}"
            )
            return self._rejection(room, str(exc))

        logger.info(
            f"Move executed in room {room.room_id}: {player.name} ({player.color}) {accepted_move.move.to_notation()}"
        )
        return self._after_move(room, accepted_move)

    def play_automated_move(self, room_id: str, generation: int) -> Optional[MoveResponse]:
        """
        Callback of a scheduled automated move.
        ----

        No-op when the room is gone, anything happened since it was scheduled (stale generation),
        the match is not running, or a human occupies the seat to move by now.
        """
        room = self.rooms.get(room_id)
        if room is None or room.generation != generation:
            logger.debug(f"Dropping stale automated move for room {room_id}")
            return None
        room.pending_move = None

        color = room.game.current_player
        if room.status != Status.IN_PROGRESS or not room.is_unattended(color):
            return None

        move = choose_random_move(room.game, self.rng)
        if move is None:
            logger.info(f"No legal moves available for automated player {color} in room {room_id}")
            return None

        accepted_move = room.game.make_move(move.from_square, move.to_square, color)
        logger.info(
            f"Automated {color} in room {room_id} played {accepted_move.move.to_notation()}"
        )
        return self._after_move(room, accepted_move)

    # -- Queries ---
    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """For highlighting: target squares of the piece on the requested square."""
        room = self._fetch_room(request.room_id)
        moves = room.game.legal_moves(request.square.to_square()) if room.started else []
        return LegalMovesResponse(
            room_id=room.room_id,
            square=request.square,
            legal_moves=[SquareModel.from_square(move.to_square) for move in moves],
        )

    def get_match_state(self, request: GetMatchRequest) -> MatchStateResponse:
        room = self._fetch_room(request.room_id)
        return self._state_response(room)

    def view_board(self, request: PlayerRequest) -> BoardViewResponse:
        """The board rotated so the requesting player's home arm is at the bottom"""
        room = self._fetch_room(request.room_id)
        player = self._fetch_player(room, request.player_id)
        rotated = view_position(room.game.board.position, player.color)
        return BoardViewResponse(
            room_id=room.room_id,
            color=player.color,
            position={
                square.to_notation(): piece.to_code()
                for square, piece in sorted(rotated.items())
            },
        )

    # -- Internal helpers --
    def _after_move(self, room: Room, accepted_move: AcceptedMove) -> MoveResponse:
        """Shared tail of human and automated moves: invalidate timers, relay, archive, re-arm."""
        room.bump()
        state = self._state_response(room)
        response = MoveResponse(
            room_id=room.room_id,
            accepted=True,
            move=MoveRecordResponse.from_model(move_to_model(accepted_move)),
            state=state,
        )
        self._publish(room, "match_state_updated", response)

        if room.game.winner is not None:
            self._archive(room)
        else:
            self._schedule_if_unattended(room)
        return response

    def _schedule_if_unattended(self, room: Room) -> None:
        """Arm the automated player if the seat to move has nobody (connected) in it."""
        if room.status != Status.IN_PROGRESS:
            return

        color = room.game.current_player
        if not room.is_unattended(color):
            return

        room.cancel_pending_move()
        room.pending_move = self.scheduler.call_later(
            self.settings.auto_move_delay_seconds,
            self.play_automated_move,
            room.room_id,
            room.generation,
        )
        logger.debug(
            f"Automated move scheduled for {color} in room {room.room_id} (generation {room.generation})"
        )

    def _archive(self, room: Room) -> None:
        if self.archive is None:
            return
        record = ArchivedMatch(
            room_id=room.room_id,
            room_name=room.name,
            players={player.color.value: player.name for player in room.players},
            match=room.game.to_model(),
        )
        try:
            _, match_id = self.archive.record_match(record)
        except RepositoryError:
            # the winning move stands, only the record is lost
            logger.exception(f"Archiving the finished match of room {room.room_id} failed")
            return
        logger.info(f"Finished match of room {room.room_id} archived as {match_id}")

    def _publish(self, room: Room, event: str, payload: BaseModel) -> None:
        if self.notifier is not None:
            self.notifier.publish(room.room_id, event, payload)

    def _assert_creator(self, room: Room, player_id: str, action: str) -> None:
        creator = room.creator
        if creator is None or creator.player_id != player_id:
            raise RoomError(f"Only room creator can {action} the game")

    def _rejection(self, room: Room, reason: str) -> MoveResponse:
        return MoveResponse(room_id=room.room_id, accepted=False, reason=reason)

    def _room_response(self, room: Room, player: Optional[Player] = None) -> RoomResponse:
        return RoomResponse(
            room_id=room.room_id,
            name=room.name,
            status=room.status,
            players=[p.to_info() for p in room.players],
            created_at=room.created_at,
            player=player.to_info() if player else None,
        )

    def _state_response(self, room: Room) -> MatchStateResponse:
        return MatchStateResponse.from_model(
            room.room_id, room.game.to_model(), status=room.status
        )

    def _fetch_room(self, room_id: str) -> Room:
        """Attempt to find the room and raise error if it fails."""
        room = self.rooms.get(room_id)
        if room is None:
            raise RoomError(f"Room {room_id!r} not found")
        return room

    def _fetch_player(self, room: Room, player_id: str) -> Player:
        player = room.player(player_id)
        if player is None:
            raise RoomError(f"Player {player_id!r} not found in room {room.room_id}")
        return player

    def _new_room_id(self) -> str:
        while True:
            room_id = _new_id(ROOM_ID_LENGTH)
            if room_id not in self.rooms:
                return room_id


def _new_id(length: int) -> str:
    return uuid4().hex[:length].upper()
