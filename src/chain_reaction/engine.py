"""
The GameEngine is the entrypoint into the domain layer for the service layer.
It is responsible for all the rules required to play a turn of Chain Reaction:
dealing the opening dots, validating moves, resolving explosions, rotating turns and detecting the winner.

The engine is a thin, disposable wrapper around an explicit GameState:
build one from a snapshot, perform a single operation, read the snapshot back.
Nothing inside the engine is ever handed out by reference.
"""

import logging
import random
import time
from copy import deepcopy
from dataclasses import dataclass, field
from itertools import islice
from typing import Callable, Iterator, Self

from src.chain_reaction.game_state import ChainReaction, GameState, Move, Player
from src.chain_reaction.position import BoardSize, Position
from src.core.config import MAX_PLAYERS, MIN_PLAYERS, PLAYER_COLORS
from src.core.exceptions import (
    CapacityError,
    GameNotStartedError,
    GameOverError,
    GameStateError,
    IllegalCellError,
    InsufficientPlayersError,
    TurnOrderError,
)

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass
class GameEngine:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    state: GameState
    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], int] = now_ms

    @classmethod
    def new(cls, room_id: str, board_size: BoardSize) -> Self:
        """Fresh game: empty board, no players."""
        return cls(GameState.initial(room_id, board_size))

    @classmethod
    def from_state(cls, snapshot: GameState) -> Self:
        """Rehydrate an engine from a persisted snapshot."""
        return cls(deepcopy(snapshot))

    def load_game_state(self, snapshot: GameState) -> None:
        """Replace the internal state with a copy of the snapshot."""
        self.state = deepcopy(snapshot)

    def get_game_state(self) -> GameState:
        """The only way to observe the state from outside: always a copy."""
        return deepcopy(self.state)

    def add_player(self, player_id: str, name: str) -> Player:
        """
        Register a player. Turn order equals join order.
        ----

        Joining twice with the same id returns the registered player unchanged.
        The color is picked by slot index, cycling through the palette.
        """
        existing = self.state.find_player(player_id)
        if existing is not None:
            return deepcopy(existing)

        if len(self.state.active_players) >= MAX_PLAYERS:
            raise CapacityError(
                f"Game is full. A game allows at most {MAX_PLAYERS} active players."
            )

        slot = len(self.state.players)
        player = Player(
            id=player_id, name=name, color=PLAYER_COLORS[slot % len(PLAYER_COLORS)]
        )
        self.state.players.append(player)
        return deepcopy(player)

    def remove_player(self, player_id: str) -> None:
        """
        A player left (or disconnected).
        ----

        1. Mark the player inactive. It keeps its slot, so the indices of everybody else stay valid.
        2. Its cells become neutral again.
        3. Recount the dots and check if the departure decided the game.
        4. If it was their turn, hand the turn to the next active player.
        """
        player = self.state.find_player(player_id)
        if player is None:
            return

        had_turn = self.state.current_player is player
        player.is_active = False
        self.state.board.clear_player(player_id)
        self._update_dot_counts()

        # a lobby departure never ends the game: nobody holds dots before the deal
        if not self.state.is_started:
            return

        self._check_win_condition()
        if had_turn and not self.state.is_game_over:
            self._advance_turn()

    def start_game(self) -> None:
        """
        Deal the opening dots.
        ----

        Shuffle every position of the board, then walk the shuffled list handing out single dots:
        first all dots of the first active player, then the second one, etc. No two opening dots share a cell.

        NOTE when the board has fewer cells than dots to deal, the last players simply get fewer dots.
        """
        if self.state.is_started:
            raise GameStateError(f"Game already started. phase: {self.state.phase}")

        active_players = self.state.active_players
        if len(active_players) < MIN_PLAYERS:
            raise InsufficientPlayersError(
                f"Need at least {MIN_PLAYERS} players to start, got {len(active_players)}."
            )

        positions = self.state.board.positions()
        self.rng.shuffle(positions)

        dots_to_deal = self.state.initial_dots_per_player * len(active_players)
        if dots_to_deal > len(positions):
            logger.warning(
                "Board of game %s has %d cells, cannot deal %d opening dots.",
                self.state.id,
                len(positions),
                dots_to_deal,
            )

        free_positions = iter(positions)
        for player in active_players:
            for position in islice(free_positions, self.state.initial_dots_per_player):
                self.state.board.cell(position).add_dot(player.id)

        self.state.is_started = True
        self.state.current_player_index = self.state.players.index(active_players[0])
        self._update_dot_counts()
        logger.info(
            "Game %s started with %d players.", self.state.id, len(active_players)
        )

    def is_valid_move(self, move: Move) -> bool:
        """Same checks as make_move, without touching the state."""
        try:
            self._validate_move(move)
        except GameStateError:
            return False
        return True

    def make_move(self, move: Move) -> list[ChainReaction]:
        """
        Attempt to place a dot
        -----

        1. validate (nothing is mutated when this fails)
        2. add the dot and claim the cell
        3. resolve the chain reaction
        4. recount dots and check for the end of the game
        5. pass the turn (unless the game just ended)

        Returns the explosions in the order they happened.
        """
        self._validate_move(move)

        self.state.board.cell(move.position).add_dot(move.player_id)
        reactions = self._resolve_chain_reaction(move.position, move.player_id)

        self._update_dot_counts()
        self._check_win_condition()
        if not self.state.is_game_over:
            self._advance_turn()

        logger.debug(
            "Game %s: %s placed on (%d, %d), %d explosions.",
            self.state.id,
            move.player_id,
            move.position.row,
            move.position.col,
            len(reactions),
        )
        return reactions

    # -- PRIVATE HELPERS ---
    def _validate_move(self, move: Move) -> None:
        if self.state.is_game_over:
            raise GameOverError("Game is over.")

        if not self.state.is_started:
            raise GameNotStartedError("Game has not started yet.")

        current_player = self.state.current_player
        if current_player is None or current_player.id != move.player_id:
            waiting_for = current_player.name if current_player else "nobody"
            raise TurnOrderError(
                f"It is not your turn. Waiting for player {waiting_for} to make a move first."
            )

        if not move.position.is_within_bounds(self.state.board.size):
            raise IllegalCellError(f"Position {move.position} is not on the board.")

        owner_id = self.state.board.cell(move.position).owner_id
        if owner_id is not None and owner_id != move.player_id:
            raise IllegalCellError("Cannot place a dot on an opponent's cell.")

    def _is_critical(self, position: Position) -> bool:
        return self.state.board.cell(position).dots >= self.state.max_dots_per_cell

    def _resolve_chain_reaction(
        self, start: Position, player_id: str
    ) -> list[ChainReaction]:
        """
        Depth-first cascade using an explicit stack instead of recursion.
        ----

        Every stack entry holds the neighbors an exploded cell still has to feed.
        A neighbor that reaches capacity explodes (and is resolved completely) before the next sibling gets its dot.
        Every dot handed out by the explosion captures the neighbor for the mover.
        """
        reactions: list[ChainReaction] = []
        if not self._is_critical(start):
            return reactions

        pending: list[Iterator[Position]] = [
            self._explode(start, player_id, reactions)
        ]
        while pending:
            neighbor = next(pending[-1], None)
            if neighbor is None:
                pending.pop()
                continue

            self.state.board.cell(neighbor).add_dot(player_id)
            if self._is_critical(neighbor):
                pending.append(self._explode(neighbor, player_id, reactions))

        return reactions

    def _explode(
        self, position: Position, player_id: str, reactions: list[ChainReaction]
    ) -> Iterator[Position]:
        """Record the explosion, empty the cell and return the neighbors that receive a dot."""
        reactions.append(ChainReaction(position, player_id, self.clock()))
        self.state.board.cell(position).clear()
        return iter(position.neighbors(self.state.board.size))

    def _update_dot_counts(self) -> None:
        """dot_count is a cache. The board is the source of truth."""
        counts = self.state.board.count_dots()
        for player in self.state.players:
            player.dot_count = counts.get(player.id, 0)

    def _check_win_condition(self) -> None:
        """One active player left holding dots wins. Nobody left holding dots: game over without a winner."""
        contenders = [
            player for player in self.state.active_players if player.dot_count > 0
        ]
        if len(contenders) > 1:
            return

        self.state.is_game_over = True
        self.state.winner = deepcopy(contenders[0]) if contenders else None
        logger.info(
            "Game %s is over. winner: %s",
            self.state.id,
            self.state.winner.name if self.state.winner else None,
        )

    def _advance_turn(self) -> None:
        """Next active player in join order (wrapping around)."""
        players = self.state.players
        if not any(player.is_active for player in players):
            return

        index = self.state.current_player_index
        for _ in range(len(players)):
            index = (index + 1) % len(players)
            if players[index].is_active:
                break
        self.state.current_player_index = index


def create_game_engine(room_id: str, board_size: BoardSize) -> GameEngine:
    return GameEngine.new(room_id, board_size)
