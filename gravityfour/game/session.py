"""
session.py - The single shared game and the request-style operations on it

A GameSession owns at most one Board. Every public method holds the session
lock for its whole duration, so concurrent callers are serialized and each
one sees a consistent board.
"""

import re
import threading
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from gravityfour.debug import debug
from gravityfour.game.board import Board
from gravityfour.game.settings import GameMode, GameSettings
from gravityfour.utils import GRAVITY_FLIP_INTERVAL, GameResult

COLUMN_PATTERN = re.compile(r"[+-]?[0-9]+")

END_MESSAGES = {
    GameResult.PLAYER_ONE_WIN: "Victory!",
    GameResult.PLAYER_TWO_WIN: "Defeat!",
    GameResult.DRAW: "Draw!",
}


class FormAction(Enum):
    """What a submitted form did to the session."""
    NONE = "none"
    RESET = "reset"
    REMATCH = "rematch"
    MOVE = "move"
    IGNORED = "ignored"


class GameSession:
    """Single-game session guarded by one mutex."""

    def __init__(self, flip_interval: int = GRAVITY_FLIP_INTERVAL,
                 seed: Optional[int] = None):
        self._lock = threading.RLock()
        self._flip_interval = flip_interval
        self._seed = seed
        self._settings: Optional[GameSettings] = None
        self._board: Optional[Board] = None

    @property
    def board(self) -> Optional[Board]:
        return self._board

    @property
    def settings(self) -> Optional[GameSettings]:
        return self._settings

    def _new_game(self, settings: GameSettings):
        self._settings = settings
        self._board = settings.create_board()
        debug.info(f"New game for '{settings.username}' "
                   f"(difficulty={settings.difficulty or 'default'}, mode={settings.mode.value}, "
                   f"{self._board.rows}x{self._board.cols})", "session")

    def open(self, username: str = "", difficulty: str = "",
             mode: Optional[str] = None) -> Board:
        """
        Make sure a game exists for the given query values.

        A new game is started when there is none yet, or when a username is
        given and the username, difficulty or mode differs from the running
        game's.

        Returns:
            The board of the current game
        """
        username = username or ""
        difficulty = difficulty or ""
        game_mode = GameMode.parse(mode)

        with self._lock:
            if self._board is None or (
                    username and not self._settings.matches(username, difficulty, game_mode)):
                self._new_game(GameSettings(username, difficulty, game_mode,
                                            self._flip_interval, self._seed))
            return self._board

    def drop(self, column) -> bool:
        """Drop a token for the current player; False if there is no game or the move is rejected."""
        with self._lock:
            if self._board is None:
                return False
            return self._board.drop(column)

    def rematch(self) -> Board:
        """Start a fresh game with the settings of the current one."""
        with self._lock:
            self._new_game(self._settings or GameSettings(
                flip_interval=self._flip_interval, seed=self._seed))
            return self._board

    def reset(self):
        """Discard the current game."""
        with self._lock:
            debug.info("Session reset", "session")
            self._board = None
            self._settings = None

    def apply_form(self, form: Mapping[str, Any]) -> FormAction:
        """
        Apply submitted form values to the current game.

        ``reset`` takes precedence over ``rematch``, which takes precedence
        over ``col``. A ``col`` that is not a plain decimal integer, or a
        move the board rejects, leaves the game untouched.
        """
        with self._lock:
            if str(form.get("reset", "")) == "1":
                self.reset()
                return FormAction.RESET

            if str(form.get("rematch", "")) == "1":
                self.rematch()
                return FormAction.REMATCH

            col_value = form.get("col")
            if col_value is None or str(col_value) == "":
                return FormAction.NONE

            if not COLUMN_PATTERN.fullmatch(str(col_value)):
                debug.debug(f"Ignoring malformed column {col_value!r}", "session")
                return FormAction.IGNORED
            column = int(str(col_value))

            return FormAction.MOVE if self.drop(column) else FormAction.IGNORED

    def handle(self, query: Mapping[str, Any], form: Optional[Mapping[str, Any]] = None) -> FormAction:
        """Open the game named by ``query`` and apply ``form`` to it, as one request."""
        with self._lock:
            self.open(query.get("username", ""), query.get("difficulty", ""), query.get("mode"))
            if form is None:
                return FormAction.NONE
            return self.apply_form(form)

    def end_message(self) -> str:
        with self._lock:
            if self._board is None:
                return ""
            return END_MESSAGES.get(self._board.game_result, "")

    def snapshot(self) -> Dict[str, Any]:
        """
        Plain-data view of the session for a renderer.

        Returns an empty dict when no game is running.
        """
        with self._lock:
            board = self._board
            if board is None:
                return {}

            settings = self._settings
            return {
                "rows": board.rows,
                "cols": board.cols,
                "board": board.grid.tolist(),
                "current_player": board.current_player.value,
                "winner": board.winner.value,
                "game_over": board.game_over,
                "last_move": board.last_move,
                "turn_count": board.turn_count,
                "gravity": board.gravity.name.lower(),
                "winning_positions": board.winning_positions(),
                "valid_moves": board.get_valid_moves(),
                "username": settings.username,
                "difficulty": settings.difficulty,
                "mode": settings.mode.value,
                "end_message": END_MESSAGES.get(board.game_result, ""),
            }

