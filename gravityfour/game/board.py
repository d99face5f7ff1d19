"""
board.py - Board representation and core rules for Gravity Four

This module implements the Board class: a rows x cols grid that accepts
column drops under a gravity direction, optionally reverses that direction
every few turns, and detects four in a row or a full top row.
"""

import copy
import operator
from typing import List, Optional

import numpy as np

from gravityfour.debug import debug
from gravityfour.utils import (ROWS, COLS, Player, GameResult, Gravity, Position,
                               check_win_at_position, find_winning_line,
                               landing_row, render_board_ascii)


class Board:
    """
    A Gravity Four board and the state of the game played on it.

    With ``flip_interval`` set to 0 this is classic Connect Four. With a
    positive interval the gravity direction reverses after every
    ``flip_interval`` accepted moves.
    """

    def __init__(self, rows: int = ROWS, cols: int = COLS, prefill: int = 0,
                 gravity: Gravity = Gravity.DOWN, flip_interval: int = 0,
                 seed: Optional[int] = None):
        """
        Create a board and start a game on it.

        Args:
            rows: Number of rows
            cols: Number of columns
            prefill: Random tokens placed before the first turn
            gravity: Initial gravity direction
            flip_interval: Turns between gravity reversals (0 never reverses)
            seed: Seed for the prefill random generator

        Raises:
            ValueError: If the dimensions, prefill or interval are invalid
        """
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Board dimensions must be positive, got {rows}x{cols}")
        if not 0 <= prefill <= rows * cols:
            raise ValueError(f"Prefill must be between 0 and {rows * cols}, got {prefill}")
        if flip_interval < 0:
            raise ValueError(f"Flip interval must not be negative, got {flip_interval}")

        debug.debug(f"Initializing {rows}x{cols} board (prefill={prefill}, "
                    f"gravity={gravity.name}, flip_interval={flip_interval})", "board")
        self.rows = rows
        self.cols = cols
        self.prefill = prefill
        self.initial_gravity = gravity
        self.flip_interval = flip_interval
        self._rng = np.random.default_rng(seed)
        self.reset()

    def reset(self):
        """Clear the board, apply the prefill and restart the game."""
        debug.debug("Resetting board", "board")
        self.grid = np.zeros((self.rows, self.cols), dtype=int)
        self.moves_made: List[Position] = []
        self.current_player = Player.ONE
        self.game_result = GameResult.IN_PROGRESS
        self.last_move: Optional[Position] = None
        self.turn_count = 0
        self.gravity = self.initial_gravity
        self._apply_prefill()

    def _apply_prefill(self):
        if not self.prefill:
            return

        cells = self._rng.choice(self.rows * self.cols, size=self.prefill, replace=False)
        owners = self._rng.integers(Player.ONE.value, Player.TWO.value + 1, size=self.prefill)
        for cell, owner in zip(cells, owners):
            row, col = divmod(int(cell), self.cols)
            self.grid[row, col] = int(owner)
        debug.trace(f"Prefilled cells {sorted(int(c) for c in cells)}", "board")

    def copy(self) -> 'Board':
        """Create an independent copy of the board and its game state."""
        new_board = Board(self.rows, self.cols, gravity=self.initial_gravity,
                          flip_interval=self.flip_interval)
        new_board.prefill = self.prefill
        new_board.grid = self.grid.copy()
        new_board.moves_made = self.moves_made.copy()
        new_board.current_player = self.current_player
        new_board.game_result = self.game_result
        new_board.last_move = self.last_move
        new_board.turn_count = self.turn_count
        new_board.gravity = self.gravity
        new_board._rng = copy.deepcopy(self._rng)
        return new_board

    @property
    def winner(self) -> Player:
        return self.game_result.winner

    @property
    def game_over(self) -> bool:
        return self.game_result.is_game_over()

    def landing_row(self, column: int) -> Optional[int]:
        """Row a token dropped in ``column`` would land in, or None."""
        return landing_row(self.grid, column, self.gravity)

    def is_valid_move(self, column: int) -> bool:
        if self.game_over:
            return False
        return self.landing_row(column) is not None

    def get_valid_moves(self) -> List[int]:
        if self.game_over:
            return []
        return [col for col in range(self.cols) if self.landing_row(col) is not None]

    def drop(self, column) -> bool:
        """
        Drop the current player's token in ``column``.

        The token lands on the first empty cell found scanning the column in
        the gravity direction. Afterwards the turn counter advances, gravity
        may reverse, the game result is updated and the turn passes to the
        other player.

        Args:
            column: Column index (0-indexed)

        Returns:
            True if the move was accepted; a rejected move changes nothing
        """
        try:
            column = operator.index(column)
        except TypeError:
            debug.debug(f"Rejected move: column {column!r} is not an integer", "board")
            return False

        if self.game_over:
            debug.debug(f"Rejected move: game is over ({self.game_result.name})", "board")
            return False
        if not 0 <= column < self.cols:
            debug.debug(f"Rejected move: column {column} out of bounds", "board")
            return False

        row = self.landing_row(column)
        if row is None:
            debug.debug(f"Rejected move: column {column} is full", "board")
            return False

        player = self.current_player
        self.grid[row, column] = player.value
        self.last_move = (row, column)
        self.moves_made.append((row, column))
        self.turn_count += 1
        debug.trace(f"Player {player.name} placed at ({row}, {column}), turn {self.turn_count}", "board")

        if self.flip_interval and self.turn_count % self.flip_interval == 0:
            self.gravity = self.gravity.flipped()
            debug.debug(f"Gravity reversed to {self.gravity.name} after turn {self.turn_count}", "board")

        if self.check_win(row, column):
            self.game_result = GameResult.win_for(player)
            debug.info(f"Player {player.name} wins with the move at {self.last_move}", "board")
        elif self.is_draw():
            self.game_result = GameResult.DRAW
            debug.info("Game ends in a draw", "board")

        self.current_player = player.other()
        return True

    def check_win(self, row: int, col: int) -> bool:
        """Check whether the token at (row, col) is part of four in a row."""
        return check_win_at_position(self.grid, row, col) is not None

    def is_draw(self) -> bool:
        """True when every column's top cell is occupied."""
        return bool(np.all(self.grid[0] != Player.EMPTY.value))

    def winning_positions(self) -> List[Position]:
        """
        Coordinates of the winning line, for highlighting.

        The whole grid is rescanned for the winner's tokens, so the line is
        found even when it does not pass through the last move.

        Returns:
            Four (row, col) positions, or an empty list if nobody has won
        """
        return find_winning_line(self.grid, self.winner)

    def get_state(self) -> np.ndarray:
        return self.grid.copy()

    def render(self) -> str:
        return render_board_ascii(self.grid, highlight=self.winning_positions(),
                                  last_move=self.last_move, gravity=self.gravity)

    def __str__(self) -> str:
        return self.render()
