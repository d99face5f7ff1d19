"""
utils.py - Constants, enumerations and grid helpers for Gravity Four

The helpers here operate on raw numpy grids and take the grid shape from the
array itself, so they work for every preset board size.
"""

from enum import Enum, auto
from typing import Iterable, List, Optional, Set, Tuple

import numpy as np

# Classic board
ROWS = 6
COLS = 7
CONNECT_N = 4  # Number of pieces in a row to win

# Turns between gravity reversals in the extended rules
GRAVITY_FLIP_INTERVAL = 5

Position = Tuple[int, int]


class Player(Enum):
    """Players, doubling as cell states."""
    EMPTY = 0
    ONE = 1
    TWO = 2

    def other(self) -> 'Player':
        if self == Player.ONE:
            return Player.TWO
        elif self == Player.TWO:
            return Player.ONE
        return Player.EMPTY

    def __str__(self):
        if self == Player.EMPTY:
            return " "
        elif self == Player.ONE:
            return "X"
        else:
            return "O"


class GameResult(Enum):
    IN_PROGRESS = auto()
    PLAYER_ONE_WIN = auto()
    PLAYER_TWO_WIN = auto()
    DRAW = auto()

    def is_game_over(self) -> bool:
        return self != GameResult.IN_PROGRESS

    @property
    def winner(self) -> Player:
        """The winning player, or Player.EMPTY when nobody has won."""
        if self == GameResult.PLAYER_ONE_WIN:
            return Player.ONE
        if self == GameResult.PLAYER_TWO_WIN:
            return Player.TWO
        return Player.EMPTY

    @staticmethod
    def win_for(player: Player) -> 'GameResult':
        if player == Player.ONE:
            return GameResult.PLAYER_ONE_WIN
        if player == Player.TWO:
            return GameResult.PLAYER_TWO_WIN
        raise ValueError(f"No win result for {player!r}")


class Gravity(Enum):
    """Direction in which a dropped token travels along its column."""
    DOWN = 1
    UP = -1

    def flipped(self) -> 'Gravity':
        return Gravity.UP if self == Gravity.DOWN else Gravity.DOWN

    @property
    def arrow(self) -> str:
        return "v" if self == Gravity.DOWN else "^"


class Direction(Enum):
    """Axes checked for four in a row."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_DOWN = auto()  # top-left to bottom-right
    DIAGONAL_UP = auto()    # top-right to bottom-left


# (row, col) step along each axis
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_DOWN: (1, 1),
    Direction.DIAGONAL_UP: (1, -1),
}


def is_valid_position(grid: np.ndarray, row: int, col: int) -> bool:
    """Check whether (row, col) lies inside ``grid``."""
    rows, cols = grid.shape
    return 0 <= row < rows and 0 <= col < cols


def landing_row(grid: np.ndarray, column: int, gravity: Gravity) -> Optional[int]:
    """
    Find the cell a token dropped in ``column`` would occupy.

    The column is scanned from the end gravity pulls towards (the bottom row
    for Gravity.DOWN, row 0 for Gravity.UP) and the first empty cell wins.

    Args:
        grid: The game board
        column: Column index
        gravity: Active gravity direction

    Returns:
        Row index, or None if the column is out of range or full
    """
    rows, cols = grid.shape
    if not 0 <= column < cols:
        return None

    scan = range(rows - 1, -1, -1) if gravity == Gravity.DOWN else range(rows)
    for row in scan:
        if grid[row, column] == Player.EMPTY.value:
            return row
    return None


def count_direction(grid: np.ndarray, row: int, col: int, dr: int, dc: int,
                    limit: int = CONNECT_N - 1) -> int:
    """Count same-valued cells after (row, col) stepping by (dr, dc), up to ``limit``."""
    value = grid[row, col]
    count = 0
    r, c = row + dr, col + dc
    while count < limit and is_valid_position(grid, r, c) and grid[r, c] == value:
        count += 1
        r += dr
        c += dc
    return count


def check_win_at_position(grid: np.ndarray, row: int, col: int) -> Optional[Direction]:
    """
    Check whether the token at (row, col) completes four in a row.

    Consecutive same-player tokens are counted forwards and backwards along
    each axis; a total of CONNECT_N or more is a win.

    Returns:
        The winning axis, or None if there is no win through this cell
    """
    if grid[row, col] == Player.EMPTY.value:
        return None

    for direction, (dr, dc) in DIRECTION_VECTORS.items():
        total = (1 + count_direction(grid, row, col, dr, dc)
                 + count_direction(grid, row, col, -dr, -dc))
        if total >= CONNECT_N:
            return direction

    return None


def find_winning_line(grid: np.ndarray, player: Player) -> List[Position]:
    """
    Scan the whole grid for a line of CONNECT_N tokens owned by ``player``.

    Cells are visited in row-major order and each axis is walked forwards from
    the cell, so the first line found is returned, starting at its top-most
    (then left-most) cell.

    Returns:
        Exactly CONNECT_N (row, col) positions, or an empty list
    """
    if player == Player.EMPTY:
        return []

    rows, cols = grid.shape
    for r in range(rows):
        for c in range(cols):
            if grid[r, c] != player.value:
                continue
            for dr, dc in DIRECTION_VECTORS.values():
                positions = [(r, c)]
                for i in range(1, CONNECT_N):
                    r2, c2 = r + dr * i, c + dc * i
                    if not is_valid_position(grid, r2, c2) or grid[r2, c2] != player.value:
                        break
                    positions.append((r2, c2))
                if len(positions) == CONNECT_N:
                    return positions

    return []


def parse_position(text: str, rows: int = ROWS, cols: int = COLS) -> np.ndarray:
    """
    Parse a comma-separated, row-major list of cell values into a grid.

    Raises:
        ValueError: On a wrong number of values or values outside 0..2
    """
    values = [int(v) for v in text.replace(" ", "").split(",") if v != ""]
    if len(values) != rows * cols:
        raise ValueError(f"Position string must have {rows * cols} values, got {len(values)}")
    if any(v not in (0, 1, 2) for v in values):
        raise ValueError("Cell values must be 0, 1 or 2")
    return np.array(values, dtype=int).reshape(rows, cols)


def render_board_ascii(grid: np.ndarray,
                       highlight: Iterable[Position] = (),
                       last_move: Optional[Position] = None,
                       gravity: Optional[Gravity] = None) -> str:
    """
    Render the grid as ASCII art.

    Winning cells are shown in lower case, the last move is wrapped in
    brackets and the header shows the gravity arrow over every column.
    """
    rows, cols = grid.shape
    winning: Set[Position] = set(highlight)

    lines = []
    if gravity is not None:
        lines.append("".join(f"  {gravity.arrow} " for _ in range(cols)))
    lines.append("+" + "---+" * cols)

    for r in range(rows):
        cells = []
        for c in range(cols):
            token = str(Player(int(grid[r, c])))
            if (r, c) in winning:
                token = token.lower()
            if last_move == (r, c):
                cells.append(f"[{token}]")
            else:
                cells.append(f" {token} ")
        lines.append("|" + "|".join(cells) + "|")
        lines.append("+" + "---+" * cols)

    lines.append("".join(f" {c:^3}" for c in range(cols)))
    return "\n".join(lines)
