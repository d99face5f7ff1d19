"""
settings.py - Difficulty presets and game modes

A difficulty picks the board size and how many random tokens are placed
before the first turn; a mode picks the initial gravity direction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, NamedTuple, Optional

from gravityfour.game.board import Board
from gravityfour.utils import ROWS, COLS, GRAVITY_FLIP_INTERVAL, Gravity


class Preset(NamedTuple):
    rows: int
    cols: int
    prefill: int


DEFAULT_PRESET = Preset(ROWS, COLS, 0)

DIFFICULTY_PRESETS: Dict[str, Preset] = {
    "easy": Preset(6, 7, 3),
    "normal": Preset(7, 8, 5),
    "hard": Preset(8, 10, 7),
}


class GameMode(Enum):
    NORMAL = "normal"
    INVERSE = "inverse"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'GameMode':
        """Anything other than "inverse" is the normal mode."""
        if value == cls.INVERSE.value:
            return cls.INVERSE
        return cls.NORMAL

    @property
    def gravity(self) -> Gravity:
        return Gravity.UP if self == GameMode.INVERSE else Gravity.DOWN


def preset_for(difficulty: Optional[str]) -> Preset:
    """Board preset for a difficulty name; unknown names get the classic board."""
    return DIFFICULTY_PRESETS.get(difficulty or "", DEFAULT_PRESET)


@dataclass
class GameSettings:
    """Everything needed to (re)create a game."""
    username: str = ""
    difficulty: str = ""
    mode: GameMode = GameMode.NORMAL
    flip_interval: int = GRAVITY_FLIP_INTERVAL
    seed: Optional[int] = None

    @property
    def preset(self) -> Preset:
        return preset_for(self.difficulty)

    def matches(self, username: str, difficulty: str, mode: GameMode) -> bool:
        return (self.username, self.difficulty, self.mode) == (username, difficulty, mode)

    def create_board(self) -> Board:
        rows, cols, prefill = self.preset
        return Board(rows, cols, prefill=prefill, gravity=self.mode.gravity,
                     flip_interval=self.flip_interval, seed=self.seed)
