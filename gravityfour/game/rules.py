"""
rules.py - Game management and Gymnasium environment for Gravity Four

This module provides:
1. GravityFourGame, a small game manager used by the command-line front end
2. GravityFourEnv, a gymnasium-compatible environment around the Board
"""

from typing import Any, Dict, List, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from gravityfour.debug import debug
from gravityfour.game.board import Board
from gravityfour.utils import ROWS, COLS, GameResult, Gravity, Player


class GravityFourGame:
    """
    High-level game manager.

    Keeps the board together with the list of columns played, which is
    enough to replay a game from its starting position.
    """

    def __init__(self, board: Optional[Board] = None):
        debug.debug("Initializing GravityFourGame", "game")
        self.board = board if board is not None else Board()
        self.start = self.board.copy()
        self.history: List[int] = []

    def reset(self) -> None:
        """Start a new game with the same board settings."""
        debug.debug("Resetting game", "game")
        self.board.reset()
        self.start = self.board.copy()
        self.history = []

    def make_move(self, column: int) -> bool:
        if self.board.drop(column):
            self.history.append(column)
            return True
        debug.debug(f"Game: move in column {column} rejected", "game")
        return False

    def replay(self) -> List[Board]:
        """Boards after each move of the game, starting from the initial position."""
        board = self.start.copy()
        frames = [board.copy()]
        for column in self.history:
            board.drop(column)
            frames.append(board.copy())
        return frames

    def is_game_over(self) -> bool:
        return self.board.game_over

    def get_winner(self) -> Optional[Player]:
        winner = self.board.winner
        return None if winner == Player.EMPTY else winner

    def get_current_player(self) -> Player:
        return self.board.current_player

    def get_valid_moves(self) -> List[int]:
        return self.board.get_valid_moves()

    def render(self) -> str:
        return self.board.render()


class GravityFourEnv(gym.Env):
    """
    Gravity Four environment following the Gymnasium interface.

    Both players act through the same environment; rewards are given from
    player ONE's point of view.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    reward_win = 1.0
    reward_lose = -1.0
    reward_draw = 0.1
    reward_invalid_move = -0.5
    reward_step = -0.01

    def __init__(self, rows: int = ROWS, cols: int = COLS, prefill: int = 0,
                 gravity: Gravity = Gravity.DOWN, flip_interval: int = 0,
                 render_mode: Optional[str] = None):
        """
        Create the environment.

        Args:
            rows: Board rows
            cols: Board columns
            prefill: Random tokens placed on every reset
            gravity: Initial gravity direction
            flip_interval: Turns between gravity reversals (0 never reverses)
            render_mode: "ascii", "human" or None
        """
        debug.debug("Initializing GravityFourEnv", "env")
        if render_mode is not None and render_mode not in self.metadata['render_modes']:
            raise ValueError(f"Unsupported render mode: {render_mode}")

        self.action_space = spaces.Discrete(cols)
        self.observation_space = spaces.Box(low=0, high=2, shape=(rows, cols), dtype=np.int8)

        self._board_args = dict(rows=rows, cols=cols, prefill=prefill,
                                gravity=gravity, flip_interval=flip_interval)
        self.board = Board(**self._board_args)
        self.render_mode = render_mode

    def reset(self, seed: Optional[int] = None,
              options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        super().reset(seed=seed)
        debug.debug("Resetting environment", "env")

        if seed is not None:
            self.board = Board(seed=seed, **self._board_args)
        else:
            self.board.reset()

        if self.render_mode == "human":
            self.render()
        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        debug.trace(f"Environment step with action {action}", "env")

        if not self.board.drop(int(action)):
            debug.warning(f"Invalid action: {action}", "env")
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        reward = self.reward_step
        terminated = False
        result = self.board.game_result
        if result == GameResult.PLAYER_ONE_WIN:
            reward, terminated = self.reward_win, True
        elif result == GameResult.PLAYER_TWO_WIN:
            reward, terminated = self.reward_lose, True
        elif result == GameResult.DRAW:
            reward, terminated = self.reward_draw, True

        if terminated:
            debug.info(f"Episode finished: {result.name}", "env")
        if self.render_mode == "human":
            self.render()
        return self._get_observation(), reward, terminated, False, self._get_info()

    def render(self) -> Optional[Union[str, np.ndarray]]:
        if self.render_mode == "ascii":
            return self.board.render()
        if self.render_mode == "human":
            print(self.board.render())
        return None

    def _get_observation(self) -> np.ndarray:
        return self.board.get_state().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        valid_moves = self.board.get_valid_moves()
        return {
            'valid_moves': valid_moves,
            'num_valid_moves': len(valid_moves),
            'current_player': self.board.current_player.value,
            'game_result': self.board.game_result.name,
            'turn_count': self.board.turn_count,
            'gravity': self.board.gravity.name,
            'winning_line': self.board.winning_positions(),
            'last_move': self.board.last_move,
        }
