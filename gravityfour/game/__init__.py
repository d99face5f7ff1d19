"""
gravityfour.game - Core game mechanics for Gravity Four

This package contains the board engine, game presets, the shared game
session and the Gymnasium environment.
"""

from gravityfour.game.board import Board
from gravityfour.game.rules import GravityFourGame, GravityFourEnv
from gravityfour.game.session import FormAction, GameSession
from gravityfour.game.settings import DIFFICULTY_PRESETS, GameMode, GameSettings

__all__ = ['Board', 'GravityFourGame', 'GravityFourEnv', 'FormAction', 'GameSession',
           'DIFFICULTY_PRESETS', 'GameMode', 'GameSettings']
