"""
gravityfour - Connect Four with an optional gravity-reversal rule

This package provides the board engine, difficulty presets, a lock-guarded
single-game session, a Gymnasium environment and a command-line front end.
"""

__version__ = '0.1.0'
