"""
cli.py - Command-line interface for Gravity Four

This module provides a CLI for playing hot-seat games against another person
at the same terminal, analysing board positions, running the built-in
validation scenarios and benchmarking the engine.
"""

import argparse
import random
import sys
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from gravityfour.debug import debug, DebugLevel
from gravityfour.game.board import Board
from gravityfour.game.rules import GravityFourGame
from gravityfour.game.session import FormAction, GameSession
from gravityfour.game.settings import DIFFICULTY_PRESETS, GameMode
from gravityfour.utils import (ROWS, COLS, GRAVITY_FLIP_INTERVAL, Gravity, Player,
                               check_win_at_position, find_winning_line, parse_position,
                               render_board_ascii)

QUIT, REMATCH, NEW_GAME = 'q', 'r', 'n'


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Gravity Four CLI')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--debug_level',
                        choices=[level.name.lower() for level in DebugLevel],
                        default='warning', help='Logging verbosity')
    parser.add_argument('--log_file', type=str, default=None, help='Also log to this file')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    play_parser = subparsers.add_parser('play', help='Play a hot-seat game')
    play_parser.add_argument('--username', type=str, default='player', help='Name shown for player X')
    play_parser.add_argument('--difficulty', choices=sorted(DIFFICULTY_PRESETS), default='',
                             help='Board size and random prefill (default: classic 6x7, no prefill)')
    play_parser.add_argument('--mode', choices=[m.value for m in GameMode], default=GameMode.NORMAL.value,
                             help='normal: gravity starts down, inverse: gravity starts up')
    play_parser.add_argument('--flip-every', dest='flip_every', type=int, default=GRAVITY_FLIP_INTERVAL,
                             help='Reverse gravity after this many turns (0 disables)')
    play_parser.add_argument('--seed', type=int, default=None, help='Seed for the random prefill')

    test_parser = subparsers.add_parser('test', help='Analyse a board position')
    test_parser.add_argument('--position', type=str,
                             help=f'{ROWS * COLS} comma-separated cell values (0 empty, 1 X, 2 O), row by row')

    subparsers.add_parser('test_all', help='Run the built-in validation scenarios')

    benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark the engine')
    benchmark_parser.add_argument('--iterations', type=positive_int, default=1000,
                                  help='Number of iterations for benchmarking')
    return parser


def configure_debug(args: argparse.Namespace) -> None:
    """Configure logging from --debug / --debug_level / --log_file."""
    if getattr(args, 'debug', False):
        debug.configure(level=DebugLevel.DEBUG)
    else:
        debug.set_from_string(getattr(args, 'debug_level', 'warning'))
    if getattr(args, 'log_file', None):
        debug.configure(log_file=args.log_file)


class SimpleCLI:
    """Simple command-line interface for Gravity Four."""

    def __init__(self, args: Optional[argparse.Namespace] = None,
                 input_func: Callable[[str], str] = input):
        self.args = args
        self.input = input_func
        self.session: Optional[GameSession] = None

    def parse_args(self, argv: Optional[Sequence[str]] = None) -> None:
        self.args = build_parser().parse_args(argv)
        configure_debug(self.args)

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Run the command selected by the parsed arguments; returns an exit code."""
        if not self.args:
            self.parse_args(argv)

        if self.args.command == 'play':
            self.play_game()
        elif self.args.command == 'test':
            return 0 if self.test_position() else 1
        elif self.args.command == 'test_all':
            passed, run = self.run_all_tests()
            return 0 if passed == run else 1
        elif self.args.command == 'benchmark':
            return 0 if self.benchmark() else 1
        else:
            print("Please specify a command. Use --help for options.")
            return 1
        return 0

    # --- play ---

    def play_game(self) -> None:
        """Play a hot-seat game through a GameSession."""
        self.session = GameSession(flip_interval=self.args.flip_every, seed=self.args.seed)
        self.session.open(self.args.username, self.args.difficulty, self.args.mode)

        print("Starting a new Gravity Four game!")
        print(f"Gravity reverses every {self.args.flip_every} turns." if self.args.flip_every
              else "Gravity never reverses.")
        print(f"Commands: column number to play, '{QUIT}' to quit, "
              f"'{REMATCH}' for a rematch, '{NEW_GAME}' for a new game.")
        self.show_state()

        while True:
            try:
                user_input = self.input(self.prompt()).strip().lower()
            except EOFError:
                print()
                return

            if user_input == QUIT:
                print("Quitting game.")
                return
            if user_input == NEW_GAME:
                self.session.apply_form({'reset': '1'})
                self.session.open(self.args.username, self.args.difficulty, self.args.mode)
                print("New game started.")
                self.show_state()
                continue
            if user_input == REMATCH:
                self.session.apply_form({'rematch': '1'})
                print("Rematch started.")
                self.show_state()
                continue

            if self.session.board.game_over:
                print(f"The game is over. '{REMATCH}' for a rematch or '{QUIT}' to quit.")
                continue

            action = self.session.apply_form({'col': user_input})
            if action == FormAction.MOVE:
                self.show_state()
            elif action == FormAction.IGNORED:
                print(f"Invalid move. Valid columns: {self.session.board.get_valid_moves()}")

    def prompt(self) -> str:
        board = self.session.board
        if board.game_over:
            return f"Game over ({REMATCH}/{NEW_GAME}/{QUIT}): "
        return f"Player {board.current_player} move (0-{board.cols - 1}): "

    def show_state(self) -> None:
        snapshot = self.session.snapshot()
        print(self.session.board.render())
        print(f"Turn {snapshot['turn_count']}, gravity {snapshot['gravity']}")
        if snapshot['game_over']:
            print(f"Game over! {snapshot['end_message']}")

    # --- position analysis ---

    def test_position(self) -> bool:
        """Analyse the --position board; False if it cannot be parsed."""
        if not self.args.position:
            print("Please provide a position string with --position")
            return False

        try:
            grid = parse_position(self.args.position)
        except ValueError as e:
            print(f"Error parsing position: {e}")
            return False

        print("Loaded position:")
        print(render_board_ascii(grid))

        print("\nTesting win conditions:")
        has_win = False
        for player in (Player.ONE, Player.TWO):
            line = find_winning_line(grid, player)
            if line:
                print(f"Win for {player} along {line}")
                has_win = True
        if not has_win:
            print("No win detected for any player")

        board = Board()
        board.grid = grid
        empty_count = int(np.sum(grid == Player.EMPTY.value))
        print(f"Empty spaces: {empty_count}")
        print(f"Top row full: {board.is_draw()}")
        for gravity in Gravity:
            board.gravity = gravity
            print(f"Valid moves with gravity {gravity.name.lower()}: {board.get_valid_moves()}")
        return True

    # --- validation scenarios ---

    def run_all_tests(self) -> Tuple[int, int]:
        """Run the validation scenarios; returns (passed, run)."""
        print("Running all validation tests...")
        groups = [
            ("horizontal win detection", self.create_horizontal_win_tests(), self.has_win),
            ("vertical win detection", self.create_vertical_win_tests(), self.has_win),
            ("diagonal win detection", self.create_diagonal_win_tests(), self.has_win),
            ("draw condition", self.create_draw_tests(), self.is_draw),
            ("gravity", self.create_gravity_tests(), None),
        ]

        tests_run = tests_passed = 0
        for name, tests, check in groups:
            print(f"\nTesting {name}:")
            for i, (board, expected) in enumerate(tests):
                result = check(board) if check else board
                success = result == expected
                tests_run += 1
                tests_passed += int(success)
                print(f"  Test {i + 1}: {'PASSED' if success else 'FAILED'}")
                if not success and isinstance(board, Board):
                    print(f"    Expected: {expected}, Got: {result}")
                    print(board.render())

        print(f"\nTest summary: {tests_passed}/{tests_run} tests passed")
        if tests_passed == tests_run:
            print("All tests passed!")
        else:
            print(f"Failed tests: {tests_run - tests_passed}")
        return tests_passed, tests_run

    @staticmethod
    def has_win(board: Board) -> bool:
        return any(check_win_at_position(board.grid, r, c) is not None
                   for r in range(board.rows) for c in range(board.cols)
                   if board.grid[r, c] != Player.EMPTY.value)

    def is_draw(self, board: Board) -> bool:
        return board.is_draw() and not self.has_win(board)

    @staticmethod
    def _board_with(cells: List[Tuple[int, int]], player: Player) -> Board:
        board = Board()
        for r, c in cells:
            board.grid[r, c] = player.value
        return board

    def create_horizontal_win_tests(self) -> List[Tuple[Board, bool]]:
        return [
            (self._board_with([(ROWS - 1, c) for c in range(4)], Player.ONE), True),
            (self._board_with([(ROWS - 3, c) for c in range(2, 6)], Player.TWO), True),
            (self._board_with([(ROWS - 2, c) for c in range(3)], Player.ONE), False),
            (self._board_with([(ROWS - 1, c) for c in range(5) if c != 2], Player.ONE), False),
        ]

    def create_vertical_win_tests(self) -> List[Tuple[Board, bool]]:
        return [
            (self._board_with([(r, 0) for r in range(ROWS - 1, ROWS - 5, -1)], Player.ONE), True),
            (self._board_with([(r, 3) for r in range(4)], Player.TWO), True),
            (self._board_with([(r, 6) for r in range(ROWS - 1, ROWS - 4, -1)], Player.ONE), False),
            (self._board_with([(r, 2) for r in range(ROWS - 1, ROWS - 6, -1) if r != ROWS - 3],
                              Player.TWO), False),
        ]

    def create_diagonal_win_tests(self) -> List[Tuple[Board, bool]]:
        return [
            (self._board_with([(ROWS - 1 - i, i) for i in range(4)], Player.ONE), True),
            (self._board_with([(i, i) for i in range(4)], Player.TWO), True),
            (self._board_with([(ROWS - 1 - i, i) for i in range(3)], Player.ONE), False),
            (self._board_with([(ROWS - 1 - i, i) for i in range(5) if i != 2], Player.TWO), False),
        ]

    def create_draw_tests(self) -> List[Tuple[Board, bool]]:
        # Two-column stripes with alternating phase never line up four
        def striped(r: int, c: int) -> int:
            return Player.ONE.value if ((c // 2) + r) % 2 == 0 else Player.TWO.value

        full = Board()
        for r in range(ROWS):
            for c in range(COLS):
                full.grid[r, c] = striped(r, c)

        nearly_full = full.copy()
        nearly_full.grid[0, 3] = Player.EMPTY.value
        return [(full, True), (nearly_full, False)]

    def create_gravity_tests(self) -> List[Tuple[object, object]]:
        """Drop sequences checked against where the tokens must land."""
        up = Board(gravity=Gravity.UP)
        up.drop(2)

        flipping = Board(flip_interval=GRAVITY_FLIP_INTERVAL)
        for col in (0, 1, 2, 3, 4, 5):
            flipping.drop(col)

        return [
            (up.last_move, (0, 2)),
            (flipping.gravity, Gravity.UP),
            (flipping.last_move, (0, 5)),
        ]

    # --- benchmark ---

    def benchmark(self) -> bool:
        """Time the engine; False if the iteration count is not positive."""
        iterations = self.args.iterations
        if iterations < 1:
            print(f"Iterations must be at least 1, got {iterations}")
            return False
        print(f"Running benchmark with {iterations} iterations...")

        debug.start_timer("board_init")
        for _ in range(iterations):
            Board()
        elapsed = debug.end_timer("board_init")
        print(f"Board initialization: {elapsed:.6f} seconds total, "
              f"{elapsed / iterations * 1000:.6f} ms per board")

        board = Board(flip_interval=GRAVITY_FLIP_INTERVAL)
        moves_made = 0
        debug.start_timer("moves")
        for _ in range(iterations):
            if board.drop(random.randint(0, COLS - 1)):
                moves_made += 1
            if board.game_over:
                board.reset()
        elapsed = debug.end_timer("moves")
        print(f"Making {moves_made} moves: {elapsed:.6f} seconds total, "
              f"{elapsed / max(moves_made, 1) * 1000:.6f} ms per move")

        games_played = total_moves = 0
        debug.start_timer("game_simulation")
        for _ in range(max(iterations // 10, 1)):
            game = GravityFourGame(Board(flip_interval=GRAVITY_FLIP_INTERVAL))
            while not game.is_game_over():
                game.make_move(random.choice(game.get_valid_moves()))
            games_played += 1
            total_moves += len(game.history)
        elapsed = debug.end_timer("game_simulation")
        print(f"Played {games_played} games with {total_moves} total moves: "
              f"{elapsed:.6f} seconds total, {elapsed / games_played * 1000:.6f} ms per game")

        debug.start_timer("rendering")
        for _ in range(iterations):
            board.render()
        elapsed = debug.end_timer("rendering")
        print(f"Rendering board {iterations} times: {elapsed:.6f} seconds total, "
              f"{elapsed / iterations * 1000:.6f} ms per render")
        return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    cli = SimpleCLI()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
