import numpy as np
import pytest

from gravityfour.utils import (COLS, ROWS, Direction, GameResult, Gravity, Player,
                               check_win_at_position, find_winning_line, landing_row,
                               parse_position, render_board_ascii)


def empty_grid(rows=ROWS, cols=COLS):
    return np.zeros((rows, cols), dtype=int)


class TestEnums:
    def test_player_other(self):
        assert Player.ONE.other() == Player.TWO
        assert Player.TWO.other() == Player.ONE
        assert Player.EMPTY.other() == Player.EMPTY

    def test_result_winner(self):
        assert GameResult.PLAYER_ONE_WIN.winner == Player.ONE
        assert GameResult.PLAYER_TWO_WIN.winner == Player.TWO
        assert GameResult.DRAW.winner == Player.EMPTY
        assert not GameResult.IN_PROGRESS.is_game_over()
        assert GameResult.DRAW.is_game_over()

    def test_win_for_empty_raises(self):
        with pytest.raises(ValueError):
            GameResult.win_for(Player.EMPTY)

    def test_gravity_flipped(self):
        assert Gravity.DOWN.flipped() == Gravity.UP
        assert Gravity.UP.flipped() == Gravity.DOWN


class TestLandingRow:
    def test_down_and_up(self):
        grid = empty_grid()
        assert landing_row(grid, 2, Gravity.DOWN) == ROWS - 1
        assert landing_row(grid, 2, Gravity.UP) == 0

    def test_skips_occupied_cells(self):
        grid = empty_grid()
        grid[ROWS - 1, 1] = 1
        grid[0, 1] = 2
        assert landing_row(grid, 1, Gravity.DOWN) == ROWS - 2
        assert landing_row(grid, 1, Gravity.UP) == 1

    def test_full_or_out_of_range(self):
        grid = empty_grid()
        grid[:, 4] = 1
        assert landing_row(grid, 4, Gravity.DOWN) is None
        assert landing_row(grid, 4, Gravity.UP) is None
        assert landing_row(grid, COLS, Gravity.DOWN) is None
        assert landing_row(grid, -1, Gravity.UP) is None


class TestWinHelpers:
    def test_axis_reported(self):
        grid = empty_grid()
        grid[1:5, 0] = 2
        assert check_win_at_position(grid, 3, 0) == Direction.VERTICAL
        assert check_win_at_position(grid, 0, 0) is None  # empty cell

    def test_longer_line_still_four_positions(self):
        grid = empty_grid()
        grid[ROWS - 1, 0:6] = 1
        line = find_winning_line(grid, Player.ONE)
        assert line == [(ROWS - 1, c) for c in range(4)]

    def test_no_line_for_other_player(self):
        grid = empty_grid()
        grid[ROWS - 1, 0:4] = 1
        assert find_winning_line(grid, Player.TWO) == []
        assert find_winning_line(grid, Player.EMPTY) == []

    def test_anti_diagonal_found_on_large_board(self):
        grid = empty_grid(8, 10)
        for i in range(4):
            grid[3 + i, 9 - i] = 2
        assert find_winning_line(grid, Player.TWO) == [(3, 9), (4, 8), (5, 7), (6, 6)]


class TestParsing:
    def test_parse_position(self):
        values = [0] * (ROWS * COLS)
        values[-1] = 2
        grid = parse_position(",".join(map(str, values)))
        assert grid.shape == (ROWS, COLS)
        assert grid[ROWS - 1, COLS - 1] == 2

    @pytest.mark.parametrize("text", ["1,2,3", ",".join(["3"] * (ROWS * COLS)), "a,b"])
    def test_parse_position_errors(self, text):
        with pytest.raises(ValueError):
            parse_position(text)


class TestRender:
    def test_layout(self):
        text = render_board_ascii(empty_grid())
        lines = text.splitlines()
        # border + (row + border) per row + column numbers
        assert len(lines) == 1 + 2 * ROWS + 1
        assert lines[-1].split() == [str(c) for c in range(COLS)]

    def test_gravity_arrow(self):
        text = render_board_ascii(empty_grid(), gravity=Gravity.UP)
        assert text.splitlines()[0].split() == ["^"] * COLS
