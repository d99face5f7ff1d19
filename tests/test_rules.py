import numpy as np

from gravityfour.game.board import Board
from gravityfour.game.rules import GravityFourEnv, GravityFourGame
from gravityfour.utils import Gravity, Player


class TestGravityFourGame:
    def test_history_records_accepted_moves(self):
        game = GravityFourGame()
        assert game.make_move(3)
        assert not game.make_move(42)
        assert game.make_move(3)
        assert game.history == [3, 3]
        assert game.get_current_player() == Player.ONE

    def test_winner(self):
        game = GravityFourGame()
        for col in [3, 0, 3, 0, 3, 0, 3]:
            game.make_move(col)
        assert game.is_game_over()
        assert game.get_winner() == Player.ONE
        assert game.get_valid_moves() == []

    def test_no_winner_in_progress(self):
        game = GravityFourGame()
        game.make_move(0)
        assert game.get_winner() is None

    def test_replay_follows_gravity_flips(self):
        game = GravityFourGame(Board(flip_interval=5, prefill=4, seed=9))
        for col in range(7):
            game.make_move(col)

        frames = game.replay()
        assert len(frames) == len(game.history) + 1
        assert np.array_equal(frames[-1].grid, game.board.grid)
        assert frames[-1].gravity == game.board.gravity

    def test_reset(self):
        game = GravityFourGame(Board(flip_interval=5))
        for col in range(5):
            game.make_move(col)
        game.reset()
        assert game.history == []
        assert game.board.gravity == Gravity.DOWN
        assert "v" in game.render()


class TestGravityFourEnv:
    def test_reset(self):
        env = GravityFourEnv()
        observation, info = env.reset(seed=0)
        assert observation.shape == (6, 7)
        assert observation.dtype == np.int8
        assert env.observation_space.contains(observation)
        assert info['valid_moves'] == list(range(7))
        assert info['current_player'] == 1

    def test_win_reward(self):
        env = GravityFourEnv()
        env.reset()
        for col in [3, 0, 3, 0, 3, 0]:
            _, reward, terminated, truncated, _ = env.step(col)
            assert reward == env.reward_step
            assert not terminated and not truncated

        observation, reward, terminated, truncated, info = env.step(3)
        assert reward == env.reward_win
        assert terminated and not truncated
        assert info['game_result'] == 'PLAYER_ONE_WIN'
        assert info['winning_line'] == [(2, 3), (3, 3), (4, 3), (5, 3)]

    def test_invalid_move_truncates(self):
        env = GravityFourEnv()
        env.reset()
        for _ in range(6):
            env.step(0)
        before = env.board.get_state()

        observation, reward, terminated, truncated, info = env.step(0)
        assert reward == env.reward_invalid_move
        assert truncated and not terminated
        assert info['invalid_move'] is True
        assert np.array_equal(observation, before)

    def test_gravity_reversal_in_info(self):
        env = GravityFourEnv(flip_interval=5)
        env.reset()
        for col in range(5):
            _, _, _, _, info = env.step(col)
        assert info['gravity'] == 'UP'
        assert info['turn_count'] == 5

    def test_ascii_render(self):
        env = GravityFourEnv(rows=7, cols=8, prefill=5, render_mode="ascii")
        env.reset(seed=1)
        assert int((env.board.grid != 0).sum()) == 5
        assert len(env.render().splitlines()[-1].split()) == 8
