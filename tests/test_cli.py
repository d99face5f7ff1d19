import argparse

import pytest

from gravityfour.interfaces.cli import SimpleCLI, build_parser, main
from gravityfour.utils import Gravity, Player


def play_args(**overrides):
    args = dict(command='play', username='ana', difficulty='', mode='normal',
                flip_every=0, seed=None)
    args.update(overrides)
    return argparse.Namespace(**args)


def scripted(*lines):
    """Stand-in for ``input``: answers each prompt with the next line, then EOF."""
    it = iter(lines)
    prompts = []

    def answer(prompt=''):
        prompts.append(prompt)
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    answer.prompts = prompts
    return answer


class TestParser:
    def test_play_defaults(self):
        args = build_parser().parse_args(['play'])
        assert args.flip_every == 5
        assert args.mode == 'normal'
        assert args.difficulty == ''

    def test_rejects_unknown_difficulty(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['play', '--difficulty', 'nightmare'])


class TestPlay:
    def test_hot_seat_win(self, capsys):
        answers = scripted('3', '0', '3', 'zz', '0', '3', '0', '3', '1', 'q')
        cli = SimpleCLI(play_args(), answers)
        assert cli.run() == 0

        out = capsys.readouterr().out
        assert "Invalid move" in out
        assert "Game over! Victory!" in out
        assert "The game is over" in out
        assert "Quitting game." in out
        assert cli.session.board.turn_count == 7
        assert cli.session.board.winner == Player.ONE
        assert answers.prompts[0] == "Player X move (0-6): "
        assert answers.prompts[1] == "Player O move (0-6): "
        assert answers.prompts[-1] == "Game over (r/n/q): "

    def test_rematch_and_new_game(self, capsys):
        cli = SimpleCLI(play_args(difficulty='easy', seed=4), scripted('2', 'r', 'n', 'q'))
        cli.run()
        out = capsys.readouterr().out
        assert "Rematch started." in out
        assert "New game started." in out
        assert "Turn 1, gravity down" in out
        assert cli.session.board.turn_count == 0
        assert int((cli.session.board.grid != 0).sum()) == 3
        assert cli.session.settings.difficulty == 'easy'

    def test_gravity_shown(self, capsys):
        cli = SimpleCLI(play_args(flip_every=1), scripted('0', 'q'))
        cli.run()
        out = capsys.readouterr().out
        assert "Gravity reverses every 1 turns." in out
        assert "Turn 0, gravity down" in out
        assert "Turn 1, gravity up" in out
        assert cli.session.board.gravity == Gravity.UP

    def test_end_of_input_stops_play(self, capsys):
        cli = SimpleCLI(play_args(), scripted('3'))
        assert cli.run() == 0
        assert cli.session.board.turn_count == 1


class TestCommands:
    def test_all_validation_scenarios_pass(self, capsys):
        cli = SimpleCLI(argparse.Namespace(command='test_all'))
        passed, run = cli.run_all_tests()
        assert passed == run
        assert "All tests passed!" in capsys.readouterr().out

    def test_position_with_win(self, capsys):
        values = ['0'] * 42
        for row in range(2, 6):
            values[row * 7 + 3] = '2'
        cli = SimpleCLI(argparse.Namespace(command='test', position=','.join(values)))
        assert cli.run() == 0
        out = capsys.readouterr().out
        assert "Win for O" in out
        assert "Valid moves with gravity down" in out

    def test_bad_position(self, capsys):
        cli = SimpleCLI(argparse.Namespace(command='test', position='1,2'))
        assert cli.run() == 1
        assert "Error parsing position" in capsys.readouterr().out

    def test_main_runs_benchmark(self, capsys):
        assert main(['benchmark', '--iterations', '20']) == 0
        assert "Rendering board 20 times" in capsys.readouterr().out

    def test_main_without_command(self, capsys):
        assert main([]) == 1

    @pytest.mark.parametrize("iterations", ['0', '-3'])
    def test_benchmark_rejects_non_positive_iterations(self, capsys, iterations):
        with pytest.raises(SystemExit) as exc:
            main(['benchmark', '--iterations', iterations])
        assert exc.value.code == 2
        assert "must be at least 1" in capsys.readouterr().err

    def test_benchmark_guards_iterations(self, capsys):
        cli = SimpleCLI(argparse.Namespace(command='benchmark', iterations=0))
        assert cli.run() == 1
        assert "Iterations must be at least 1" in capsys.readouterr().out
