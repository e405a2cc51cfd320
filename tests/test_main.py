import io
import shlex
import sys
from pathlib import Path

import pytest

from mastermind.main import build_config, main
from mastermind.game import ConfigError

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_build_config_modes():
    config, secret = build_config("6", ["4"])
    assert (config.num_colors, config.num_pegs, secret) == (6, 4, None)

    config, secret = build_config("8", ["0", "7", "7", "2", "4"])
    assert (config.num_colors, config.num_pegs, secret) == (8, 5, [0, 7, 7, 2, 4])


@pytest.mark.parametrize("colors,values", [
    ("x", ["4"]),
    ("6", ["four"]),
    ("1", ["4"]),
    ("6", ["11"]),
    ("6", ["1", "3", "6", "5"]),
    ("6", ["1", "-3", "3", "5"]),
])
def test_build_config_rejects(colors, values):
    with pytest.raises(ConfigError):
        build_config(colors, values)


def test_main_codemaker(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("0 7 2 7 4\n0 7 7 2 4\n"))
    assert main(["8", "0", "7", "7", "2", "4"]) == 0
    captured = capsys.readouterr()
    assert captured.out == "3 2\n5 0\n"
    assert "ERROR" not in captured.err


def test_main_codemaker_malformed_guess(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("0 7 2 7\n"))
    assert main(["8", "0", "7", "7", "2", "4"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.strip() == "ERROR"


def test_main_codemaker_end_of_input(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("0 0 0 0\n"))
    assert main(["6", "1", "3", "3", "5"]) == 1
    assert capsys.readouterr().out == "0 0\n"


def test_main_codebreaker_trivial(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("0 0\n0 0\n3 0\n"))
    assert main(["4", "3"]) == 0
    assert capsys.readouterr().out == "0 0 0\n1 1 1\n2 2 2\n"


def test_main_codebreaker_protocol_error(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("0 1\n"))
    assert main(["4", "2"]) == 1
    captured = capsys.readouterr()
    assert captured.out == "0 0\n"
    assert captured.err.strip() == "ERROR"


def test_main_verbose_report(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("0 0\n0 1\n"))
    assert main(["2", "0", "1", "--verbose"]) == 0
    captured = capsys.readouterr()
    assert captured.out == "1 0\n2 0\n"
    assert "Role: codemaker" in captured.err
    assert "Turn" in captured.err and "Response" in captured.err


@pytest.mark.parametrize("argv", [
    ["6", "99"],
    ["300", "2"],
    ["six", "4"],
])
def test_main_bad_arguments(argv, capsys):
    assert main(argv) == 1
    assert capsys.readouterr().err.strip() == "ERROR"


def test_main_missing_arguments(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["6"])
    assert exc.value.code == 1
    assert "ERROR" in capsys.readouterr().err


def test_main_codebreaker_against_codemaker_process(monkeypatch, capsys):
    monkeypatch.chdir(REPO_ROOT)
    peer = f"{shlex.quote(sys.executable)} -m mastermind 6 1 3 3 5"
    assert main(["6", "4", "--against", peer, "--verbose"]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Secret: [1, 3, 3, 5]" in captured.err
    assert "Peer exit status: 0" in captured.err


def test_main_against_missing_program(capsys):
    assert main(["6", "4", "--against", "mastermind-peer-that-does-not-exist"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.strip().endswith("ERROR")
