"""Tests for built-in command dispatch."""

import os

import pytest

from turtlesh_pkg.dispatcher import Dispatcher
from turtlesh_pkg.history import HistoryFile
from turtlesh_pkg.session import ShellSession


class RecordingLauncher:
    """Stand-in for the process launcher that records each argv."""

    def __init__(self, status=0):
        self.calls = []
        self.status = status

    def __call__(self, argv):
        self.calls.append(list(argv))
        return self.status


@pytest.fixture
def launcher():
    return RecordingLauncher()


@pytest.fixture
def session():
    return ShellSession()


@pytest.fixture
def dispatcher(session, launcher, tmp_path):
    return Dispatcher(session, HistoryFile(tmp_path / "hist"), launcher=launcher)


class TestRouting:
    """Test built-in recognition and fallthrough."""

    def test_external_command_goes_to_launcher(self, dispatcher, launcher):
        launcher.status = 5
        assert dispatcher.dispatch(["ls", "-l"]) == 5
        assert launcher.calls == [["ls", "-l"]]

    def test_builtins_are_case_sensitive(self, dispatcher, launcher):
        dispatcher.dispatch(["EXIT"])
        assert launcher.calls == [["EXIT"]]
        assert not dispatcher.session.exit_requested

    def test_is_builtin(self, dispatcher):
        for name in ("exit", "cd", "history", "math", "setmemlimit", "showmemlimit", "stopwatch"):
            assert dispatcher.is_builtin(name)
        assert not dispatcher.is_builtin("echo")


class TestExit:
    def test_exit_sets_flag(self, dispatcher, session):
        assert dispatcher.dispatch(["exit"]) == 1
        assert session.exit_requested

    def test_empty_command_is_exit(self, dispatcher, session, launcher):
        assert dispatcher.dispatch([]) == 1
        assert session.exit_requested
        assert launcher.calls == []


class TestCd:
    def test_cd_to_directory(self, dispatcher, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        target = tmp_path / "sub"
        target.mkdir()
        assert dispatcher.dispatch(["cd", str(target)]) == 0
        assert os.path.realpath(os.getcwd()) == os.path.realpath(target)

    def test_cd_without_argument_goes_home(self, dispatcher, tmp_path, monkeypatch):
        home = tmp_path / "home"
        home.mkdir()
        monkeypatch.setenv("HOME", str(home))
        monkeypatch.chdir(tmp_path)
        assert dispatcher.dispatch(["cd"]) == 0
        assert os.path.realpath(os.getcwd()) == os.path.realpath(home)

    def test_cd_failure_leaves_cwd(self, dispatcher, tmp_path, monkeypatch, capfd):
        monkeypatch.chdir(tmp_path)
        assert dispatcher.dispatch(["cd", "/does/not/exist"]) != 0
        assert os.path.realpath(os.getcwd()) == os.path.realpath(tmp_path)
        assert "/does/not/exist" in capfd.readouterr().err


class TestHistory:
    def test_history_runs_cat(self, dispatcher, launcher, tmp_path):
        dispatcher.dispatch(["history"])
        assert launcher.calls == [["cat", "-n", str(tmp_path / "hist")]]


class TestMath:
    def test_math_prints_result(self, dispatcher, capfd):
        assert dispatcher.dispatch(["math", "2+3*4"]) == 0
        assert capfd.readouterr().out == "14\n"

    def test_math_joins_arguments(self, dispatcher, capfd):
        assert dispatcher.dispatch(["math", "2", "^", "10"]) == 0
        assert capfd.readouterr().out == "1024\n"

    def test_math_float_output(self, dispatcher, capfd):
        dispatcher.dispatch(["math", "pi"])
        assert capfd.readouterr().out == "3.14159\n"

    def test_math_without_argument(self, dispatcher, capfd):
        assert dispatcher.dispatch(["math"]) == 1
        assert 'expected argument to "math"' in capfd.readouterr().err

    def test_math_lenient_by_default(self, dispatcher, capfd):
        assert dispatcher.dispatch(["math", "2+x"]) == 0
        assert capfd.readouterr().out == "2\n"

    def test_math_strict_reports_errors(self, launcher, tmp_path, capfd):
        strict = Dispatcher(
            ShellSession(strict_math=True), HistoryFile(tmp_path / "h"), launcher=launcher
        )
        assert strict.dispatch(["math", "2+x"]) == 1
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "Unexpected character" in captured.err


class TestMemLimit:
    def test_set_and_show(self, dispatcher, session, capfd):
        assert dispatcher.dispatch(["setmemlimit", "80+5"]) == 0
        assert session.mem_limit == 85.0
        assert dispatcher.dispatch(["showmemlimit"]) == 0
        assert capfd.readouterr().out == "85%\n"

    def test_default_shown(self, dispatcher, capfd):
        dispatcher.dispatch(["showmemlimit"])
        assert capfd.readouterr().out == "70%\n"

    def test_set_without_argument(self, dispatcher, session):
        assert dispatcher.dispatch(["setmemlimit"]) == 1
        assert session.mem_limit == 70.0


class TestStopwatch:
    def test_stop_before_start(self, dispatcher, capfd):
        assert dispatcher.dispatch(["stopwatch", "stop"]) == 0
        out = capfd.readouterr().out
        assert out.endswith(" seconds\n")
        assert float(out.split()[0]) >= 0.0

    def test_start_stop(self, dispatcher, capfd):
        assert dispatcher.dispatch(["stopwatch", "start"]) == 0
        assert dispatcher.dispatch(["stopwatch", "stop"]) == 0
        assert float(capfd.readouterr().out.split()[0]) < 5.0

    def test_usage(self, dispatcher, capfd):
        assert dispatcher.dispatch(["stopwatch"]) == 1
        assert dispatcher.dispatch(["stopwatch", "lap"]) == 1
        assert "usage" in capfd.readouterr().err
