"""Tests for the background memory monitor."""

import io
import time

import psutil

from turtlesh_pkg import memwatch
from turtlesh_pkg.memwatch import MemoryWatcher, format_report, top_processes
from turtlesh_pkg.session import ShellSession


FAKE_PROCESSES = [
    {"pid": 10, "name": "small", "memory_percent": 1.0, "cpu_percent": 0.0},
    {"pid": 11, "name": "huge", "memory_percent": 40.0, "cpu_percent": 12.5},
]


class TestCheckOnce:
    """Test a single memory sample against the session threshold."""

    def test_below_limit_is_silent(self, monkeypatch):
        monkeypatch.setattr(memwatch, "memory_usage_percent", lambda: 50.0)
        stream = io.StringIO()
        watcher = MemoryWatcher(ShellSession(mem_limit=70), stream=stream)
        assert watcher.check_once() is False
        assert stream.getvalue() == ""

    def test_above_limit_reports_top_processes(self, monkeypatch):
        monkeypatch.setattr(memwatch, "memory_usage_percent", lambda: 91.0)
        monkeypatch.setattr(memwatch, "top_processes", lambda count: FAKE_PROCESSES[:count])
        stream = io.StringIO()
        watcher = MemoryWatcher(ShellSession(mem_limit=70), top_count=2, stream=stream)
        assert watcher.check_once() is True
        report = stream.getvalue()
        assert "91.0%" in report
        assert "70% limit" in report
        assert "huge" in report

    def test_threshold_is_read_each_time(self, monkeypatch):
        monkeypatch.setattr(memwatch, "memory_usage_percent", lambda: 60.0)
        monkeypatch.setattr(memwatch, "top_processes", lambda count: [])
        session = ShellSession(mem_limit=70)
        watcher = MemoryWatcher(session, stream=io.StringIO())
        assert watcher.check_once() is False
        session.mem_limit = 55
        assert watcher.check_once() is True


class TestReport:
    def test_format_report_columns(self):
        report = format_report(88.0, 70.0, FAKE_PROCESSES)
        lines = report.splitlines()
        assert lines[1].split() == ["PID", "MEM%", "CPU%", "NAME"]
        assert lines[3].split() == ["11", "40.0", "12.5", "huge"]

    def test_top_processes_sorted(self):
        processes = top_processes(3)
        assert len(processes) <= 3
        shares = [p["memory_percent"] for p in processes]
        assert shares == sorted(shares, reverse=True)

    def test_usage_is_a_percentage(self):
        assert 0.0 <= memwatch.memory_usage_percent() <= 100.0


class TestThread:
    """Test start/stop of the polling thread."""

    def test_start_and_stop(self, monkeypatch):
        calls = []
        monkeypatch.setattr(memwatch, "memory_usage_percent", lambda: calls.append(1) or 0.0)
        watcher = MemoryWatcher(ShellSession(), interval=0.01, stream=io.StringIO())
        watcher.start()
        assert watcher.running
        deadline = time.monotonic() + 5
        while not calls and time.monotonic() < deadline:
            time.sleep(0.01)
        watcher.stop(timeout=5)
        assert not watcher.running
        assert calls

    def test_psutil_errors_do_not_kill_thread(self, monkeypatch):
        calls = []

        def failing_sample():
            calls.append(1)
            raise psutil.AccessDenied()

        monkeypatch.setattr(memwatch, "memory_usage_percent", failing_sample)
        watcher = MemoryWatcher(ShellSession(), interval=0.01, stream=io.StringIO())
        watcher.start()
        deadline = time.monotonic() + 5
        while len(calls) < 2 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert watcher.running
        watcher.stop(timeout=5)
        assert len(calls) >= 2
