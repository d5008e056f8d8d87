# tests/test_bootstrap.py

from __future__ import annotations

import builtins
import logging
from pathlib import Path

import pytest

from harvest.cli.bootstrap import create_interpreter
from harvest.cli.commands import CommandInterpreter
from harvest.config import Settings
from harvest.connectors.console_connector import run_console_loop
from harvest.logging_setup import setup_logging
from harvest.tasks.task_codec import read_lines
from harvest.tasks.task_store import TaskStore

from .fakes import FakeCodec


def test_settings_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HARVEST_APP_NAME", "garden")
    monkeypatch.setenv("HARVEST_DATA_DIR", str(tmp_path / "d"))
    monkeypatch.setenv("HARVEST_LOG_TO_FILE", "no")
    monkeypatch.delenv("HARVEST_TASKS_PATH", raising=False)

    s = Settings.from_env(dotenv=False)
    assert s.app_name == "garden"
    assert s.log_to_file is False
    assert s.tasks_path == tmp_path / "d" / "tasks.txt"


def test_settings_explicit_tasks_path(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HARVEST_TASKS_PATH", str(tmp_path / "elsewhere.txt"))
    assert Settings.from_env(dotenv=False).tasks_path == tmp_path / "elsewhere.txt"


def test_create_interpreter_rehydrates_store(settings: Settings, clock) -> None:
    settings.tasks_path.parent.mkdir(parents=True)
    settings.tasks_path.write_text(
        "TODO | X | Buy milk\nBROKEN LINE\nDEADLINE | 0 | Pay rent | 2099-01-01 09:00\n",
        "utf-8",
    )

    interp = create_interpreter(settings=settings, clock=clock)
    assert [t.description for t in interp.store.all()] == ["Buy milk", "Pay rent"]
    assert interp.store.all()[0].is_done


def test_console_loop_runs_until_bye(settings: Settings, clock, monkeypatch, capsys) -> None:
    interp = create_interpreter(settings=settings, clock=clock)
    lines = iter(["todo Buy milk", "", "list", "bye", "todo never read"])
    monkeypatch.setattr(builtins, "input", lambda *a: next(lines))

    run_console_loop(interp, settings)

    out = capsys.readouterr().out
    assert "Got it. I've added this task: Buy milk" in out
    assert "1.T [ ] Buy milk" in out
    assert "Bye. Hope to see you again soon!" in out
    assert "never read" not in out
    assert read_lines(settings.tasks_path) == ["TODO | 0 | Buy milk"]


def test_console_loop_saves_on_eof(settings: Settings, clock, monkeypatch) -> None:
    interp = create_interpreter(settings=settings, clock=clock)
    interp.store.add_todo("Unsaved")

    def _eof(*a):
        raise EOFError

    monkeypatch.setattr(builtins, "input", _eof)
    run_console_loop(interp, settings)
    assert read_lines(settings.tasks_path) == ["TODO | 0 | Unsaved"]


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_setup_logging_writes_file(tmp_path: Path, restore_root_logging) -> None:
    setup_logging(log_dir=tmp_path / "logs", console_level=logging.ERROR)
    logging.getLogger("harvest.test").info("hello file")
    for h in logging.getLogger().handlers:
        h.flush()

    assert "hello file" in (tmp_path / "logs" / "harvest.log").read_text("utf-8")


def test_console_loop_reports_failed_save_on_eof(settings: Settings, monkeypatch, capsys) -> None:
    interp = CommandInterpreter(TaskStore(), FakeCodec(fail_saves=True))  # type: ignore[arg-type]

    def _eof(*a):
        raise EOFError

    monkeypatch.setattr(builtins, "input", _eof)
    run_console_loop(interp, settings)
    assert "Warning: Error saving tasks to file: disk full" in capsys.readouterr().out
