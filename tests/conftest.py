# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from harvest.cli.commands import CommandInterpreter
from harvest.config import Settings
from harvest.tasks.task_codec import TaskCodec
from harvest.tasks.task_store import TaskStore

from .fakes import FakeCodec

NOW = datetime(2026, 1, 1, 12, 0)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Explicit settings rooted in tmp_path.

    We build Settings directly rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    return Settings(
        app_name="harvest-test",
        log_level="DEBUG",
        log_to_file=False,
        show_banner=False,
        data_dir=data_dir,
        tasks_path=data_dir / "tasks.txt",
    )


@pytest.fixture()
def clock():
    return lambda: NOW


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def codec(settings: Settings) -> TaskCodec:
    return TaskCodec(settings.tasks_path)


@pytest.fixture()
def interpreter(store: TaskStore, codec: TaskCodec, clock) -> CommandInterpreter:
    """Interpreter wired to a real on-disk codec under tmp_path."""
    return CommandInterpreter(store, codec, clock=clock)


@pytest.fixture()
def fake_codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture()
def fake_interpreter(store: TaskStore, fake_codec: FakeCodec, clock) -> CommandInterpreter:
    return CommandInterpreter(store, fake_codec, clock=clock)  # type: ignore[arg-type]
