"""Pytest configuration and fixtures for gitoperations tests."""

import os
from pathlib import Path
from typing import Generator

import pytest

from gitoperations.config import reset_settings
from gitoperations.git.tracing import TraceConfig, reset_trace_config


class TraceRecorder:
    """Sink that records every trace call."""

    def __init__(self):
        self.lines: list[str] = []

    def __call__(self, fmt: str, *args: object) -> None:
        self.lines.append(fmt % args)

    @property
    def count(self) -> int:
        return len(self.lines)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep settings and trace state from leaking between tests."""
    for name in list(os.environ):
        if name.startswith("GITOPERATIONS_"):
            monkeypatch.delenv(name)
    monkeypatch.setattr("gitoperations.config.CONFIG_FILE", tmp_path / "missing-config.yaml")
    reset_settings()
    reset_trace_config()
    yield
    reset_settings()
    reset_trace_config()


@pytest.fixture
def recorder() -> TraceRecorder:
    """A recording trace sink."""
    return TraceRecorder()


@pytest.fixture
def trace(recorder: TraceRecorder) -> TraceConfig:
    """An enabled trace configuration writing to the recorder."""
    return TraceConfig(enabled=True, sink=recorder)
