"""Shared pytest fixtures for itsm_tools tests."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from click.testing import CliRunner

from itsm_tools.dispatcher import Dispatcher
from itsm_tools.knowledge import KnowledgeBase
from itsm_tools.logging import LOGGER_NAME
from itsm_tools.loop import LineLoop
from itsm_tools.repository import TicketRepository


class FakeClock:
    """Manually advanced clock for deterministic timestamps."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1.0) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repo() -> TicketRepository:
    """Fresh repository for each test."""
    return TicketRepository()


@pytest.fixture
def clocked_repo(clock: FakeClock) -> TicketRepository:
    return TicketRepository(clock=clock)


@pytest.fixture
def dispatcher(repo: TicketRepository) -> Dispatcher:
    return Dispatcher(repo, KnowledgeBase())


@pytest.fixture
def line_loop(dispatcher: Dispatcher) -> LineLoop:
    return LineLoop(dispatcher)


async def _aiter(lines: list[str]) -> AsyncIterator[str]:
    for line in lines:
        yield line


@pytest.fixture
def run_lines(line_loop: LineLoop) -> Callable[..., Awaitable[list[dict[str, Any]]]]:
    """Feed raw lines through a LineLoop and return the parsed output lines."""

    async def _run(lines: list[str], loop: LineLoop | None = None) -> list[dict[str, Any]]:
        out: list[str] = []

        async def write(line: str) -> None:
            out.append(line)

        await (loop or line_loop).run(_aiter(lines), write)
        return [json.loads(line) for line in out]

    return _run


def tool_call(name: str, parameters: dict[str, Any] | None = None, id: Any = "1") -> str:
    """Build a canonical tool_call line."""
    message: dict[str, Any] = {"type": "tool_call", "data": {"name": name, "parameters": parameters or {}}}
    if id is not None:
        message["id"] = id
    return json.dumps(message)


@pytest.fixture
def make_tool_call() -> Callable[..., str]:
    return tool_call


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _reset_itsm_logger() -> Iterator[None]:
    """Drop handlers a test (or a CLI invocation) attached to the package logger."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
