"""Line loop: read a line, normalize, dispatch, write one response line.

A bad line never ends the loop. Only end of input (or a signal handled by the
CLI) does.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncIterable, Awaitable, Callable
from typing import IO

import anyio

from itsm_tools.dispatcher import Dispatcher
from itsm_tools.protocol import Invocation, ProtocolParseError, encode_error, encode_response, normalize

logger = logging.getLogger(__name__)

Writer = Callable[[str], Awaitable[None]]

# Unrecognized lines are logged, truncated to this many characters.
_LOG_LINE_CHARS = 200


class LineLoop:
    """Drive a :class:`Dispatcher` from a stream of protocol lines.

    Lines are handled one at a time unless *concurrent* is set, in which case
    each line gets its own task and responses may come back out of order
    (callers match them by correlation id). With *timeout* set, an invocation
    still running after that many seconds is cancelled and answered with an
    ``error`` line that carries its correlation id.
    """

    def __init__(self, dispatcher: Dispatcher, *, timeout: float | None = None, concurrent: bool = False) -> None:
        self.dispatcher = dispatcher
        self.timeout = timeout
        self.concurrent = concurrent

    async def handle_line(self, line: str) -> str | None:
        """Process one line. Returns the response line, or ``None`` for no reply."""
        try:
            invocation = normalize(line)
        except ProtocolParseError as e:
            logger.warning("parse_error", extra={"error": str(e)})
            return encode_error(str(e))
        if invocation is None:
            logger.warning("unrecognized_message", extra={"args_data": line[:_LOG_LINE_CHARS]})
            return None

        logger.debug("message_received", extra={"tool": invocation.name, "args_data": {"shape": invocation.shape}})
        try:
            return await self._invoke(invocation)
        except Exception as e:
            # Already logged with traceback by the dispatcher.
            return encode_error(f"Tool {invocation.name} failed: {e}", correlation_id=invocation.correlation_id)

    async def _invoke(self, invocation: Invocation) -> str:
        if self.timeout is None:
            result = await self.dispatcher.dispatch(invocation)
            return encode_response(invocation, result)

        result = None
        with anyio.move_on_after(self.timeout) as scope:
            result = await self.dispatcher.dispatch(invocation)
        if scope.cancelled_caught:
            message = f"Tool {invocation.name} timed out after {self.timeout}s"
            logger.error("tool_timeout", extra={"tool": invocation.name, "error": message})
            return encode_error(message, correlation_id=invocation.correlation_id)
        return encode_response(invocation, result)

    async def run(self, lines: AsyncIterable[str], write: Writer) -> None:
        """Consume *lines* until exhausted, writing each response through *write*."""
        write_lock = anyio.Lock()

        async def process(line: str) -> None:
            response = await self.handle_line(line)
            if response is not None:
                async with write_lock:
                    await write(response)

        if not self.concurrent:
            async for raw in lines:
                line = raw.strip()
                if line:
                    await process(line)
            return

        async with anyio.create_task_group() as tg:
            async for raw in lines:
                line = raw.strip()
                if line:
                    tg.start_soon(process, line)


async def serve_stdio(loop: LineLoop, *, stdin: IO[str] | None = None, stdout: IO[str] | None = None) -> None:
    """Run *loop* over the process's stdin/stdout until stdin closes."""
    reader = anyio.wrap_file(stdin if stdin is not None else sys.stdin)
    writer = anyio.wrap_file(stdout if stdout is not None else sys.stdout)

    async def write(line: str) -> None:
        await writer.write(line + "\n")
        await writer.flush()

    logger.info("service_start", extra={"args_data": {"tools": len(loop.dispatcher.tool_names)}})
    try:
        await loop.run(reader, write)
    finally:
        logger.info("service_shutdown")
