"""Name -> handler registry shared by the line protocol and the MCP server."""

from __future__ import annotations

import logging
import time
from typing import Any

from mcp.types import Tool

from itsm_tools.knowledge import KnowledgeBase
from itsm_tools.protocol import Invocation
from itsm_tools.repository import TicketRepository
from itsm_tools.tools import MODULES
from itsm_tools.tools.common import DEFAULT_URL_BASE, Handler, ToolContext
from itsm_tools.types.api import UnknownToolResponse

logger = logging.getLogger(__name__)


def unknown_tool(name: str) -> UnknownToolResponse:
    """Result for an unregistered name. It is wrapped like any other result."""
    return {"error": f"Unknown tool: {name}"}


class Dispatcher:
    """Owns the repository and catalog for the life of the process."""

    def __init__(
        self,
        repository: TicketRepository | None = None,
        knowledge_base: KnowledgeBase | None = None,
        *,
        url_base: str = DEFAULT_URL_BASE,
    ) -> None:
        self.context = ToolContext(
            repository=repository if repository is not None else TicketRepository(),
            knowledge_base=knowledge_base if knowledge_base is not None else KnowledgeBase(),
            url_base=url_base,
        )
        self._tools: list[Tool] = []
        self._handlers: dict[str, Handler] = {}
        for module in MODULES:
            tools, handlers = module.register()
            self._tools.extend(tools)
            for name, handler in handlers.items():
                if name in self._handlers:
                    msg = f"Duplicate tool registration: {name}"
                    raise ValueError(msg)
                self._handlers[name] = handler

    @property
    def repository(self) -> TicketRepository:
        return self.context.repository

    @property
    def tools(self) -> list[Tool]:
        return list(self._tools)

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    async def call(self, name: str, arguments: dict[str, Any]) -> Any:
        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("unknown_tool", extra={"tool": name})
            return unknown_tool(name)

        t0 = time.monotonic()
        try:
            result = await handler(self.context, arguments)
        except Exception:
            logger.error("tool_error", extra={"tool": name, "args_data": arguments}, exc_info=True)
            raise
        duration_ms = round((time.monotonic() - t0) * 1000, 1)
        logger.info("tool_call", extra={"tool": name, "args_data": arguments, "duration_ms": duration_ms})
        return result

    async def dispatch(self, invocation: Invocation) -> Any:
        return await self.call(invocation.name, invocation.parameters)
