"""Tool for searching the static knowledge base."""

from __future__ import annotations

from typing import Any

from mcp.types import Tool

from itsm_tools.knowledge import DEFAULT_SEARCH_LIMIT
from itsm_tools.tools.common import Handler, ToolContext, _parse_args, _validate_int_range, _validate_required, _validate_strings
from itsm_tools.types.api import FailureResponse, SearchKnowledgeBaseResponse
from itsm_tools.types.inputs import SearchKnowledgeBaseArgs


def register() -> tuple[list[Tool], dict[str, Handler]]:
    """Return (tool_definitions, handler_map) for knowledge base tools."""
    tools = [
        Tool(
            name="search_knowledge_base",
            description="Search knowledge base articles by title and summary (case-insensitive substring).",
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "Search text"},
                    "limit": {
                        "type": "integer",
                        "default": DEFAULT_SEARCH_LIMIT,
                        "minimum": 0,
                        "description": f"Max results (default {DEFAULT_SEARCH_LIMIT})",
                    },
                },
                "required": ["query"],
            },
        ),
    ]

    handlers: dict[str, Handler] = {
        "search_knowledge_base": _handle_search_knowledge_base,
    }

    return tools, handlers


async def _handle_search_knowledge_base(
    ctx: ToolContext, arguments: dict[str, Any]
) -> SearchKnowledgeBaseResponse | FailureResponse:
    limit = arguments.get("limit")
    err = (
        _validate_required(arguments, "query")
        or _validate_strings(arguments, "query")
        or _validate_int_range(limit, "limit", min_val=0)
    )
    if err:
        return err
    args = _parse_args(arguments, SearchKnowledgeBaseArgs)
    articles = ctx.knowledge_base.search(args["query"], limit=DEFAULT_SEARCH_LIMIT if limit is None else limit)
    return {
        "success": True,
        "articles": [a.to_dict() for a in articles],
        "total": len(articles),
    }
