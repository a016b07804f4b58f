# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""TypedDict contracts for tool handler input arguments.

Each TypedDict mirrors the JSON Schema ``inputSchema`` on the corresponding
``mcp.types.Tool`` definition.  The ``TOOL_ARGS_MAP`` registry maps tool names
to their TypedDict class so the sync test can verify structural agreement.

Unlike the MCP SDK path, the line protocol delivers arguments unchecked, so
handlers validate at runtime before touching the repository.  The TypedDicts
are for static analysis only.
"""

# NOTE: Do NOT add ``from __future__ import annotations`` to this module.
# It breaks TypedDict.__required_keys__ / __optional_keys__ introspection,
# which the sync test in test_input_type_contracts.py depends on.

from typing import NotRequired, TypedDict

# ---------------------------------------------------------------------------
# tools/tickets.py handlers
# ---------------------------------------------------------------------------


class CreateTicketArgs(TypedDict):
    title: str
    description: str
    priority: NotRequired[str]
    system: NotRequired[str]


class GetTicketArgs(TypedDict):
    ticket_id: str


class UpdateTicketArgs(TypedDict):
    ticket_id: str
    status: NotRequired[str]
    priority: NotRequired[str]
    comment: NotRequired[str]


class ListTicketsArgs(TypedDict):
    status: NotRequired[str]
    assigned_to: NotRequired[str]
    limit: NotRequired[int]
    system: NotRequired[str]


class AssignTicketArgs(TypedDict):
    ticket_id: str
    user_id: str


class AddCommentArgs(TypedDict):
    ticket_id: str
    comment: str
    internal: NotRequired[bool]


# ---------------------------------------------------------------------------
# tools/knowledge.py handlers
# ---------------------------------------------------------------------------


class SearchKnowledgeBaseArgs(TypedDict):
    query: str
    limit: NotRequired[int]


TOOL_ARGS_MAP: dict[str, type] = {
    "create_ticket": CreateTicketArgs,
    "get_ticket": GetTicketArgs,
    "update_ticket": UpdateTicketArgs,
    "list_tickets": ListTicketsArgs,
    "assign_ticket": AssignTicketArgs,
    "add_comment": AddCommentArgs,
    "search_knowledge_base": SearchKnowledgeBaseArgs,
}
