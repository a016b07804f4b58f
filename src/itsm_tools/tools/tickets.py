"""Tools for ticket create, read, update, assign, comment, and list."""

from __future__ import annotations

from typing import Any

from mcp.types import Tool

from itsm_tools.repository import (
    DEFAULT_PRIORITY,
    DEFAULT_SYSTEM,
    SYSTEM_PREFIXES,
    TicketNotFound,
)
from itsm_tools.tools.common import (
    Handler,
    ToolContext,
    _failure,
    _parse_args,
    _slim_ticket,
    _validate_bool,
    _validate_int_range,
    _validate_required,
    _validate_strings,
)
from itsm_tools.types.api import (
    AddCommentResponse,
    AssignTicketResponse,
    CreateTicketResponse,
    FailureResponse,
    GetTicketResponse,
    ListTicketsResponse,
    UpdateTicketResponse,
)
from itsm_tools.types.inputs import (
    AddCommentArgs,
    AssignTicketArgs,
    CreateTicketArgs,
    GetTicketArgs,
    ListTicketsArgs,
    UpdateTicketArgs,
)

DEFAULT_LIST_LIMIT = 10

_SYSTEMS = sorted(SYSTEM_PREFIXES)


def register() -> tuple[list[Tool], dict[str, Handler]]:
    """Return (tool_definitions, handler_map) for ticket tools."""
    tools = [
        Tool(
            name="create_ticket",
            description="Create a ticket in the given ITSM system. Returns the new ticket id and URL.",
            inputSchema={
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Ticket title"},
                    "description": {"type": "string", "description": "Ticket description"},
                    "priority": {
                        "type": "string",
                        "default": DEFAULT_PRIORITY,
                        "description": "Priority label (free-form, e.g. low/medium/high)",
                    },
                    "system": {
                        "type": "string",
                        "default": DEFAULT_SYSTEM,
                        "description": f"Originating system ({', '.join(_SYSTEMS)}); unknown values get the ZD- prefix",
                    },
                },
                "required": ["title", "description"],
            },
        ),
        Tool(
            name="get_ticket",
            description="Get full details of a ticket including comments.",
            inputSchema={
                "type": "object",
                "properties": {
                    "ticket_id": {"type": "string", "description": "Ticket ID (e.g. JIRA-1000)"},
                },
                "required": ["ticket_id"],
            },
        ),
        Tool(
            name="update_ticket",
            description="Update a ticket's status or priority, optionally appending a comment. Omitted fields are left unchanged.",
            inputSchema={
                "type": "object",
                "properties": {
                    "ticket_id": {"type": "string", "description": "Ticket ID"},
                    "status": {"type": "string", "description": "New status (free-form)"},
                    "priority": {"type": "string", "description": "New priority (free-form)"},
                    "comment": {"type": "string", "description": "Comment to append (public)"},
                },
                "required": ["ticket_id"],
            },
        ),
        Tool(
            name="list_tickets",
            description="List tickets newest first with optional filters.",
            inputSchema={
                "type": "object",
                "properties": {
                    "status": {"type": "string", "description": "Filter by exact status; 'all' disables the filter"},
                    "assigned_to": {"type": "string", "description": "Filter by assignee user ID"},
                    "limit": {
                        "type": "integer",
                        "default": DEFAULT_LIST_LIMIT,
                        "minimum": 0,
                        "description": f"Max results (default {DEFAULT_LIST_LIMIT})",
                    },
                    "system": {"type": "string", "description": "Filter by originating system"},
                },
            },
        ),
        Tool(
            name="assign_ticket",
            description="Assign a ticket to a user.",
            inputSchema={
                "type": "object",
                "properties": {
                    "ticket_id": {"type": "string", "description": "Ticket ID"},
                    "user_id": {"type": "string", "description": "Assignee user ID"},
                },
                "required": ["ticket_id", "user_id"],
            },
        ),
        Tool(
            name="add_comment",
            description="Append a comment to a ticket. Set internal=true for agent-only notes.",
            inputSchema={
                "type": "object",
                "properties": {
                    "ticket_id": {"type": "string", "description": "Ticket ID"},
                    "comment": {"type": "string", "description": "Comment text"},
                    "internal": {"type": "boolean", "default": False, "description": "Hide from the requester"},
                },
                "required": ["ticket_id", "comment"],
            },
        ),
    ]

    handlers: dict[str, Handler] = {
        "create_ticket": _handle_create_ticket,
        "get_ticket": _handle_get_ticket,
        "update_ticket": _handle_update_ticket,
        "list_tickets": _handle_list_tickets,
        "assign_ticket": _handle_assign_ticket,
        "add_comment": _handle_add_comment,
    }

    return tools, handlers


def ticket_url(url_base: str, system: str, ticket_id: str) -> str:
    return f"{url_base.rstrip('/')}/{system}/tickets/{ticket_id}"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _handle_create_ticket(ctx: ToolContext, arguments: dict[str, Any]) -> CreateTicketResponse | FailureResponse:
    err = _validate_required(arguments, "title", "description") or _validate_strings(
        arguments, "title", "description", "priority", "system"
    )
    if err:
        return err
    args = _parse_args(arguments, CreateTicketArgs)
    # Defaults apply only when the key is absent or null; "" is kept as given.
    priority = args.get("priority")
    system = args.get("system")
    ticket = ctx.repository.create_ticket(
        args["title"],
        args["description"],
        priority=DEFAULT_PRIORITY if priority is None else priority,
        system=DEFAULT_SYSTEM if system is None else system,
    )
    return {
        "success": True,
        "ticket": {
            "id": ticket.id,
            "title": ticket.title,
            "system": ticket.system,
            "status": ticket.status,
            "url": ticket_url(ctx.url_base, ticket.system, ticket.id),
        },
    }


async def _handle_get_ticket(ctx: ToolContext, arguments: dict[str, Any]) -> GetTicketResponse | FailureResponse:
    err = _validate_required(arguments, "ticket_id") or _validate_strings(arguments, "ticket_id")
    if err:
        return err
    args = _parse_args(arguments, GetTicketArgs)
    try:
        ticket = ctx.repository.get_ticket(args["ticket_id"])
    except TicketNotFound as e:
        return _failure(str(e))
    return {"success": True, "ticket": ticket.to_dict()}


async def _handle_update_ticket(ctx: ToolContext, arguments: dict[str, Any]) -> UpdateTicketResponse | FailureResponse:
    err = _validate_required(arguments, "ticket_id") or _validate_strings(
        arguments, "ticket_id", "status", "priority", "comment"
    )
    if err:
        return err
    args = _parse_args(arguments, UpdateTicketArgs)
    try:
        ticket = ctx.repository.update_ticket(
            args["ticket_id"],
            # Empty strings leave the field unchanged, like an omitted one.
            status=args.get("status") or None,
            priority=args.get("priority") or None,
            comment=args.get("comment") or None,
        )
    except TicketNotFound as e:
        return _failure(str(e))
    return {"success": True, "ticket": _slim_ticket(ticket)}


async def _handle_list_tickets(ctx: ToolContext, arguments: dict[str, Any]) -> ListTicketsResponse | FailureResponse:
    limit = arguments.get("limit")
    err = _validate_strings(arguments, "status", "assigned_to", "system") or _validate_int_range(limit, "limit", min_val=0)
    if err:
        return err
    args = _parse_args(arguments, ListTicketsArgs)
    tickets = ctx.repository.list_tickets(
        status=args.get("status"),
        assigned_to=args.get("assigned_to"),
        system=args.get("system"),
        limit=DEFAULT_LIST_LIMIT if limit is None else limit,
    )
    # total is the size of the returned page, not of the full match set.
    return {
        "success": True,
        "tickets": [_slim_ticket(t) for t in tickets],
        "total": len(tickets),
    }


async def _handle_assign_ticket(ctx: ToolContext, arguments: dict[str, Any]) -> AssignTicketResponse | FailureResponse:
    err = _validate_required(arguments, "ticket_id", "user_id") or _validate_strings(arguments, "ticket_id", "user_id")
    if err:
        return err
    args = _parse_args(arguments, AssignTicketArgs)
    try:
        ticket = ctx.repository.assign_ticket(args["ticket_id"], args["user_id"])
    except TicketNotFound as e:
        return _failure(str(e))
    return {
        "success": True,
        "ticket": {
            "id": ticket.id,
            "title": ticket.title,
            "assignee": args["user_id"],
            "system": ticket.system,
        },
    }


async def _handle_add_comment(ctx: ToolContext, arguments: dict[str, Any]) -> AddCommentResponse | FailureResponse:
    err = (
        _validate_required(arguments, "ticket_id", "comment")
        or _validate_strings(arguments, "ticket_id", "comment")
        or _validate_bool(arguments.get("internal"), "internal")
    )
    if err:
        return err
    args = _parse_args(arguments, AddCommentArgs)
    try:
        comment = ctx.repository.add_comment(args["ticket_id"], args["comment"], internal=args.get("internal") or False)
    except TicketNotFound as e:
        return _failure(str(e))
    return {"success": True, "comment": comment.to_dict(), "ticket_id": args["ticket_id"]}
