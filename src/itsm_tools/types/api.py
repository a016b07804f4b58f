"""TypedDicts for tool handler result payloads.

Every payload is wrapped in a ``tool_response`` envelope by the line loop,
including the failure shapes: ``success`` is an application-level flag, not a
transport status.
"""

from __future__ import annotations

from typing import TypedDict

from itsm_tools.types.core import ArticleDict, CommentDict, TicketDict

# ---------------------------------------------------------------------------
# Shared types
# ---------------------------------------------------------------------------


class FailureResponse(TypedDict):
    """Missing ticket or rejected parameters."""

    success: bool
    error: str


class UnknownToolResponse(TypedDict):
    """Result for a name that is not in the registry. Carries no ``success`` key."""

    error: str


class SlimTicket(TypedDict):
    """Reduced 4-key ticket shape for listings and update results."""

    id: str
    title: str
    status: str
    system: str


# ---------------------------------------------------------------------------
# Per-tool results
# ---------------------------------------------------------------------------


class CreatedTicket(TypedDict):
    id: str
    title: str
    system: str
    status: str
    url: str


class CreateTicketResponse(TypedDict):
    success: bool
    ticket: CreatedTicket


class GetTicketResponse(TypedDict):
    success: bool
    ticket: TicketDict


class UpdateTicketResponse(TypedDict):
    success: bool
    ticket: SlimTicket


class ListTicketsResponse(TypedDict):
    """``total`` counts the returned (post-limit) tickets, not all matches."""

    success: bool
    tickets: list[SlimTicket]
    total: int


class AssignedTicket(TypedDict):
    id: str
    title: str
    assignee: str
    system: str


class AssignTicketResponse(TypedDict):
    success: bool
    ticket: AssignedTicket


class AddCommentResponse(TypedDict):
    success: bool
    comment: CommentDict
    ticket_id: str


class SearchKnowledgeBaseResponse(TypedDict):
    success: bool
    articles: list[ArticleDict]
    total: int
