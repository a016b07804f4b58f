"""In-memory ticket store for the mock ITSM backends.

Single source of truth for ticket state. Both the line protocol and the MCP
server dispatch into one ``TicketRepository`` built at startup; nothing here
is module-global, so every test can start from a fresh store.

Ids are ``{prefix}{sequence}``. The sequence is shared by all systems and only
ever grows, so an id is never reused even across prefixes.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from itsm_tools.types.core import CommentDict, ISOTimestamp, TicketDict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_ID_START = 1000
DEFAULT_PRIORITY = "medium"
DEFAULT_STATUS = "open"
DEFAULT_SYSTEM = "jira"
STATUS_ALL = "all"

SYSTEM_PREFIXES: dict[str, str] = {
    "jira": "JIRA-",
    "servicenow": "SN-",
    "zendesk": "ZD-",
}
FALLBACK_PREFIX = SYSTEM_PREFIXES["zendesk"]

_TICK = timedelta(microseconds=1)


def _now() -> datetime:
    return datetime.now(UTC)


def _iso(value: datetime) -> ISOTimestamp:
    return ISOTimestamp(value.isoformat(timespec="microseconds"))


def prefix_for(system: str) -> str:
    """Return the id prefix for *system*; unknown systems share Zendesk's."""
    return SYSTEM_PREFIXES.get(system, FALLBACK_PREFIX)


class TicketNotFound(KeyError):
    """Raised when a ticket id is not in the repository."""

    def __init__(self, ticket_id: str) -> None:
        super().__init__(f"Ticket {ticket_id} not found")
        self.ticket_id = ticket_id

    def __str__(self) -> str:
        # KeyError.__str__ quotes its argument; keep the message readable.
        return str(self.args[0])


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Comment:
    text: str
    internal: bool = False
    created_at: datetime = field(default_factory=_now)

    def to_dict(self) -> CommentDict:
        return {
            "text": self.text,
            "internal": self.internal,
            "created_at": _iso(self.created_at),
        }


@dataclass
class Ticket:
    id: str
    title: str
    description: str
    system: str
    created_at: datetime
    updated_at: datetime
    priority: str = DEFAULT_PRIORITY
    status: str = DEFAULT_STATUS
    assignee: str | None = None
    comments: list[Comment] = field(default_factory=list)
    # Sequence number behind the id; breaks created_at ties when listing.
    seq: int = field(default=0, repr=False, compare=False)

    def to_dict(self) -> TicketDict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "status": self.status,
            "system": self.system,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "assignee": self.assignee,
            "comments": [c.to_dict() for c in self.comments],
        }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TicketRepository:
    """Mutable ticket set plus the shared id sequence.

    Every read-modify-write runs under one re-entrant lock, so id allocation
    stays strictly monotonic and comment appends stay atomic per ticket even
    if handlers are run concurrently.
    """

    def __init__(
        self,
        *,
        id_start: int = DEFAULT_ID_START,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._tickets: dict[str, Ticket] = {}
        self._next_seq = id_start
        self._clock = clock or _now
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._tickets)

    def __contains__(self, ticket_id: object) -> bool:
        return ticket_id in self._tickets

    def _require(self, ticket_id: str) -> Ticket:
        """Look up a ticket. Caller must hold the lock when it goes on to mutate."""
        ticket = self._tickets.get(ticket_id)
        if ticket is None:
            raise TicketNotFound(ticket_id)
        return ticket

    def _touch(self, ticket: Ticket) -> datetime:
        """Refresh ``updated_at``, strictly later than its previous value."""
        now = self._clock()
        if now <= ticket.updated_at:
            now = ticket.updated_at + _TICK
        ticket.updated_at = now
        return now

    # -- Ticket CRUD ---------------------------------------------------------

    def create_ticket(
        self,
        title: str,
        description: str,
        *,
        priority: str = DEFAULT_PRIORITY,
        system: str = DEFAULT_SYSTEM,
    ) -> Ticket:
        with self._lock:
            seq = self._next_seq
            self._next_seq += 1
            ticket_id = f"{prefix_for(system)}{seq}"
            now = self._clock()
            ticket = Ticket(
                id=ticket_id,
                title=title,
                description=description,
                system=system,
                created_at=now,
                updated_at=now,
                priority=priority,
                seq=seq,
            )
            self._tickets[ticket_id] = ticket
        logger.debug("Created ticket %s", ticket_id)
        return ticket

    def get_ticket(self, ticket_id: str) -> Ticket:
        return self._require(ticket_id)

    def update_ticket(
        self,
        ticket_id: str,
        *,
        status: str | None = None,
        priority: str | None = None,
        comment: str | None = None,
    ) -> Ticket:
        """Apply only the fields that are not ``None``; the rest are left alone."""
        with self._lock:
            ticket = self._require(ticket_id)
            now = self._touch(ticket)
            if status is not None:
                ticket.status = status
            if priority is not None:
                ticket.priority = priority
            if comment is not None:
                ticket.comments.append(Comment(text=comment, internal=False, created_at=now))
            return ticket

    def assign_ticket(self, ticket_id: str, user_id: str) -> Ticket:
        with self._lock:
            ticket = self._require(ticket_id)
            ticket.assignee = user_id
            self._touch(ticket)
            return ticket

    def add_comment(self, ticket_id: str, text: str, *, internal: bool = False) -> Comment:
        with self._lock:
            ticket = self._require(ticket_id)
            now = self._touch(ticket)
            comment = Comment(text=text, internal=internal, created_at=now)
            ticket.comments.append(comment)
            return comment

    # -- Queries -------------------------------------------------------------

    def list_tickets(
        self,
        *,
        status: str | None = None,
        assigned_to: str | None = None,
        system: str | None = None,
        limit: int = 10,
    ) -> list[Ticket]:
        """Filter by equality, newest first, then cut to *limit*.

        A falsy filter value, or ``status="all"``, applies no filter.
        """
        with self._lock:
            tickets = list(self._tickets.values())
        if status and status != STATUS_ALL:
            tickets = [t for t in tickets if t.status == status]
        if assigned_to:
            tickets = [t for t in tickets if t.assignee == assigned_to]
        if system:
            tickets = [t for t in tickets if t.system == system]
        tickets.sort(key=lambda t: (t.created_at, t.seq), reverse=True)
        return tickets[:limit]
