"""Pure helpers shared across tool modules.

Validators return ``None`` when the value is acceptable, or a failure payload
the handler returns as-is. Nothing here touches the repository.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar, cast

from itsm_tools.knowledge import KnowledgeBase
from itsm_tools.repository import Ticket, TicketRepository
from itsm_tools.types.api import FailureResponse, SlimTicket

_T = TypeVar("_T")

DEFAULT_URL_BASE = "https://example.com"


@dataclass(frozen=True)
class ToolContext:
    """What a handler may touch. Built once per dispatcher."""

    repository: TicketRepository
    knowledge_base: KnowledgeBase
    url_base: str = DEFAULT_URL_BASE


Handler = Callable[[ToolContext, dict[str, Any]], Awaitable[Any]]


def _parse_args(arguments: dict[str, Any], cls: type[_T]) -> _T:
    """Cast arguments to a typed dict for static analysis.

    Handlers run the ``_validate_*`` checks first; this cast() provides mypy
    type narrowing only.
    """
    return cast(_T, arguments)


def _failure(error: str) -> FailureResponse:
    return {"success": False, "error": error}


def _slim_ticket(ticket: Ticket) -> SlimTicket:
    """Return the 4-key shape used by list and update results."""
    return SlimTicket(id=ticket.id, title=ticket.title, status=ticket.status, system=ticket.system)


def _validate_required(arguments: dict[str, Any], *names: str) -> FailureResponse | None:
    """Reject a missing or null required argument."""
    for name in names:
        if arguments.get(name) is None:
            return _failure(f"{name} is required")
    return None


def _validate_str(value: Any, name: str) -> FailureResponse | None:
    """Return a validation error if *value* is not ``None`` and not a ``str``."""
    if value is not None and not isinstance(value, str):
        return _failure(f"{name} must be a string")
    return None


def _validate_bool(value: Any, name: str) -> FailureResponse | None:
    if value is not None and not isinstance(value, bool):
        return _failure(f"{name} must be a boolean")
    return None


def _validate_int_range(
    value: Any,
    name: str,
    min_val: int | None = None,
) -> FailureResponse | None:
    """Return a validation error if *value* is not ``None`` and below *min_val*.

    When *value* is ``None`` it is considered optional and passes.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        return _failure(f"{name} must be an integer")
    if min_val is not None and value < min_val:
        return _failure(f"{name} must be >= {min_val}")
    return None


def _validate_strings(arguments: dict[str, Any], *names: str) -> FailureResponse | None:
    for name in names:
        err = _validate_str(arguments.get(name), name)
        if err:
            return err
    return None
