"""Tool definitions and handlers, grouped by domain.

Each module exposes ``register() -> (tools, handlers)``. ``MODULES`` is the
fixed set the dispatcher loads at construction.
"""

from __future__ import annotations

from itsm_tools.tools import knowledge, tickets

MODULES = (tickets, knowledge)

__all__ = ["MODULES"]
