"""itsm_tools: line-protocol tool adapter for mock ITSM ticketing."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("itsm-tools")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from itsm_tools.dispatcher import Dispatcher
from itsm_tools.repository import Ticket, TicketNotFound, TicketRepository

__all__ = ["Dispatcher", "Ticket", "TicketNotFound", "TicketRepository", "__version__"]
