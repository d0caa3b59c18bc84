"""jai: markdown-native ticket drafting with focus tracking."""

from jai.focus import FocusContext, FocusError, FocusState
from jai.models import Document, Focus, Ticket, TicketType
from jai.parser import parse_tickets, serialize_tickets
from jai.store import FileTicketStore, MemoryTicketStore, TicketStore

__all__ = [
    "Document",
    "FileTicketStore",
    "Focus",
    "FocusContext",
    "FocusError",
    "FocusState",
    "MemoryTicketStore",
    "Ticket",
    "TicketStore",
    "TicketType",
    "parse_tickets",
    "serialize_tickets",
]
