"""Parse and generate ticket markdown documents.

A document is a run of ticket blocks. Each block opens with a header line
whose marker fixes the ticket type::

    # epic: Observability Refactor [OBS-1]
    Improve tracing coverage.

    ---
    *Enriched:*
    Polished description.

    ---
    *Metadata:*
    - Key: OBS-1
    - Status: To Do

Anything that is not recognised stays in the ticket body; parsing never
raises.
"""

from enum import Enum
from pathlib import Path

from jai.keys import extract_key, remove_key
from jai.models import Document, Ticket, TicketType

RULE = "---"
METADATA_MARKER = "*Metadata:*"
ENRICHED_MARKER = "*Enriched:*"

MARKERS = {
    TicketType.EPIC: "# epic:",
    TicketType.TASK: "## task:",
    TicketType.SUBTASK: "### subtask:",
}


class FieldKind(Enum):
    """Ticket attribute a metadata field writes to."""

    KEY = "key"
    STATUS = "status"
    PRIORITY = "priority"
    EPIC_REF = "epic_key"
    PARENT_REF = "parent_key"


_TASK_TYPES = (TicketType.TASK, TicketType.SPIKE)

# (field name, owning ticket type) -> attribute. Names are overloaded:
# "ParentKey" is the epic for a task but the task for a subtask.
FIELD_TABLE: dict[tuple[str, TicketType], FieldKind] = {
    **{("Key", t): FieldKind.KEY for t in TicketType},
    **{("Status", t): FieldKind.STATUS for t in TicketType},
    **{("Priority", t): FieldKind.PRIORITY for t in TicketType},
    **{("EpicKey", t): FieldKind.EPIC_REF for t in TicketType},
    **{("ParentEpic", t): FieldKind.EPIC_REF for t in TicketType},
    **{("ParentTask", t): FieldKind.PARENT_REF for t in TicketType},
    **{("ParentKey", t): FieldKind.EPIC_REF for t in _TASK_TYPES},
    ("ParentKey", TicketType.SUBTASK): FieldKind.PARENT_REF,
    ("TaskKey", TicketType.SUBTASK): FieldKind.PARENT_REF,
}


class _State(Enum):
    OUTSIDE = "outside"
    BODY = "body"
    ENRICHED = "enriched"
    METADATA = "metadata"


# --- Header lines ---


def header_marker(ticket_type: TicketType) -> str:
    """Marker for a ticket type. Spikes live at task depth."""
    if ticket_type is TicketType.SPIKE:
        return MARKERS[TicketType.TASK]
    return MARKERS[ticket_type]


def parse_header(line: str) -> tuple[TicketType, str, str] | None:
    """Parse a header line into (type, title, key), or None.

    The key is left inside the title; use remove_key to strip it.
    """
    stripped = line.strip()
    for ticket_type, marker in MARKERS.items():
        if stripped.startswith(marker):
            title = stripped[len(marker) :].strip()
            return ticket_type, title, extract_key(title)
    return None


def format_header(ticket: Ticket) -> str:
    """Build the header line for a ticket."""
    marker = header_marker(ticket.type)
    if ticket.key:
        return f"{marker} {remove_key(ticket.title)} [{ticket.key}]"
    return f"{marker} {ticket.title}"


# --- Metadata block ---


def resolve_field(name: str, owner: TicketType) -> FieldKind | None:
    """Look up which attribute a metadata field sets for this ticket type."""
    return FIELD_TABLE.get((name, owner))


def is_field_line(line: str) -> bool:
    """True for lines shaped like "- Name: value", known field or not."""
    line = line.strip()
    if not line.startswith("- "):
        return False
    name, sep, _ = line[2:].partition(":")
    return bool(sep) and bool(name.strip())


def apply_metadata_line(line: str, ticket: Ticket) -> bool:
    """Apply one "- Field: value" line to ticket.

    Returns False for lines that are not fields or name unknown fields.
    """
    if not is_field_line(line):
        return False
    name, _, value = line.strip()[2:].partition(":")
    kind = resolve_field(name.strip(), ticket.type)
    if kind is None:
        return False
    setattr(ticket, kind.value, value.strip())
    return True


def format_metadata(ticket: Ticket) -> list[str]:
    """Build the metadata block lines, ending with a blank line."""
    fields = [
        ("Key", ticket.key),
        ("Status", ticket.status),
        ("Priority", ticket.priority),
    ]
    if ticket.type is TicketType.EPIC:
        fields.append(("EpicKey", ticket.epic_key))
    elif ticket.type.is_task_like:
        fields.append(("ParentKey", ticket.epic_key))
    else:
        fields.append(("TaskKey", ticket.parent_key))
        fields.append(("EpicKey", ticket.epic_key))

    lines = [RULE, METADATA_MARKER]
    lines.extend(f"- {name}: {value}" for name, value in fields if value)
    lines.append("")
    return lines


# --- Whole documents ---


def _close(ticket: Ticket, body: list[str], enriched: list[str]) -> Ticket:
    ticket.raw_content = "\n".join(body).strip()
    ticket.enriched_content = "\n".join(enriched).strip()
    return ticket


def parse_tickets(text: str) -> list[Ticket]:
    """Parse document text into tickets, in order of appearance.

    Text before the first header is ignored. A rule line only opens a
    metadata (or enrichment) section when the very next line is the
    matching marker; otherwise the rule stays in the body and the next
    line is read as usual, so a header straight after such a rule still
    opens a new ticket.

    Inside a metadata block, "- Name: value" lines are fields (unknown
    names are dropped). A blank line ends the block; any other line ends
    it and becomes body text.
    """
    lines = text.splitlines()
    tickets: list[Ticket] = []
    current: Ticket | None = None
    body: list[str] = []
    enriched: list[str] = []
    state = _State.OUTSIDE

    i = 0
    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        header = parse_header(line)
        if header is not None:
            if current is not None:
                tickets.append(_close(current, body, enriched))
            ticket_type, title, key = header
            current = Ticket(type=ticket_type, title=remove_key(title), key=key, line_number=i + 1)
            body, enriched = [], []
            state = _State.BODY
            i += 1
            continue

        if state is _State.OUTSIDE:
            i += 1
            continue

        if state is _State.METADATA:
            if not stripped:
                state = _State.BODY
                i += 1
                continue
            if is_field_line(stripped):
                apply_metadata_line(stripped, current)
                i += 1
                continue
            # Anything else closes the block and is looked at again below.
            state = _State.BODY

        if stripped == RULE:
            following = lines[i + 1].strip() if i + 1 < len(lines) else None
            if following == METADATA_MARKER:
                state = _State.METADATA
                i += 2
                continue
            if following == ENRICHED_MARKER:
                state = _State.ENRICHED
                i += 2
                continue

        (enriched if state is _State.ENRICHED else body).append(line)
        i += 1

    if current is not None:
        tickets.append(_close(current, body, enriched))

    return tickets


def format_ticket(ticket: Ticket) -> list[str]:
    """Build all lines for one ticket block, including the separator."""
    lines = [format_header(ticket)]
    if ticket.raw_content:
        lines.append(ticket.raw_content)
    if ticket.enriched_content:
        lines.extend(["", RULE, ENRICHED_MARKER, ticket.enriched_content])
    lines.append("")
    lines.extend(format_metadata(ticket))
    lines.extend(["", ""])
    return lines


def serialize_tickets(tickets: list[Ticket]) -> str:
    """Generate document text for tickets."""
    lines: list[str] = []
    for ticket in tickets:
        lines.extend(format_ticket(ticket))
    return "\n".join(lines)


def parse_document(text: str, path: Path | None = None) -> Document:
    """Parse text into a Document."""
    return Document(path=path, tickets=parse_tickets(text))


def serialize_document(document: Document) -> str:
    """Generate text for a Document."""
    return serialize_tickets(document.tickets)
