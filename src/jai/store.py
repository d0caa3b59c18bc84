"""Load and save ticket documents from a tickets directory."""

import logging
from collections.abc import Iterator
from pathlib import Path

from jai.hierarchy import find_by_key, search_tickets
from jai.keys import same_key
from jai.models import Document, Ticket
from jai.parser import parse_document, serialize_document

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIXES = (".md", ".markdown")
INBOX_NAME = "inbox.md"


def is_document_name(name: str) -> bool:
    """True for file names the store treats as ticket documents."""
    return name.endswith(DOCUMENT_SUFFIXES)


class TicketStore:
    """Ticket documents under one directory.

    Subclasses supply the storage primitives (_list, _read, _write,
    _exists, _move); everything else is shared.
    """

    def __init__(self, tickets_dir: str | Path) -> None:
        self.tickets_dir = Path(tickets_dir)

    # --- Storage primitives ---

    def _list(self) -> list[Path]:
        raise NotImplementedError

    def _read(self, path: Path) -> str:
        """Return the text at path. Raises FileNotFoundError if missing."""
        raise NotImplementedError

    def _write(self, path: Path, text: str) -> None:
        raise NotImplementedError

    def _exists(self, path: Path) -> bool:
        raise NotImplementedError

    def _move(self, src: Path, dst: Path) -> None:
        raise NotImplementedError

    # --- Paths ---

    def inbox_path(self) -> Path:
        """Document for tickets that have no key yet."""
        return self.tickets_dir / INBOX_NAME

    def path_for(self, key: str) -> Path:
        """Canonical document path for a key, or the inbox if key is empty."""
        if not key:
            return self.inbox_path()
        return self.tickets_dir / f"{key}.md"

    # --- Loading ---

    def load_one(self, path: str | Path) -> Document:
        """Parse one document. A missing file is an empty document."""
        path = Path(path)
        try:
            text = self._read(path)
        except FileNotFoundError:
            return Document(path=path)
        return parse_document(text, path)

    def documents(self) -> Iterator[Document]:
        """Yield every document in name order, skipping unreadable files."""
        for path in self._list():
            try:
                yield self.load_one(path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("skipping %s: %s", path, exc)

    def load_all(self) -> list[Ticket]:
        """All tickets from all documents, in name then document order."""
        tickets: list[Ticket] = []
        for document in self.documents():
            tickets.extend(document.tickets)
        return tickets

    def locate(self, key: str) -> Path | None:
        """Path of the first document holding a ticket with key."""
        for document in self.documents():
            if any(same_key(ticket.key, key) for ticket in document.tickets):
                return document.path
        return None

    def find_by_key(self, key: str) -> Ticket | None:
        return find_by_key(self.load_all(), key)

    def search(self, query: str) -> list[Ticket]:
        """Tickets whose title contains query, ignoring case."""
        return search_tickets(self.load_all(), query)

    # --- Writing ---

    def ensure_exists(self, path: str | Path) -> Path:
        """Create an empty document at path if there is none."""
        path = Path(path)
        if not self._exists(path):
            self._write(path, "")
            logger.debug("created %s", path)
        return path

    def save(self, document: Document) -> None:
        """Regenerate and overwrite a document."""
        if document.path is None:
            raise ValueError("document has no path")
        self._write(document.path, serialize_document(document))
        logger.debug("wrote %d tickets to %s", len(document.tickets), document.path)

    def append(self, path: str | Path, ticket: Ticket) -> Document:
        """Add ticket to the end of the document at path and save it."""
        document = self.load_one(path)
        document.tickets.append(ticket)
        self.save(document)
        return document

    def rename_key(self, old_key: str, new_key: str) -> Path:
        """Give the ticket keyed old_key the key new_key.

        Epic and parent references to old_key are updated in every
        document. Returns the path of the document holding the ticket.
        """
        if self.locate(new_key) is not None:
            raise ValueError(f"Ticket '{new_key}' already exists.")
        path = self.locate(old_key)
        if path is None:
            raise ValueError(f"Ticket '{old_key}' not found.")

        for document in list(self.documents()):
            changed = False
            for ticket in document.tickets:
                if same_key(ticket.key, old_key):
                    ticket.key = new_key
                    changed = True
                if same_key(ticket.epic_key, old_key):
                    ticket.epic_key = new_key
                    changed = True
                if same_key(ticket.parent_key, old_key):
                    ticket.parent_key = new_key
                    changed = True
            if changed:
                self.save(document)

        logger.debug("renamed %s to %s in %s", old_key, new_key, path)
        return path

    def finalize_path(self, path: str | Path, key: str) -> Path:
        """Move a document to the canonical path for key.

        Raises FileExistsError when another document already sits there.
        """
        path = Path(path)
        target = self.path_for(key)
        if target == path:
            return path
        if self._exists(target):
            raise FileExistsError(f"{target} already exists")
        self._move(path, target)
        logger.debug("moved %s to %s", path, target)
        return target


class FileTicketStore(TicketStore):
    """Documents stored as files in a directory."""

    def _list(self) -> list[Path]:
        if not self.tickets_dir.is_dir():
            return []
        paths = [p for p in self.tickets_dir.iterdir() if p.is_file() and is_document_name(p.name)]
        return sorted(paths, key=lambda p: p.name)

    def _read(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def _write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    def _exists(self, path: Path) -> bool:
        return path.exists()

    def _move(self, src: Path, dst: Path) -> None:
        src.rename(dst)


class MemoryTicketStore(TicketStore):
    """Documents held in a dict, keyed by path."""

    def __init__(self, tickets_dir: str | Path = "tickets", files: dict | None = None) -> None:
        super().__init__(tickets_dir)
        self.files: dict[Path, str] = {Path(p): text for p, text in (files or {}).items()}

    def _list(self) -> list[Path]:
        paths = [p for p in self.files if p.parent == self.tickets_dir and is_document_name(p.name)]
        return sorted(paths, key=lambda p: p.name)

    def _read(self, path: Path) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def _write(self, path: Path, text: str) -> None:
        self.files[path] = text

    def _exists(self, path: Path) -> bool:
        return path in self.files

    def _move(self, src: Path, dst: Path) -> None:
        self.files[dst] = self.files.pop(src)
