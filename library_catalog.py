#!/usr/bin/env python3
"""
library_catalog.py

In-memory book catalog: record model, the LibraryCatalog manager (store,
mutation API, search) and the sample dataset used by the demo.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Set, Union

# Configuration
STATUS_AVAILABLE = "available"
STATUS_CHECKED_OUT = "checked_out"
VALID_STATUSES = (STATUS_AVAILABLE, STATUS_CHECKED_OUT)
SEARCH_FIELDS = ("title", "author", "genre")
DEFAULT_CASE_SENSITIVE = False

# Logging
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger("LibraryCatalog")


@dataclass
class Availability:
    """
    Borrowing state of a record.

    `available` carries a shelf location, `checked_out` carries a due date. Any
    field may be None while a record is only partially known.
    """
    status: Optional[str] = None
    location: Optional[str] = None
    due_date: Optional[str] = None

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Availability":
        due_date = data.get("due_date")
        if due_date is None:
            due_date = data.get("dueDate")
        return Availability(status=data.get("status"), location=data.get("location"), due_date=due_date)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"status": self.status, "location": self.location, "due_date": self.due_date}


@dataclass
class BookRecord:
    """A single book in the catalog. `availability` of None means unknown."""
    id: int
    title: str
    author: str
    genre: str
    year: int
    availability: Optional[Availability] = None

    @property
    def status(self) -> Optional[str]:
        if self.availability is None:
            return None
        return self.availability.status

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "BookRecord":
        """
        Build a record from a plain mapping.

        An availability block whose status is set but not one of
        VALID_STATUSES is treated as unknown rather than rejected. A block
        without a status yet is kept as partially known.
        """
        availability = None
        raw = data.get("availability")
        if isinstance(raw, Availability):
            availability = replace(raw)
        elif isinstance(raw, Mapping):
            availability = Availability.from_dict(raw)
        if availability is not None and availability.status is not None \
                and availability.status not in VALID_STATUSES:
            logger.warning("Ignoring availability with unknown status %r for book %s",
                           availability.status, data.get("id"))
            availability = None

        return BookRecord(
            id=int(data["id"]),
            title=data["title"],
            author=data["author"],
            genre=data["genre"],
            year=int(data["year"]),
            availability=availability,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "year": self.year,
            "availability": self.availability.to_dict() if self.availability is not None else None,
        }


@dataclass
class Statistics:
    """Counts derived from the catalog contents."""
    total: int = 0
    available: int = 0
    checked_out: int = 0

    @property
    def availability_rate(self) -> Optional[float]:
        """Percentage of available books, None for an empty catalog."""
        if self.total == 0:
            return None
        return self.available / self.total * 100

    def to_dict(self) -> Dict[str, int]:
        return {"total": self.total, "available": self.available, "checked_out": self.checked_out}


_RECORD_FIELDS = tuple(f.name for f in fields(BookRecord))
_AVAILABILITY_FIELDS = tuple(f.name for f in fields(Availability))


class LibraryCatalog:
    """
    LibraryCatalog owns an ordered list of book records and keeps cached
    statistics in step with it.

    Records are only ever appended or patched in place; every mutating method
    ends by recomputing the statistics, so `get_statistics()` never reflects a
    stale state. Not thread-safe.
    """

    def __init__(self, initial_books: Optional[Iterable[BookRecord]] = None):
        """
        Initialize the catalog.

        Args:
            initial_books: records to seed the catalog with. The sequence is
                copied; the record objects themselves are shared.
        """
        self._books: List[BookRecord] = list(initial_books or [])
        self._statistics = Statistics()
        self._update_statistics()
        logger.debug("Catalog initialised with %d books", len(self._books))

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[BookRecord]:
        return iter(list(self._books))

    @property
    def books(self) -> List[BookRecord]:
        """Records in catalog order (a new list on every access)."""
        return list(self._books)

    # -------------- Internal helpers ----------------
    def _update_statistics(self) -> None:
        """Recompute the cached statistics from the current record list."""
        available = sum(1 for book in self._books if book.status == STATUS_AVAILABLE)
        checked_out = sum(1 for book in self._books if book.status == STATUS_CHECKED_OUT)
        self._statistics = Statistics(total=len(self._books), available=available, checked_out=checked_out)

    # ---------------- Mutation ----------------
    def add_books(self, *new_books: BookRecord) -> int:
        """
        Append records to the end of the catalog, in argument order.

        Ids are not checked for uniqueness; a duplicate is accepted as-is.

        Returns the number of records added.
        """
        known_ids = {book.id for book in self._books}
        for book in new_books:
            if book.id in known_ids:
                logger.debug("Adding book with duplicate id: %s", book.id)
            known_ids.add(book.id)
        self._books.extend(new_books)
        self._update_statistics()
        if new_books:
            logger.info("Added %d book(s)", len(new_books))
        return len(new_books)

    def update_book(self, book: BookRecord, updates: Mapping[str, Any]) -> BookRecord:
        """
        Merge `updates` into `book`, filling only fields that are currently unset.

        Fields already holding a value are left untouched, and None values in
        `updates` are skipped. An `availability` entry is merged one level deep
        with the same rule, creating an empty Availability first if the record
        has none.

        Args:
            book: record to patch (modified in place).
            updates: partial record as a mapping of field name to value.

        Returns the same record object.
        """
        for key, value in updates.items():
            if value is None or key == "availability":
                continue
            if key not in _RECORD_FIELDS:
                logger.warning("Ignoring unknown field %r in update for book %s", key, book.id)
                continue
            if getattr(book, key) is None:
                setattr(book, key, value)
            else:
                logger.debug("Keeping existing %s for book %s", key, book.id)

        availability_updates = updates.get("availability")
        if isinstance(availability_updates, Availability):
            availability_updates = availability_updates.to_dict()
        if availability_updates is not None and not isinstance(availability_updates, Mapping):
            logger.warning("Ignoring availability update %r for book %s", availability_updates, book.id)
            availability_updates = None
        if availability_updates is not None:
            if book.availability is None:
                book.availability = Availability()
            for key, value in availability_updates.items():
                if key == "dueDate":
                    key = "due_date"
                if key not in _AVAILABILITY_FIELDS:
                    logger.warning("Ignoring unknown availability field %r for book %s", key, book.id)
                    continue
                if value is not None and getattr(book.availability, key) is None:
                    setattr(book.availability, key, value)

        self._update_statistics()
        logger.info("Updated book %s", book.id)
        return book

    # ---------------- Queries ----------------
    def get_statistics(self) -> Statistics:
        """Return a copy of the cached statistics."""
        return replace(self._statistics)

    def get_book(self, book_id: int) -> Optional[BookRecord]:
        """
        Retrieve a single record by id.

        Returns the first record with that id, or None if not found.
        """
        for book in self._books:
            if book.id == book_id:
                return book
        return None

    def search_books(self, criteria: Optional[Mapping[str, str]] = None,
                     case_sensitive: bool = DEFAULT_CASE_SENSITIVE) -> List[BookRecord]:
        """
        Search records by substring on title, author and genre.

        Every non-empty criterion must match (logical AND); absent or empty
        criteria match everything. A record whose field is empty never
        matches a non-empty criterion on that field. Comparison is case-insensitive unless
        `case_sensitive` is set.

        Returns matching records in catalog order.
        """
        criteria = dict(criteria or {})
        for key in list(criteria):
            if key not in SEARCH_FIELDS:
                logger.warning("Ignoring unknown search criterion %r", key)
                del criteria[key]
        wanted = {key: value for key, value in criteria.items() if value}

        def matches(field_value: Optional[str], query: str) -> bool:
            if not field_value:
                return False
            if case_sensitive:
                return query in field_value
            return query.casefold() in field_value.casefold()

        return [
            book for book in self._books
            if all(matches(getattr(book, key), query) for key, query in wanted.items())
        ]


# ---------------- Sample data ----------------
CATEGORY_DESCRIPTIONS: Dict[str, str] = {
    "Programming": "Books about programming languages and techniques",
    "Software Engineering": "Books about software design and architecture",
}

_SAMPLE_BOOKS = [
    {"id": 1, "title": "The Clean Coder", "author": "Robert C. Martin", "year": 2011,
     "genre": "Programming", "availability": {"status": STATUS_AVAILABLE, "location": "A1-23"}},
    {"id": 2, "title": "You Don't Know JS", "author": "Kyle Simpson", "year": 2014,
     "genre": "Programming", "availability": {"status": STATUS_CHECKED_OUT, "due_date": "2024-12-01"}},
    # availability deliberately unknown
    {"id": 3, "title": "Design Patterns", "author": "Gang of Four", "year": 1994,
     "genre": "Software Engineering"},
    {"id": 4, "title": "Clean Architecture", "author": "Robert C. Martin", "year": 2017,
     "genre": "Programming", "availability": {"status": STATUS_AVAILABLE, "location": "A2-15"}},
]


def sample_books() -> List[BookRecord]:
    """Fresh copies of the four demo records."""
    return [BookRecord.from_dict(data) for data in _SAMPLE_BOOKS]


def unique_authors(books: Iterable[BookRecord]) -> Set[str]:
    return {book.author for book in books}


def create_book_summary(book: Union[BookRecord, Mapping[str, Any]]) -> str:
    """
    One-line summary, e.g. "The Clean Coder by Robert C. Martin (2011) - Available at A1-23".
    """
    if not isinstance(book, BookRecord):
        book = BookRecord.from_dict(book)
    availability = book.availability

    availability_text = "Availability unknown"
    if availability is not None and availability.status == STATUS_AVAILABLE:
        availability_text = f"Available at {availability.location}" if availability.location else "Available"
    elif availability is not None and availability.status == STATUS_CHECKED_OUT:
        availability_text = (f"Checked out, due on {availability.due_date}"
                             if availability.due_date else "Checked out")

    return f"{book.title} by {book.author} ({book.year}) - {availability_text}"
