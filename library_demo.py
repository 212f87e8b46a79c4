#!/usr/bin/env python3
"""
library_demo.py

Console demo for the library catalog: printing helpers, small higher-order
utilities and the scripted demo run.
"""

from __future__ import annotations
import argparse
import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from library_catalog import (
    Availability,
    BookRecord,
    LibraryCatalog,
    Statistics,
    STATUS_AVAILABLE,
    STATUS_CHECKED_OUT,
    create_book_summary,
    sample_books,
)
from catalog_analysis import (
    EmptyInputError,
    analyze_collection,
    book_title_generator,
    create_visualisations,
    filter_books_by_status,
    group_books_by_genre,
)

logger = logging.getLogger("LibraryCatalog.demo")

BANNER_WIDTH = 60


# ---------------- Display ----------------
def display_statistics(statistics: Statistics) -> None:
    rate = statistics.availability_rate
    rate_text = f"{rate:.1f}%" if rate is not None else "N/A"
    print("Library Statistics:")
    print(f"   Total Books: {statistics.total}")
    print(f"   Available: {statistics.available}")
    print(f"   Checked Out: {statistics.checked_out}")
    print(f"   Availability Rate: {rate_text}")


def display_books(books: Sequence[Union[BookRecord, str]], title: str = "Books") -> None:
    """
    Print a numbered list of records.

    Plain strings (e.g. output of a book formatter) are printed as they are.
    """
    print(f"\n {title} ({len(books)}):")
    if not books:
        print("   No books found")
        return

    for index, book in enumerate(books, start=1):
        if isinstance(book, str):
            print(f"   {index}. {book}")
            continue
        availability = book.availability
        status = availability.status if availability is not None and availability.status else "unknown"
        print(f"   {index}. {book.title}")
        print(f"      Author: {book.author}")
        print(f"      Year: {book.year}")
        print(f"      Genre: {book.genre}")
        print(f"      Status: {status}")
        if status == STATUS_AVAILABLE:
            print(f"      Location: {availability.location or 'N/A'}")
        else:
            due_date = availability.due_date if availability is not None else None
            print(f"      Due: {due_date or 'N/A'}")


def display_search_results(results: Sequence[BookRecord], criteria: Optional[Mapping[str, str]] = None) -> None:
    criteria = criteria or {}
    parts = [f'{label}: "{criteria[key]}"'
             for key, label in (("title", "Title"), ("author", "Author"), ("genre", "Genre"))
             if criteria.get(key)]
    criteria_text = ", ".join(parts) if parts else "All books"

    print(f"\n Search Results for {criteria_text}:")
    display_books(results, f"Search Results ({len(results)} found)")


def format_availability(availability: Optional[Availability]) -> str:
    """Short availability text, e.g. "Available at A1-23" or "Checked Out, due 2024-12-01"."""
    status = availability.status if availability is not None else None
    if status == STATUS_AVAILABLE:
        return f"Available at {availability.location}" if availability.location else "Available"
    if status == STATUS_CHECKED_OUT:
        return f"Checked Out, due {availability.due_date}" if availability.due_date else "Checked Out"
    return "Availability unknown"


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def show_book_analysis(books: Union[Sequence[BookRecord], Mapping[str, Sequence[BookRecord]]],
                       current_year: Optional[int] = None) -> None:
    """
    Print genre and decade distributions and a collection overview.

    Accepts either a list of records or a genre grouping as produced by
    `group_books_by_genre`.
    """
    print("\n === BOOK ANALYSIS ===")
    if isinstance(books, Mapping):
        records = [book for group in books.values() for book in group]
    else:
        records = list(books)

    try:
        report = analyze_collection(records, current_year=current_year)
    except EmptyInputError:
        print("No data to analyze")
        return

    print("\n Genre Distribution:")
    for genre, count in report["genre_distribution"].items():
        print(f"   {genre}: {count} book{_plural(count)}")

    print("\n Publication Decades:")
    for decade, count in report["decade_distribution"].items():
        print(f"   {decade}s: {count} book{_plural(count)}")

    print(f"\n Unique Authors: {report['unique_authors']}")

    print("\n Collection Overview:")
    print(f"   Average Publication Year: {round(report['average_year'])}")
    print(f"   Average Book Age: {round(report['average_age'])} years")
    print(f"   Total Books Analyzed: {report['total']}")

    most_recent = report["most_recent"]
    print(f'\n Most Recent Book: "{most_recent.title}" ({most_recent.year})')


# ---------------- Higher-order helpers ----------------
def create_book_formatter(formatter: Callable[[BookRecord], Any]) -> Callable[[Iterable[BookRecord]], List[Any]]:
    """Return a function that applies `formatter` to every record of a list."""
    def format_books(books: Iterable[BookRecord]) -> List[Any]:
        return [formatter(book) for book in books]
    return format_books


def memoize(fn: Callable) -> Callable:
    """
    Cache results of `fn` keyed by the JSON form of its arguments.

    The cache never expires, so only wrap functions whose result does not
    change between calls with equal arguments.
    """
    cache: Dict[str, Any] = {}

    def wrapper(*args, **kwargs):
        key = json.dumps([args, kwargs], sort_keys=True, default=str)
        if key not in cache:
            cache[key] = fn(*args, **kwargs)
        else:
            logger.debug("memoize cache hit for %s", getattr(fn, "__name__", fn))
        return cache[key]

    wrapper.cache = cache
    return wrapper


# ---------------- Demo ----------------
def show_generator_example(books: Sequence[BookRecord]) -> None:
    print("\n === GENERATOR DEMO ===")
    print("Book titles from generator:")
    for title in book_title_generator(books):
        print("  ", title)


def demonstrate_error_handling(catalog: LibraryCatalog) -> None:
    """Show how missing data falls back to defaults instead of failing."""
    print("\n  === ERROR HANDLING DEMO ===")
    books = catalog.books
    third = books[2] if len(books) > 2 else None
    status = third.status if third is not None and third.status else "Unknown status"
    print("Third book availability status:", status)

    try:
        analyze_collection([])
    except EmptyInputError as exc:
        print("Caught error:", exc)

    settings = {"theme": None}
    theme = settings["theme"] if settings["theme"] is not None else "default-theme"
    print("Theme with fallback:", theme)


def demonstrate_destructuring(books: Sequence[BookRecord]) -> None:
    print("\n === UNPACKING DEMO ===")
    if len(books) < 2:
        print("Not enough books to unpack")
        return
    first_book, second_book, *remaining_books = books
    print("First Book:", first_book.title)
    print("Second Book:", second_book.title)
    print("Remaining Books Count:", len(remaining_books))
    if remaining_books:
        print("Third Book from remaining:", remaining_books[0].title)


def run_library_demo(catalog: Optional[LibraryCatalog] = None, plots_dir: Optional[str] = None) -> bool:
    """
    Run the scripted demo against `catalog` (the sample catalog by default).

    Any error is logged rather than raised; the closing banner is always printed.

    Returns True if every section completed.
    """
    print(" Starting Library Management System Demo")
    print("=" * BANNER_WIDTH)
    ok = False
    try:
        library = catalog if catalog is not None else LibraryCatalog(sample_books())
        books = library.books

        demonstrate_destructuring(books)

        print("\n Library Statistics:")
        display_statistics(library.get_statistics())

        print("\n Filtered Books (Available):")
        display_books(filter_books_by_status(books, STATUS_AVAILABLE))

        print("\n Books Grouped by Genre:")
        show_book_analysis(group_books_by_genre(books))

        print("\n Search Results (Programming books):")
        criteria = {"genre": "Programming"}
        display_search_results(library.search_books(criteria), criteria)

        print("\n Generator Example (Book Titles):")
        show_generator_example(books)

        print("\n Error Handling Demo:")
        demonstrate_error_handling(library)

        print("\n Book Formatting Example:")
        formatter = create_book_formatter(create_book_summary)
        display_books(formatter(books))

        print("\n Memoization Demo:")
        memoized_search = memoize(library.search_books)
        first_search = memoized_search({"genre": "Programming"})
        memoized_search({"genre": "Programming"})
        print("Memoized search results count:", len(first_search))

        if plots_dir:
            plots = create_visualisations(books, plots_dir)
            print(f"\n Saved {len(plots)} chart(s) to {plots_dir}")
        ok = True
    except Exception:
        logger.exception("Demo run failed")
    finally:
        print("\n Demo completed!")
        print("=" * BANNER_WIDTH)
    return ok


# ---------------- CLI ----------------
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Library catalog console demo")
    parser.add_argument("--plots", default=None, help="Also save distribution charts to this folder")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    raise SystemExit(0 if run_library_demo(plots_dir=args.plots) else 1)
