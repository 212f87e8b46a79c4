#!/usr/bin/env python3
"""
catalog_analysis.py

Read-only analysis of a sequence of book records.

This module provides functions to:
- Filter and group records (by availability status, by genre)
- Compute distributions and summary statistics (genres, decades, authors, years)
- Produce a compact collection report and save bar charts to disk

None of the functions modify the records they are given. Aggregations that
have no meaningful value for an empty sequence raise EmptyInputError.

Typical usage:
    python catalog_analysis.py --out catalog_outputs
"""
from __future__ import annotations
import argparse
import datetime
import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns

from library_catalog import BookRecord, sample_books

plt.rcParams.update({"figure.max_open_warning": 0})

DEFAULT_OUTPUT_DIR = "catalog_outputs"
FRAME_COLUMNS = ["id", "title", "author", "genre", "year", "status", "location", "due_date"]

logger = logging.getLogger(__name__)


class EmptyInputError(ValueError):
    """Raised when an aggregate is requested over an empty sequence of records."""


# -------------------- Helpers -------------------- #
def books_to_frame(books: Iterable[BookRecord]) -> pd.DataFrame:
    """
    Build a DataFrame view of the records, one row per record in input order.

    Availability is flattened into `status`, `location` and `due_date` columns,
    left empty (None) for records with unknown availability.

    Args:
        books: records to tabulate.

    Returns:
        DataFrame with FRAME_COLUMNS and a RangeIndex matching record positions.
    """
    rows = []
    for book in books:
        availability = book.availability
        rows.append({
            "id": book.id,
            "title": book.title,
            "author": book.author,
            "genre": book.genre,
            "year": book.year,
            "status": availability.status if availability is not None else None,
            "location": availability.location if availability is not None else None,
            "due_date": availability.due_date if availability is not None else None,
        })
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def _require_records(books: Iterable[BookRecord], what: str) -> List[BookRecord]:
    records = list(books)
    if not records:
        raise EmptyInputError(f"Cannot compute {what} of an empty book list")
    return records


# -------------------- Filtering / grouping -------------------- #
def filter_books_by_status(books: Iterable[BookRecord], status: str) -> List[BookRecord]:
    """
    Return the records whose availability status equals `status`.

    Records with unknown availability never match.
    """
    return [book for book in books if book.availability is not None and book.availability.status == status]


def group_books_by_genre(books: Iterable[BookRecord]) -> Dict[str, List[BookRecord]]:
    """
    Group records by genre.

    Genres appear in first-seen order and records keep their relative order
    within a genre, so concatenating the groups yields every input record.
    """
    grouped: Dict[str, List[BookRecord]] = {}
    for book in books:
        grouped.setdefault(book.genre, []).append(book)
    return grouped


# -------------------- Distributions -------------------- #
def compute_genre_distribution(books: Iterable[BookRecord]) -> Dict[str, int]:
    """Map genre to number of records, in first-seen genre order."""
    return dict(Counter(book.genre for book in books))


def compute_decade_distribution(books: Iterable[BookRecord]) -> Dict[int, int]:
    """
    Map publication decade (e.g. 1990 for 1994) to number of records.

    Returns:
        Dict ordered by ascending decade; empty for an empty input.
    """
    df = books_to_frame(books)
    if df.empty:
        return {}
    decades = (np.floor_divide(df["year"].astype(int), 10) * 10)
    counts = decades.value_counts().sort_index()
    return {int(decade): int(count) for decade, count in counts.items()}


def count_unique_authors(books: Iterable[BookRecord]) -> int:
    df = books_to_frame(books)
    return int(df["author"].nunique(dropna=True))


def average_publication_year(books: Iterable[BookRecord]) -> float:
    """
    Arithmetic mean of the publication years.

    Raises:
        EmptyInputError: if `books` is empty.
    """
    records = _require_records(books, "the average publication year")
    return float(np.mean([book.year for book in records]))


def most_recent_book(books: Iterable[BookRecord]) -> BookRecord:
    """
    Record with the latest publication year; the first one wins a tie.

    Raises:
        EmptyInputError: if `books` is empty.
    """
    records = _require_records(books, "the most recent book")
    df = books_to_frame(records)
    # idxmax returns the first occurrence of the maximum
    return records[int(df["year"].idxmax())]


# -------------------- Titles -------------------- #
class BookTitles:
    """
    Restartable sequence of titles over a fixed list of records.

    Titles are read lazily; each call to iter() starts again from the first
    record.
    """

    def __init__(self, books: Iterable[BookRecord]):
        self._books = tuple(books)

    def __iter__(self) -> Iterator[str]:
        for book in self._books:
            yield book.title

    def __len__(self) -> int:
        return len(self._books)

    def __repr__(self) -> str:
        return f"BookTitles({len(self._books)} titles)"


def book_title_generator(books: Iterable[BookRecord]) -> BookTitles:
    return BookTitles(books)


# -------------------- Report -------------------- #
def analyze_collection(books: Iterable[BookRecord], current_year: Optional[int] = None) -> dict:
    """
    Compute the collection overview shown by the demo's analysis section.

    Args:
        books: records to analyse.
        current_year: year used for the average book age; defaults to the
            current calendar year.

    Returns:
        Dictionary with keys:
          - genre_distribution: Dict[str, int]
          - decade_distribution: Dict[int, int] (ascending decades)
          - unique_authors: int
          - average_year: float
          - average_age: float (current_year - average_year)
          - total: int
          - most_recent: BookRecord

    Raises:
        EmptyInputError: if `books` is empty.
    """
    records = _require_records(books, "a collection report")
    if current_year is None:
        current_year = datetime.date.today().year

    average_year = average_publication_year(records)
    return {
        "genre_distribution": compute_genre_distribution(records),
        "decade_distribution": compute_decade_distribution(records),
        "unique_authors": count_unique_authors(records),
        "average_year": average_year,
        "average_age": current_year - average_year,
        "total": len(records),
        "most_recent": most_recent_book(records),
    }


# -------------------- Visualisations -------------------- #
def save_plot(fig, path: Path) -> None:
    """Save `fig` to `path` and close it."""
    fig.tight_layout()
    fig.savefig(path, dpi=120)
    plt.close(fig)


def annotate_bar_values(ax, fmt="{:.0f}", fontsize=8, va="bottom"):
    """Write each bar's height above it."""
    for patch in ax.patches:
        height = patch.get_height()
        if height is None or np.isnan(height):
            continue
        ax.annotate(fmt.format(height),
                    (patch.get_x() + patch.get_width() / 2, height),
                    ha="center", va=va, fontsize=fontsize)


def _bar_chart(counts: Mapping[Union[str, int], int], xlabel: str, title: str, path: Path) -> Path:
    df = pd.DataFrame({"label": [str(k) for k in counts.keys()], "count": list(counts.values())})
    fig, ax = plt.subplots(figsize=(8, 4))
    sns.barplot(data=df, x="label", y="count", ax=ax, color="steelblue")
    ax.set_xlabel(xlabel)
    ax.set_ylabel("Books")
    ax.set_title(title)
    annotate_bar_values(ax)
    save_plot(fig, path)
    return path


def create_visualisations(books: Iterable[BookRecord], out_dir: Union[str, Path]) -> List[Path]:
    """
    Save bar charts of the genre and decade distributions as PNG files.

    Args:
        books: records to chart.
        out_dir: output folder, created if missing.

    Returns:
        List of written file paths; empty when there are no records.
    """
    records = list(books)
    if not records:
        logger.warning("No books to chart")
        return []
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    plots = [
        _bar_chart(compute_genre_distribution(records), "Genre", "Books per genre",
                   out_dir / "genre_distribution.png"),
        _bar_chart({f"{d}s": c for d, c in compute_decade_distribution(records).items()}, "Decade",
                   "Books per publication decade", out_dir / "decade_distribution.png"),
    ]
    logger.info("Saved %d plot(s) to %s", len(plots), out_dir)
    return plots


def analyze(books: Optional[Sequence[BookRecord]] = None, out: str = DEFAULT_OUTPUT_DIR) -> dict:
    """
    Run the collection report and chart export, printing a concise summary.

    Args:
        books: records to analyse; defaults to the sample dataset.
        out: output directory for the charts.

    Returns:
        The `analyze_collection` result plus a `plots` key with the chart paths.
    """
    if books is None:
        books = sample_books()

    report = analyze_collection(books)
    report["plots"] = create_visualisations(books, out)

    print("\n=== Collection Summary ===")
    print(f"Total books: {report['total']}")
    print(f"Unique authors: {report['unique_authors']}")
    print(f"Average publication year: {round(report['average_year'])}")
    most_recent = report["most_recent"]
    print(f'Most recent book: "{most_recent.title}" ({most_recent.year})')
    if report["plots"]:
        print("Saved plots:")
        for p in report["plots"]:
            print(" -", Path(p).resolve())
    return report


# -------------------- CLI -------------------- #
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Library catalog collection report")
    parser.add_argument("--out", default=DEFAULT_OUTPUT_DIR, help="Output folder for charts")
    args = parser.parse_args()

    analyze(out=args.out)
