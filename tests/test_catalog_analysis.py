import pandas as pd
import pytest

from library_catalog import BookRecord, STATUS_AVAILABLE, STATUS_CHECKED_OUT
from catalog_analysis import (
    EmptyInputError,
    analyze,
    analyze_collection,
    average_publication_year,
    book_title_generator,
    books_to_frame,
    compute_decade_distribution,
    compute_genre_distribution,
    count_unique_authors,
    create_visualisations,
    filter_books_by_status,
    group_books_by_genre,
    most_recent_book,
)


def book(book_id, year, genre="Fiction", author="Anon", title=None):
    return BookRecord(id=book_id, title=title or f"Book {book_id}", author=author, genre=genre, year=year)


def test_filter_by_status(books):
    assert [b.id for b in filter_books_by_status(books, STATUS_AVAILABLE)] == [1, 4]
    assert [b.id for b in filter_books_by_status(books, STATUS_CHECKED_OUT)] == [2]
    assert filter_books_by_status(books, "lost") == []


def test_filter_never_matches_unknown_availability(books):
    matched = filter_books_by_status(books, STATUS_AVAILABLE) + filter_books_by_status(books, STATUS_CHECKED_OUT)
    assert 3 not in [b.id for b in matched]


def test_group_by_genre_order_and_round_trip(books):
    grouped = group_books_by_genre(books)
    assert list(grouped) == ["Programming", "Software Engineering"]
    assert [b.id for b in grouped["Programming"]] == [1, 2, 4]
    flattened = [b for group in grouped.values() for b in group]
    assert sorted(b.id for b in flattened) == sorted(b.id for b in books)
    assert all(any(b is original for original in books) for b in flattened)


def test_group_by_genre_empty():
    assert group_books_by_genre([]) == {}


def test_genre_distribution(books):
    assert compute_genre_distribution(books) == {"Programming": 3, "Software Engineering": 1}


def test_decade_distribution_sorted_ascending():
    records = [book(1, 2011), book(2, 1994), book(3, 2017), book(4, 1990), book(5, 1989)]
    result = compute_decade_distribution(records)
    assert result == {1980: 1, 1990: 2, 2010: 2}
    assert list(result) == [1980, 1990, 2010]
    assert all(type(k) is int for k in result)


def test_decade_distribution_empty():
    assert compute_decade_distribution([]) == {}


def test_count_unique_authors(books):
    assert count_unique_authors(books) == 3
    assert count_unique_authors([]) == 0


def test_average_publication_year():
    assert average_publication_year([book(1, 2000), book(2, 2010)]) == 2005


def test_average_publication_year_empty():
    with pytest.raises(EmptyInputError):
        average_publication_year([])


def test_empty_input_error_is_value_error():
    with pytest.raises(ValueError):
        most_recent_book([])


def test_most_recent_book(books):
    assert most_recent_book(books).id == 4


def test_most_recent_book_tie_takes_first():
    records = [book(1, 1999), book(2, 2020), book(3, 2020)]
    assert most_recent_book(records) is records[1]


def test_title_generator_is_lazy_and_restartable(books):
    titles = book_title_generator(books)
    expected = ["The Clean Coder", "You Don't Know JS", "Design Patterns", "Clean Architecture"]
    assert list(titles) == expected
    assert list(titles) == expected
    assert len(titles) == 4
    iterator = iter(titles)
    assert next(iterator) == "The Clean Coder"


def test_title_generator_empty():
    assert list(book_title_generator([])) == []


def test_books_to_frame(books):
    df = books_to_frame(books)
    assert list(df["id"]) == [1, 2, 3, 4]
    assert df.loc[0, "location"] == "A1-23"
    assert df.loc[1, "due_date"] == "2024-12-01"
    assert pd.isna(df.loc[2, "status"])


def test_analyze_collection(books):
    report = analyze_collection(books, current_year=2024)
    assert report["total"] == 4
    assert report["unique_authors"] == 3
    assert report["average_year"] == pytest.approx(2009.0)
    assert report["average_age"] == pytest.approx(15.0)
    assert report["decade_distribution"] == {1990: 1, 2010: 3}
    assert report["most_recent"].title == "Clean Architecture"


def test_analyze_collection_empty():
    with pytest.raises(EmptyInputError):
        analyze_collection([])


def test_analysis_does_not_mutate(books):
    before = [b.to_dict() for b in books]
    analyze_collection(books)
    group_books_by_genre(books)
    filter_books_by_status(books, STATUS_AVAILABLE)
    assert [b.to_dict() for b in books] == before


def test_create_visualisations(books, tmp_path):
    plots = create_visualisations(books, tmp_path / "charts")
    assert [p.name for p in plots] == ["genre_distribution.png", "decade_distribution.png"]
    assert all(p.exists() and p.stat().st_size > 0 for p in plots)


def test_create_visualisations_empty(tmp_path):
    assert create_visualisations([], tmp_path) == []


def test_analyze_prints_summary(books, tmp_path, capsys):
    report = analyze(books, out=str(tmp_path))
    out = capsys.readouterr().out
    assert "Total books: 4" in out
    assert 'Most recent book: "Clean Architecture" (2017)' in out
    assert len(report["plots"]) == 2
