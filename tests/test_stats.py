from types import SimpleNamespace

from library_catalog.stats import compute_author_stats


def book(title, year=None, pages=None, genre=None):
    return SimpleNamespace(title=title, published_year=year, pages=pages, genre=genre)


def test_no_books_returns_empty_stats():
    assert compute_author_stats([]) == {
        "total_books": 0,
        "first_book": None,
        "latest_book": None,
        "average_pages": 0,
        "genres": [],
        "longest_book": None,
        "shortest_book": None,
    }


def test_extrema_and_average():
    books = [book("A", 2000, 100), book("B", 1990, 300), book("C", 1990, 50)]

    stats = compute_author_stats(books)

    assert stats["total_books"] == 3
    assert stats["first_book"] == {"title": "B", "year": 1990}
    assert stats["latest_book"] == {"title": "A", "year": 2000}
    assert stats["average_pages"] == 150
    assert stats["longest_book"] == {"title": "B", "pages": 300}
    assert stats["shortest_book"] == {"title": "C", "pages": 50}


def test_ties_keep_first_seen_in_both_directions():
    books = [
        book("Early 1", 1950, 200),
        book("Late 1", 2010, 400),
        book("Early 2", 1950, 200),
        book("Late 2", 2010, 400),
    ]

    stats = compute_author_stats(books)

    assert stats["first_book"]["title"] == "Early 1"
    assert stats["latest_book"]["title"] == "Late 1"
    assert stats["longest_book"]["title"] == "Late 1"
    assert stats["shortest_book"]["title"] == "Early 1"


def test_books_without_years_fall_back_to_position():
    books = [book("Second", pages=10), book("First", pages=20), book("Third")]

    stats = compute_author_stats(books)

    assert stats["first_book"] == {"title": "Second", "year": None}
    assert stats["latest_book"] == {"title": "Third", "year": None}


def test_books_without_year_are_ignored_when_some_have_one():
    books = [book("Unknown"), book("Known", 1980), book("Also unknown")]

    stats = compute_author_stats(books)

    assert stats["first_book"] == {"title": "Known", "year": 1980}
    assert stats["latest_book"] == {"title": "Known", "year": 1980}


def test_no_page_data():
    stats = compute_author_stats([book("A", 2000), book("B", 2001)])

    assert stats["average_pages"] == 0
    assert stats["longest_book"] is None
    assert stats["shortest_book"] is None


def test_average_rounds_half_up():
    # 2.5 -> 3, round() дал бы 2
    assert compute_author_stats([book("A", pages=1), book("B", pages=4)])["average_pages"] == 3
    assert compute_author_stats([book("A", pages=100), book("B", pages=103)])["average_pages"] == 102


def test_average_ignores_books_without_pages():
    books = [book("A", pages=100), book("B"), book("C", pages=201)]

    assert compute_author_stats(books)["average_pages"] == 151


def test_genres_distinct_in_first_seen_order():
    books = [
        book("A", genre="Poetry"),
        book("B"),
        book("C", genre="Drama"),
        book("D", genre="Poetry"),
        book("E", genre="Essay"),
    ]

    assert compute_author_stats(books)["genres"] == ["Poetry", "Drama", "Essay"]


def test_accepts_any_iterable():
    stats = compute_author_stats(iter([book("Only", 1999, 120, "Novel")]))

    assert stats["total_books"] == 1
    assert stats["first_book"] == stats["latest_book"] == {"title": "Only", "year": 1999}
    assert stats["longest_book"] == stats["shortest_book"] == {"title": "Only", "pages": 120}
