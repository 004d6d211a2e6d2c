"""
Статистика по книгам автора

compute_author_stats - чистая функция над уже загруженным списком книг.
Книга - любой объект с атрибутами title, published_year, pages, genre.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, List, Optional, Sequence


def _pick_extreme(items: Sequence, key: Callable, better: Callable) -> Optional[Any]:
    """
    Линейный проход слева направо

    Текущий экстремум заменяется только при строгом неравенстве,
    поэтому среди равных остается первый встреченный.
    """
    best = None
    for item in items:
        if best is None or better(key(item), key(best)):
            best = item
    return best


def _round_half_up(total: int, count: int) -> int:
    return int((Decimal(total) / Decimal(count)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _with_year(book) -> Dict[str, Any]:
    return {"title": book.title, "year": book.published_year}


def _with_pages(book) -> Dict[str, Any]:
    return {"title": book.title, "pages": book.pages}


def empty_stats() -> Dict[str, Any]:
    return {
        "total_books": 0,
        "first_book": None,
        "latest_book": None,
        "average_pages": 0,
        "genres": [],
        "longest_book": None,
        "shortest_book": None,
    }


def compute_author_stats(books: Sequence) -> Dict[str, Any]:
    """
    Считает агрегаты по книгам одного автора

    - first_book / latest_book: минимальный / максимальный год издания среди
      книг с годом; если ни у одной книги нет года, берутся первый и
      последний элементы входного списка
    - average_pages: среднее по книгам с pages, округление half-up, 0 без данных
    - genres: уникальные жанры в порядке первого появления
    - longest_book / shortest_book: по pages, None без данных
    """
    books = list(books)
    if not books:
        return empty_stats()

    with_year = [b for b in books if b.published_year is not None]
    with_pages = [b for b in books if b.pages is not None]

    def year(b):
        return b.published_year

    def pages(b):
        return b.pages

    def less(a, b):
        return a < b

    def greater(a, b):
        return a > b

    if with_year:
        first = _pick_extreme(with_year, year, less)
        latest = _pick_extreme(with_year, year, greater)
    else:
        first, latest = books[0], books[-1]

    genres: List[str] = []
    for book in books:
        if book.genre is not None and book.genre not in genres:
            genres.append(book.genre)

    if with_pages:
        average = _round_half_up(sum(b.pages for b in with_pages), len(with_pages))
        longest = _with_pages(_pick_extreme(with_pages, pages, greater))
        shortest = _with_pages(_pick_extreme(with_pages, pages, less))
    else:
        average, longest, shortest = 0, None, None

    return {
        "total_books": len(books),
        "first_book": _with_year(first),
        "latest_book": _with_year(latest),
        "average_pages": average,
        "genres": genres,
        "longest_book": longest,
        "shortest_book": shortest,
    }
