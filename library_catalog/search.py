"""
Поиск книг с фильтрацией, сортировкой и пагинацией

Параметры приходят строками из query string, проверяются по порядку
(первая ошибка возвращается клиенту), затем выполняются два независимых
чтения: COUNT по фильтру и выборка страницы.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

import library_catalog.models as models
import library_catalog.schemas as schemas
from library_catalog.config import settings
from library_catalog.errors import ValidationError, InternalError

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "title": models.Book.title,
    "publishedYear": models.Book.published_year,
    "createdAt": models.Book.created_at,
}
SORT_ORDERS = ("asc", "desc")

# OFFSET передается в БД как 64-битное целое
MAX_OFFSET = 2**63 - 1

DEFAULT_SORT_BY = "createdAt"
DEFAULT_ORDER = "desc"


@dataclass
class SearchParams:
    search: Optional[str] = None
    genre: Optional[str] = None
    author_name: Optional[str] = None
    page: int = 1
    limit: int = 10
    sort_by: str = DEFAULT_SORT_BY
    order: str = DEFAULT_ORDER

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _parse_number(raw: Optional[str], default: int, name: str) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return schemas.parse_int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def _filter_value(raw: Optional[str]) -> Optional[str]:
    # Пустой фильтр не применяется
    return raw if raw else None


def parse_search_params(
    search: Optional[str] = None,
    genre: Optional[str] = None,
    author_name: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort_by: Optional[str] = None,
    order: Optional[str] = None,
) -> SearchParams:
    """
    Проверяет и нормализует параметры поиска

    limit сверх SEARCH_MAX_LIMIT молча урезается, а page < 1 и limit < 1
    отклоняются. page, при котором смещение не помещается в 64 бита,
    тоже отклоняется.
    """
    page_number = _parse_number(page, 1, "page")
    page_size = _parse_number(limit, settings.SEARCH_DEFAULT_LIMIT, "limit")
    page_size = min(page_size, settings.SEARCH_MAX_LIMIT)

    if page_number < 1:
        raise ValidationError("page must be greater than 0")
    if page_size < 1:
        raise ValidationError("limit must be greater than 0")
    if (page_number - 1) * page_size > MAX_OFFSET:
        raise ValidationError("page is out of range")

    sort_by = sort_by or DEFAULT_SORT_BY
    if sort_by not in SORT_FIELDS:
        raise ValidationError(f"sortBy must be one of: {', '.join(SORT_FIELDS)}")

    order = order or DEFAULT_ORDER
    if order not in SORT_ORDERS:
        raise ValidationError("order must be asc or desc")

    return SearchParams(
        search=_filter_value(search),
        genre=_filter_value(genre),
        author_name=_filter_value(author_name),
        page=page_number,
        limit=page_size,
        sort_by=sort_by,
        order=order,
    )


def escape_like(term: str, escape: str = "\\") -> str:
    """Экранирует % и _ чтобы подстрока искалась буквально"""
    return (
        term.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


def build_filters(params: SearchParams) -> list:
    """Условия WHERE, объединяемые через AND"""
    filters = []
    if params.search:
        filters.append(models.Book.title.ilike(f"%{escape_like(params.search)}%", escape="\\"))
    if params.genre:
        filters.append(models.Book.genre == params.genre)
    if params.author_name:
        filters.append(
            models.Book.author.has(
                models.Author.name.ilike(f"%{escape_like(params.author_name)}%", escape="\\")
            )
        )
    return filters


def build_pagination(page: int, limit: int, total: int) -> schemas.Pagination:
    total_pages = math.ceil(total / limit)
    return schemas.Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def search_books(db: Session, params: SearchParams) -> Tuple[List[models.Book], schemas.Pagination]:
    filters = build_filters(params)
    column = SORT_FIELDS[params.sort_by]
    ordering = column.asc() if params.order == "asc" else column.desc()

    try:
        total = db.query(models.Book).filter(*filters).count()
        books = (
            db.query(models.Book)
            .options(joinedload(models.Book.author))
            .filter(*filters)
            .order_by(ordering)
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Book search failed")
        raise InternalError()

    logger.debug(f"Book search {params} matched {total} rows")
    return books, build_pagination(params.page, params.limit, total)
