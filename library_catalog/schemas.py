import re
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
INTEGER_PATTERN = re.compile(r"-?[0-9]+")

# Границы колонок Integer (32 бита)
INT32_MIN = -2**31
INT32_MAX = 2**31 - 1

MIN_TITLE_LENGTH = 3


def parse_int(value, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
    """
    Строгое преобразование в int

    Принимает int или строку, целиком состоящую из ASCII цифр (с
    необязательным минусом). "12abc", "1.5" и "1_000" отклоняются, а не
    обрезаются. При заданных границах значение вне [minimum, maximum]
    тоже отклоняется.
    """
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not an integer")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and INTEGER_PATTERN.fullmatch(value.strip()):
        number = int(value.strip())
    else:
        raise ValueError(f"{value!r} is not an integer")

    if (minimum is not None and number < minimum) or (maximum is not None and number > maximum):
        raise ValueError(f"{value!r} is out of range")
    return number


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _year(value) -> Optional[int]:
    # Пустое/ложное значение сохраняется как null
    if not value:
        return None
    return parse_int(value, INT32_MIN, INT32_MAX)


def _pages(value) -> Optional[int]:
    value = _blank_to_none(value)
    if value is None:
        return None
    pages = parse_int(value)
    if pages < 1:
        raise ValueError("pages must be greater than 0")
    if pages > INT32_MAX:
        raise ValueError(f"pages must not exceed {INT32_MAX}")
    return pages


def _required_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field} is required")
    return value


def _email(value: Optional[str]) -> str:
    value = _required_text(value, "email")
    if not EMAIL_PATTERN.fullmatch(value):
        raise ValueError("Invalid email")
    return value


def _title(value: Optional[str]) -> str:
    value = _required_text(value, "title")
    if len(value.strip()) < MIN_TITLE_LENGTH:
        raise ValueError(f"title must be at least {MIN_TITLE_LENGTH} characters long")
    return value


class CamelModel(BaseModel):
    """JSON наружу в camelCase, внутрь принимаются оба варианта ключей"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Common schemas
class TimestampMixin(CamelModel):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ====================== AUTHOR ======================

class AuthorCreate(CamelModel):
    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=255)
    bio: Optional[str] = None
    nationality: Optional[str] = Field(None, max_length=50)
    birth_year: Optional[int] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        return _required_text(v, "name")

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v):
        return _email(v)

    @field_validator("bio", "nationality", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("birth_year", mode="before")
    @classmethod
    def check_birth_year(cls, v):
        return _year(v)


class AuthorUpdate(CamelModel):
    """
    Полное обновление (PUT): переданные ключи перезаписываются,
    отсутствующие не трогаются
    """
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = None
    nationality: Optional[str] = Field(None, max_length=50)
    birth_year: Optional[int] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        return _required_text(v, "name")

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v):
        return _email(v)

    @field_validator("bio", "nationality", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("birth_year", mode="before")
    @classmethod
    def check_birth_year(cls, v):
        return _year(v)


class AuthorBrief(CamelModel):
    """Сокращенное представление автора внутри книги"""
    id: str
    name: str
    email: str
    nationality: Optional[str] = None


class AuthorOut(TimestampMixin):
    id: str
    name: str
    email: str
    bio: Optional[str] = None
    nationality: Optional[str] = None
    birth_year: Optional[int] = None
    books_count: int = 0


# ====================== BOOK ======================

class BookCreate(CamelModel):
    title: str = Field(..., max_length=200)
    description: Optional[str] = None
    isbn: Optional[str] = Field(None, max_length=20)
    published_year: Optional[int] = None
    genre: Optional[str] = Field(None, max_length=50)
    pages: Optional[int] = None
    author_id: str

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v):
        return _title(v)

    @field_validator("description", "isbn", "genre", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("published_year", mode="before")
    @classmethod
    def check_published_year(cls, v):
        return _year(v)

    @field_validator("pages", mode="before")
    @classmethod
    def check_pages(cls, v):
        return _pages(v)

    @field_validator("author_id", mode="before")
    @classmethod
    def check_author_id(cls, v):
        return _required_text(v, "authorId")


class BookUpdate(CamelModel):
    # authorId не входит: перенос книги к другому автору не поддерживается
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    isbn: Optional[str] = Field(None, max_length=20)
    published_year: Optional[int] = None
    genre: Optional[str] = Field(None, max_length=50)
    pages: Optional[int] = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v):
        return _title(v)

    @field_validator("description", "isbn", "genre", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("published_year", mode="before")
    @classmethod
    def check_published_year(cls, v):
        return _year(v)

    @field_validator("pages", mode="before")
    @classmethod
    def check_pages(cls, v):
        return _pages(v)


class BookOut(TimestampMixin):
    id: str
    title: str
    description: Optional[str] = None
    isbn: Optional[str] = None
    published_year: Optional[int] = None
    genre: Optional[str] = None
    pages: Optional[int] = None
    author_id: str


class BookWithAuthor(BookOut):
    author: Optional[AuthorBrief] = None


class AuthorDetail(AuthorOut):
    books: List[BookOut] = []


# ====================== SEARCH / STATS ======================

class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class BookSearchResponse(CamelModel):
    data: List[BookWithAuthor]
    pagination: Pagination


class BookYear(CamelModel):
    title: str
    year: Optional[int] = None


class BookPages(CamelModel):
    title: str
    pages: Optional[int] = None


class AuthorStats(CamelModel):
    author_id: str
    author_name: str
    total_books: int
    first_book: Optional[BookYear] = None
    latest_book: Optional[BookYear] = None
    average_pages: int
    genres: List[str]
    longest_book: Optional[BookPages] = None
    shortest_book: Optional[BookPages] = None


class ErrorResponse(BaseModel):
    error: str
