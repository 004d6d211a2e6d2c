from typing import List, Optional
import library_catalog.models as models
import library_catalog.schemas as schemas


def author_to_pydantic(db_author: models.Author, books_count: Optional[int] = None) -> schemas.AuthorOut:
    """
    Преобразует SQLAlchemy Author в Pydantic AuthorOut

    Если books_count не передан, считаем по загруженной связи books
    """
    if books_count is None:
        books_count = len(db_author.books)

    author_data = {
        "id": db_author.id,
        "name": db_author.name,
        "email": db_author.email,
        "bio": db_author.bio,
        "nationality": db_author.nationality,
        "birth_year": db_author.birth_year,
        "created_at": db_author.created_at,
        "updated_at": db_author.updated_at,
        "books_count": books_count
    }

    return schemas.AuthorOut(**author_data)

def author_to_detail(db_author: models.Author, books: List[models.Book]) -> schemas.AuthorDetail:
    """
    Автор с вложенными книгами в переданном порядке
    """
    author = author_to_pydantic(db_author, books_count=len(books))
    return schemas.AuthorDetail(
        **author.model_dump(),
        books=[schemas.BookOut.model_validate(book) for book in books]
    )

def book_to_pydantic(db_book: models.Book) -> schemas.BookWithAuthor:
    """
    Преобразует SQLAlchemy Book в Pydantic BookWithAuthor

    Автор включается только в сокращенном виде (id, name, email, nationality)
    """
    book = schemas.BookOut.model_validate(db_book)
    author = None
    if db_book.author is not None:
        author = schemas.AuthorBrief.model_validate(db_book.author)

    return schemas.BookWithAuthor(**book.model_dump(), author=author)
