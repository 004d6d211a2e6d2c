from fastapi import APIRouter, Depends, status, Query, Request, Response
from sqlalchemy.orm import Session
from typing import List, Optional

import library_catalog.crud as crud
import library_catalog.schemas as schemas
from library_catalog.database import get_db
from library_catalog.rate_limiter import limiter
from library_catalog.search import parse_search_params, search_books
import library_catalog.utils as utils

router = APIRouter(prefix="/books", tags=["books"])

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse},
    404: {"model": schemas.ErrorResponse},
    422: {"model": schemas.ErrorResponse},
}

@router.get("", response_model=List[schemas.BookWithAuthor])
@limiter.limit("100/minute")
async def read_books(
    request: Request,
    response: Response,
    author_id: Optional[str] = Query(None, alias="authorId"),
    db: Session = Depends(get_db)
):
    """
    Получить все книги (или книги одного автора)
    """
    books = crud.get_books(db, author_id=author_id)
    return [utils.book_to_pydantic(book) for book in books]

@router.get("/search", response_model=schemas.BookSearchResponse, responses=ERROR_RESPONSES)
@limiter.limit("100/minute")
async def search_catalog(
    request: Request,
    response: Response,
    search: Optional[str] = Query(None, description="Подстрока названия без учета регистра"),
    genre: Optional[str] = Query(None, description="Точное совпадение жанра"),
    author_name: Optional[str] = Query(None, alias="authorName"),
    page: Optional[str] = Query(None, description="Номер страницы, начиная с 1"),
    limit: Optional[str] = Query(None, description="Размер страницы, не больше 50"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="title, publishedYear или createdAt"),
    order: Optional[str] = Query(None, description="asc или desc"),
    db: Session = Depends(get_db)
):
    """
    Поиск книг с фильтрами, сортировкой и пагинацией

    page и limit принимаются строками и проверяются вручную, чтобы
    нечисловые значения отклонялись с понятным сообщением
    """
    params = parse_search_params(
        search=search,
        genre=genre,
        author_name=author_name,
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
    )
    books, pagination = search_books(db, params)
    return schemas.BookSearchResponse(
        data=[utils.book_to_pydantic(book) for book in books],
        pagination=pagination
    )

@router.post("", response_model=schemas.BookWithAuthor, status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
@limiter.limit("30/minute")
async def create_book(
    request: Request,
    response: Response,
    book: schemas.BookCreate,
    db: Session = Depends(get_db)
):
    """
    Создать новую книгу

    Если автор с authorId не существует, возвращается 422
    """
    db_book = crud.create_book(db=db, book=book)
    return utils.book_to_pydantic(db_book)

@router.get("/{book_id}", response_model=schemas.BookWithAuthor, responses=ERROR_RESPONSES)
@limiter.limit("100/minute")
async def read_book(
    request: Request,
    response: Response,
    book_id: str,
    db: Session = Depends(get_db)
):
    """
    Получить книгу по ID
    """
    db_book = crud.get_book(db, book_id=book_id)
    return utils.book_to_pydantic(db_book)

@router.put("/{book_id}", response_model=schemas.BookWithAuthor, responses=ERROR_RESPONSES)
@limiter.limit("60/minute")
async def update_book(
    request: Request,
    response: Response,
    book_id: str,
    book_update: schemas.BookUpdate,
    db: Session = Depends(get_db)
):
    """
    Обновить книгу
    """
    db_book = crud.update_book(db, book_id=book_id, book_update=book_update)
    return utils.book_to_pydantic(db_book)

@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT, responses=ERROR_RESPONSES)
@limiter.limit("30/minute")
async def delete_book(
    request: Request,
    response: Response,
    book_id: str,
    db: Session = Depends(get_db)
):
    """
    Удалить книгу
    """
    crud.delete_book(db, book_id=book_id)
    return None
