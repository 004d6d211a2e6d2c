from fastapi import APIRouter, Depends, status, Query, Request, Response
from sqlalchemy.orm import Session
from typing import List, Optional

import library_catalog.crud as crud
import library_catalog.schemas as schemas
from library_catalog.database import get_db
from library_catalog.rate_limiter import limiter
from library_catalog.stats import compute_author_stats
import library_catalog.utils as utils

router = APIRouter(prefix="/authors", tags=["authors"])

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse},
    404: {"model": schemas.ErrorResponse},
    409: {"model": schemas.ErrorResponse},
}

@router.get("", response_model=List[schemas.AuthorOut])
@limiter.limit("100/minute")
async def read_authors(
    request: Request,
    response: Response,
    name: Optional[str] = Query(None, description="Подстрока имени без учета регистра"),
    db: Session = Depends(get_db)
):
    """
    Получить список авторов с количеством книг
    """
    authors = crud.get_authors(db, name=name)
    counts = crud.count_books_by_author(db)
    return [utils.author_to_pydantic(author, books_count=counts.get(author.id, 0)) for author in authors]

@router.post("", response_model=schemas.AuthorOut, status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
@limiter.limit("30/minute")
async def create_author(
    request: Request,
    response: Response,
    author: schemas.AuthorCreate,
    db: Session = Depends(get_db)
):
    """
    Создать нового автора

    Email проверяется по формату и должен быть уникальным (иначе 409)
    """
    db_author = crud.create_author(db=db, author=author)
    return utils.author_to_pydantic(db_author, books_count=0)

@router.get("/{author_id}", response_model=schemas.AuthorDetail, responses=ERROR_RESPONSES)
@limiter.limit("100/minute")
async def read_author(
    request: Request,
    response: Response,
    author_id: str,
    db: Session = Depends(get_db)
):
    """
    Получить автора по ID вместе с книгами (новые первыми)
    """
    db_author = crud.get_author(db, author_id=author_id)
    books = crud.get_author_books(db, author_id=author_id, newest_first=True)
    return utils.author_to_detail(db_author, books)

@router.put("/{author_id}", response_model=schemas.AuthorDetail, responses=ERROR_RESPONSES)
@limiter.limit("60/minute")
async def update_author(
    request: Request,
    response: Response,
    author_id: str,
    author_update: schemas.AuthorUpdate,
    db: Session = Depends(get_db)
):
    """
    Обновить автора
    """
    db_author = crud.update_author(db, author_id=author_id, author_update=author_update)
    books = crud.get_author_books(db, author_id=author_id, newest_first=True)
    return utils.author_to_detail(db_author, books)

@router.delete("/{author_id}", status_code=status.HTTP_204_NO_CONTENT, responses=ERROR_RESPONSES)
@limiter.limit("30/minute")
async def delete_author(
    request: Request,
    response: Response,
    author_id: str,
    db: Session = Depends(get_db)
):
    """
    Удалить автора

    Все книги автора удаляются вместе с ним без возможности восстановления
    """
    crud.delete_author(db, author_id=author_id)
    return None

@router.get("/{author_id}/stats", response_model=schemas.AuthorStats, responses=ERROR_RESPONSES)
@limiter.limit("100/minute")
async def read_author_stats(
    request: Request,
    response: Response,
    author_id: str,
    db: Session = Depends(get_db)
):
    """
    Статистика по книгам автора
    """
    db_author = crud.get_author(db, author_id=author_id)
    books = crud.get_author_books(db, author_id=author_id, newest_first=False)
    stats = compute_author_stats(books)
    return schemas.AuthorStats(author_id=db_author.id, author_name=db_author.name, **stats)
