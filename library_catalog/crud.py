import logging
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import func
from typing import Dict, List, Optional
import library_catalog.models as models
import library_catalog.schemas as schemas
from library_catalog.search import escape_like
from library_catalog.errors import (
    NotFoundError,
    InvalidReferenceError,
    InternalError,
    classify_integrity_error,
)

logger = logging.getLogger(__name__)

AUTHOR_NOT_FOUND = "Author not found"
BOOK_NOT_FOUND = "Book not found"
EMAIL_TAKEN = "Email is already registered"

# ====================== ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ ======================

def _commit(db: Session, conflict_message: Optional[str] = None):
    """
    Фиксирует транзакцию, переводя ошибки БД в ошибки каталога
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        error = classify_integrity_error(e, conflict_message)
        if isinstance(error, InternalError):
            logger.exception("Unclassified integrity error")
        else:
            logger.warning(f"Integrity error mapped to {type(error).__name__}: {e.orig}")
        raise error
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database commit failed")
        raise InternalError()
    except Exception:
        db.rollback()
        raise


# ====================== AUTHOR CRUD ======================

def get_author(db: Session, author_id: str) -> models.Author:
    """
    Получить автора по ID или NotFoundError
    """
    db_author = db.query(models.Author).filter(models.Author.id == author_id).first()
    if not db_author:
        raise NotFoundError(AUTHOR_NOT_FOUND)
    return db_author

def count_books_by_author(db: Session) -> Dict[str, int]:
    rows = (
        db.query(models.Book.author_id, func.count(models.Book.id))
        .group_by(models.Book.author_id)
        .all()
    )
    return {author_id: count for author_id, count in rows}

def get_authors(db: Session, name: Optional[str] = None) -> List[models.Author]:
    """
    Получить список авторов, новые первыми
    """
    query = db.query(models.Author)

    if name:
        query = query.filter(models.Author.name.ilike(f"%{escape_like(name)}%", escape="\\"))

    return query.order_by(models.Author.created_at.desc()).all()

def get_author_books(db: Session, author_id: str, newest_first: bool = True) -> List[models.Book]:
    """
    Книги автора по году издания; книги без года идут последними
    """
    if newest_first:
        ordering = (models.Book.published_year.desc().nulls_last(), models.Book.created_at.desc())
    else:
        ordering = (models.Book.published_year.asc().nulls_last(), models.Book.created_at.asc())

    return (
        db.query(models.Book)
        .filter(models.Book.author_id == author_id)
        .order_by(*ordering)
        .all()
    )

def create_author(db: Session, author: schemas.AuthorCreate) -> models.Author:
    db_author = models.Author(**author.model_dump())
    db.add(db_author)
    _commit(db, conflict_message=EMAIL_TAKEN)
    db.refresh(db_author)

    logger.info(f"Created author {db_author.id}")
    return db_author

def update_author(
    db: Session,
    author_id: str,
    author_update: schemas.AuthorUpdate
) -> models.Author:
    """
    Обновить автора

    Каждое переданное поле перезаписывается (включая null),
    отсутствующие в запросе поля не трогаются. Это касается и birth_year:
    без ключа в запросе год рождения намеренно остается прежним, а не
    обнуляется; очистить его можно только явным null или "".
    """
    db_author = get_author(db, author_id)

    update_data = author_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_author, field, value)

    _commit(db, conflict_message=EMAIL_TAKEN)
    db.refresh(db_author)

    logger.info(f"Updated author {author_id}: {sorted(update_data)}")
    return db_author

def delete_author(db: Session, author_id: str) -> int:
    """
    Удалить автора вместе со всеми его книгами
    Возвращает количество удаленных книг
    """
    db_author = get_author(db, author_id)
    books_count = len(db_author.books)

    db.delete(db_author)
    _commit(db)

    logger.info(f"Deleted author {author_id} with {books_count} books")
    return books_count

# ====================== BOOK CRUD ======================

def get_book(db: Session, book_id: str, load_author: bool = True) -> models.Book:
    """
    Получить книгу по ID или NotFoundError
    """
    query = db.query(models.Book)

    if load_author:
        query = query.options(joinedload(models.Book.author))

    db_book = query.filter(models.Book.id == book_id).first()
    if not db_book:
        raise NotFoundError(BOOK_NOT_FOUND)
    return db_book

def get_books(db: Session, author_id: Optional[str] = None) -> List[models.Book]:
    query = db.query(models.Book).options(joinedload(models.Book.author))

    if author_id:
        query = query.filter(models.Book.author_id == author_id)

    return query.order_by(models.Book.created_at.desc()).all()

def create_book(db: Session, book: schemas.BookCreate) -> models.Book:
    """
    Создать книгу

    Несуществующий автор дает InvalidReferenceError; та же ошибка
    приходит из БД, если автор исчез между проверкой и записью
    """
    exists = db.query(models.Author.id).filter(models.Author.id == book.author_id).first()
    if not exists:
        raise InvalidReferenceError()

    db_book = models.Book(**book.model_dump())
    db.add(db_book)
    _commit(db)

    logger.info(f"Created book {db_book.id} for author {book.author_id}")
    # Загружаем автора для полного ответа
    return get_book(db, db_book.id)

def update_book(
    db: Session,
    book_id: str,
    book_update: schemas.BookUpdate
) -> models.Book:
    db_book = get_book(db, book_id, load_author=False)

    update_data = book_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_book, field, value)

    _commit(db)

    logger.info(f"Updated book {book_id}: {sorted(update_data)}")
    return get_book(db, book_id)

def delete_book(db: Session, book_id: str) -> None:
    db_book = get_book(db, book_id, load_author=False)

    db.delete(db_book)
    _commit(db)
    logger.info(f"Deleted book {book_id}")
