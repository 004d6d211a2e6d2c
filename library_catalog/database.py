from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from library_catalog.config import settings


def build_engine(url: str, echo: bool = False):
    """
    Создает engine для указанного URL

    Для PostgreSQL настраивается пул соединений, для SQLite включаются
    внешние ключи (без них не работает каскадное удаление на стороне БД)
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory база должна жить в одном соединении
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        echo=echo
    )


engine = build_engine(settings.database_url, echo=settings.DB_ECHO)

# Создаем фабрику сессий
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Dependency для получения сессии
def get_db():
    """
    Синхронная зависимость для получения сессии БД
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
