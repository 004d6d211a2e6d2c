import os

# Настройки должны быть заданы до импорта приложения
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import library_catalog.models as models
from library_catalog.database import Base, build_engine, get_db
from library_catalog.main import app


@pytest.fixture
def engine():
    # Отдельная in-memory база на каждый тест
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def create_author(client):
    counter = {"n": 0}

    def _create(**fields):
        counter["n"] += 1
        payload = {"name": f"Author {counter['n']}", "email": f"author{counter['n']}@example.com"}
        payload.update(fields)
        response = client.post("/api/authors", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_book(client):
    def _create(author_id, title, **fields):
        payload = {"title": title, "authorId": author_id}
        payload.update(fields)
        response = client.post("/api/books", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def seed_books(db):
    """Массовое создание книг напрямую через сессию"""
    def _seed(count, title="Book", **fields):
        author = models.Author(name="Bulk Author", email=f"bulk{count}@example.com")
        db.add(author)
        db.flush()
        for i in range(count):
            db.add(models.Book(title=f"{title} {i:03d}", author_id=author.id, **fields))
        db.commit()
        return author.id

    return _seed
