def test_create_book(client, create_author):
    author = create_author(name="Italo Calvino", nationality="Italian")

    response = client.post(
        "/api/books",
        json={
            "title": "Invisible Cities",
            "authorId": author["id"],
            "publishedYear": "1972",
            "pages": "165",
            "genre": "Novel",
            "isbn": "",
        },
    )

    assert response.status_code == 201
    book = response.json()
    assert book["title"] == "Invisible Cities"
    assert book["publishedYear"] == 1972
    assert book["pages"] == 165
    assert book["isbn"] is None
    assert book["description"] is None
    assert book["author"] == {
        "id": author["id"],
        "name": "Italo Calvino",
        "email": author["email"],
        "nationality": "Italian",
    }


def test_create_book_with_unknown_author_is_invalid_reference(client):
    response = client.post("/api/books", json={"title": "Orphan", "authorId": "no-such-author"})

    assert response.status_code == 422
    assert response.json() == {"error": "Referenced author does not exist"}


def test_create_book_requires_author_id(client):
    response = client.post("/api/books", json={"title": "Orphan"})

    assert response.status_code == 400
    assert "authorId" in response.json()["error"]


def test_create_book_title_minimum_length(client, create_author):
    author = create_author()

    response = client.post("/api/books", json={"title": "It", "authorId": author["id"]})

    assert response.status_code == 400
    assert response.json() == {"error": "title must be at least 3 characters long"}


def test_create_book_rejects_bad_pages(client, create_author):
    author = create_author()

    for pages in (0, -5, "0"):
        response = client.post("/api/books", json={"title": "Thin", "authorId": author["id"], "pages": pages})
        assert response.status_code == 400, pages
        assert response.json() == {"error": "pages must be greater than 0"}

    response = client.post("/api/books", json={"title": "Thin", "authorId": author["id"], "pages": "12abc"})
    assert response.status_code == 400
    assert "not an integer" in response.json()["error"]


def test_create_book_rejects_numbers_beyond_column_range(client, create_author):
    author = create_author()

    response = client.post("/api/books", json={"title": "Thick", "authorId": author["id"], "pages": 2**31})
    assert response.status_code == 400
    assert response.json() == {"error": "pages must not exceed 2147483647"}

    response = client.post(
        "/api/books", json={"title": "Future", "authorId": author["id"], "publishedYear": "99999999999999999999"}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "'99999999999999999999' is out of range"}

    response = client.post("/api/books", json={"title": "Thick", "authorId": author["id"], "pages": 2147483647})
    assert response.status_code == 201
    assert response.json()["pages"] == 2147483647


def test_empty_published_year_and_pages_are_null(client, create_author):
    author = create_author()

    response = client.post(
        "/api/books",
        json={"title": "Draft", "authorId": author["id"], "publishedYear": "", "pages": ""},
    )

    assert response.status_code == 201
    assert response.json()["publishedYear"] is None
    assert response.json()["pages"] is None


def test_isbn_is_not_unique(client, create_author, create_book):
    author = create_author()

    create_book(author["id"], "First printing", isbn="978-0000000000")
    create_book(author["id"], "Second printing", isbn="978-0000000000")


def test_list_books(client, create_author, create_book):
    first = create_author()
    second = create_author()
    create_book(first["id"], "Alpha")
    create_book(second["id"], "Beta")

    assert len(client.get("/api/books").json()) == 2

    only_second = client.get("/api/books", params={"authorId": second["id"]}).json()
    assert [book["title"] for book in only_second] == ["Beta"]
    assert set(only_second[0]["author"]) == {"id", "name", "email", "nationality"}


def test_update_book(client, create_author, create_book):
    author = create_author()
    book = create_book(author["id"], "Working Title", genre="Essay", pages=90, publishedYear=2001)

    response = client.put(f"/api/books/{book['id']}", json={"title": "Final Title", "genre": "", "publishedYear": ""})

    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "Final Title"
    assert updated["genre"] is None
    assert updated["publishedYear"] is None
    assert updated["pages"] == 90


def test_update_book_ignores_author_reassignment(client, create_author, create_book):
    author = create_author()
    other = create_author()
    book = create_book(author["id"], "Stays Put")

    response = client.put(f"/api/books/{book['id']}", json={"authorId": other["id"], "pages": 10})

    assert response.status_code == 200
    assert response.json()["authorId"] == author["id"]


def test_update_book_validation(client, create_author, create_book):
    author = create_author()
    book = create_book(author["id"], "Valid Title")

    assert client.put(f"/api/books/{book['id']}", json={"title": "No"}).status_code == 400
    assert client.put(f"/api/books/{book['id']}", json={"pages": 0}).status_code == 400


def test_update_missing_book(client):
    response = client.put("/api/books/missing", json={"title": "Whatever"})

    assert response.status_code == 404
    assert response.json() == {"error": "Book not found"}


def test_delete_book_keeps_author(client, create_author, create_book):
    author = create_author()
    book = create_book(author["id"], "Ephemeral")
    create_book(author["id"], "Permanent")

    assert client.delete(f"/api/books/{book['id']}").status_code == 204
    assert client.get(f"/api/books/{book['id']}").status_code == 404
    assert client.get(f"/api/authors/{author['id']}").json()["booksCount"] == 1


def test_delete_missing_book(client):
    assert client.delete("/api/books/missing").status_code == 404


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "healthy", "database": "connected"}
    assert client.get("/").json()["api"] == "/api"
