from fastapi import APIRouter
from library_catalog.api.endpoints import authors, books

api_router = APIRouter()

api_router.include_router(authors.router)
api_router.include_router(books.router)
