"""User and book collaborators used by the reservation engine and the API."""

import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import BookNotFound, UserNotFound
from app.models.models import Book, User
from app.repositories.repositories import BookRepository, UserRepository
from app.schemas import schemas

logger = logging.getLogger("elibrary.catalog")


class UserService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.users = UserRepository(db)

    def get_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    def email_taken(self, email: str) -> bool:
        return self.users.get_by_email(email.strip()) is not None

    def create_user(self, user_in: schemas.UserCreate) -> User:
        with transaction(self.db):
            user = self.users.add(User(name=user_in.name.strip(), email=user_in.email.strip()))
            self.db.refresh(user)
            logger.info(f"Created user id={user.id} email={user.email}")
        return user

    def list_users(self, skip: int = 0, limit: int = 50) -> List[User]:
        return self.users.list_all(skip, limit)


class BookService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.books = BookRepository(db)

    def get_book(self, external_id: int) -> Book:
        book = self.books.find_by_external_id(external_id)
        if book is None:
            raise BookNotFound(external_id)
        return book

    def external_id_taken(self, external_id: int) -> bool:
        return self.books.find_by_external_id(external_id) is not None

    def isbn_taken(self, isbn: str) -> bool:
        return self.books.get_by_isbn(isbn) is not None

    def create_book(self, book_in: schemas.BookCreate) -> Book:
        book = Book(
            external_id=book_in.external_id,
            title=book_in.title.strip(),
            author=book_in.author.strip() if book_in.author else None,
            isbn=book_in.isbn,
            daily_rate=book_in.daily_rate,
            copies_total=book_in.copies_total,
            copies_available=book_in.copies_total,
        )
        with transaction(self.db):
            self.books.save(book)
            self.db.refresh(book)
            logger.info(f"Created book id={book.id} external_id={book.external_id} title={book.title}")
        return book

    def list_books(self, skip: int = 0, limit: int = 20) -> List[Book]:
        return self.books.list_all(skip, limit)
