import logging

from sqlalchemy.orm import Session

from app.core.errors import BookNotFound, InsufficientStock
from app.models.models import Book

logger = logging.getLogger("elibrary.inventory")


class InventoryLedger:
    """Guards ``Book.copies_available``; nothing else writes that column.

    Both operations are a single conditional UPDATE, so concurrent callers on
    the same book never lose an update and the count stays within
    ``0..copies_total`` even where the engine ignores ``FOR UPDATE``.
    Changes join the caller's transaction; the caller commits.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def decrease(self, book_id: int) -> Book:
        updated = (self.db.query(Book)
                   .filter(Book.id == book_id, Book.copies_available > 0)
                   .update({Book.copies_available: Book.copies_available - 1},
                           synchronize_session=False))
        book = self._reload(book_id)
        if not updated:
            logger.warning(f"Stock decrease rejected for book {book_id}")
            raise InsufficientStock(book_id)
        logger.info(f"Book {book_id} stock decreased to {book.copies_available}")
        return book

    def increase(self, book_id: int) -> Book:
        updated = (self.db.query(Book)
                   .filter(Book.id == book_id, Book.copies_available < Book.copies_total)
                   .update({Book.copies_available: Book.copies_available + 1},
                           synchronize_session=False))
        book = self._reload(book_id)
        if not updated:
            # already at copies_total, leave the count alone
            logger.warning(f"Stock increase ignored for book {book_id}: already at {book.copies_total}")
            return book
        logger.info(f"Book {book_id} stock increased to {book.copies_available}")
        return book

    def _reload(self, book_id: int) -> Book:
        book = self.db.get(Book, book_id)
        if book is None:
            raise BookNotFound(book_id)
        self.db.refresh(book)
        return book
