"""Error kinds raised by the reservation core.

Each failure is its own exception class and also carries an ``ErrorKind``
plus a ``context`` dict with the offending id or date, so the presentation
layer can branch on ``exc.kind`` without parsing messages.
"""

from enum import Enum
from typing import Any, Dict


class ErrorKind(str, Enum):
    USER_NOT_FOUND = "user_not_found"
    BOOK_NOT_FOUND = "book_not_found"
    NO_COPIES_AVAILABLE = "no_copies_available"
    RESERVATION_NOT_FOUND = "reservation_not_found"
    ALREADY_RETURNED = "already_returned"
    INVALID_RETURN_DATE = "invalid_return_date"
    INVALID_RENTAL_PERIOD = "invalid_rental_period"
    INSUFFICIENT_STOCK = "insufficient_stock"


class LibraryError(Exception):
    kind: ErrorKind

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        payload = {"detail": self.message, "code": self.kind.value}
        payload.update({k: str(v) for k, v in self.context.items()})
        return payload


class UserNotFound(LibraryError):
    kind = ErrorKind.USER_NOT_FOUND

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} not found", user_id=user_id)


class BookNotFound(LibraryError):
    kind = ErrorKind.BOOK_NOT_FOUND

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book {book_id} not found", book_id=book_id)


class NoCopiesAvailable(LibraryError):
    kind = ErrorKind.NO_COPIES_AVAILABLE

    def __init__(self, book_id: int) -> None:
        super().__init__(f"No copies available for book {book_id}", book_id=book_id)


class ReservationNotFound(LibraryError):
    kind = ErrorKind.RESERVATION_NOT_FOUND

    def __init__(self, reservation_id: int) -> None:
        super().__init__(f"Reservation {reservation_id} not found",
                         reservation_id=reservation_id)


class AlreadyReturned(LibraryError):
    kind = ErrorKind.ALREADY_RETURNED

    def __init__(self, reservation_id: int, status) -> None:
        super().__init__(f"Reservation {reservation_id} was already returned",
                         reservation_id=reservation_id, status=status.value)


class InvalidReturnDate(LibraryError):
    kind = ErrorKind.INVALID_RETURN_DATE

    def __init__(self, reservation_id: int, return_date, start_date) -> None:
        super().__init__(
            f"Return date {return_date} cannot be before start date {start_date}",
            reservation_id=reservation_id, return_date=return_date, start_date=start_date,
        )


class InvalidRentalPeriod(LibraryError):
    kind = ErrorKind.INVALID_RENTAL_PERIOD

    def __init__(self, rental_days) -> None:
        super().__init__(f"Rental period must be at least 1 day, got {rental_days}",
                         rental_days=rental_days)


class InsufficientStock(LibraryError):
    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Insufficient stock for book {book_id}", book_id=book_id)
