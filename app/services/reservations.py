"""Reservation lifecycle: creation, return and read projections.

A reservation starts ``ACTIVE`` and is closed exactly once by a return,
ending ``RETURNED`` (on time or early) or ``OVERDUE`` (late, with a late fee).
Overdue *queries* are evaluated against a date at read time and never change
the stored status.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Union

from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import (
    AlreadyReturned,
    BookNotFound,
    InvalidRentalPeriod,
    InvalidReturnDate,
    NoCopiesAvailable,
    ReservationNotFound,
)
from app.models.models import Reservation, ReservationStatus
from app.repositories.repositories import BookRepository, ReservationRepository
from app.schemas.schemas import ReservationOut
from app.services import fees
from app.services.catalog import UserService
from app.services.inventory import InventoryLedger

logger = logging.getLogger("elibrary.reservations")


class ReservationService:
    def __init__(self, db: Session, today: Callable[[], date] = date.today) -> None:
        self.db = db
        self.today = today
        self.users = UserService(db)
        self.books = BookRepository(db)
        self.reservations = ReservationRepository(db)
        self.inventory = InventoryLedger(db)

    def create_reservation(self, user_id: int, book_external_id: int,
                           rental_days: int, start_date: date) -> ReservationOut:
        with transaction(self.db):
            user = self.users.get_user(user_id)
            book = self.books.find_by_external_id(book_external_id, lock=True)
            if book is None:
                raise BookNotFound(book_external_id)
            if book.copies_available <= 0:
                logger.warning(f"User {user.id} asked for book {book_external_id} with no copies left")
                raise NoCopiesAvailable(book_external_id)

            daily_rate = fees.to_decimal(book.daily_rate)
            total_fee = fees.rental_fee(daily_rate, rental_days)
            try:
                expected_return_date = start_date + timedelta(days=rental_days)
            except OverflowError:
                raise InvalidRentalPeriod(rental_days) from None
            reservation = Reservation(
                user_id=user.id,
                book_id=book.id,
                rental_days=rental_days,
                start_date=start_date,
                expected_return_date=expected_return_date,
                daily_rate=daily_rate,
                total_fee=total_fee,
                late_fee=fees.ZERO,
                status=ReservationStatus.ACTIVE,
                created_at=datetime.utcnow(),
            )
            self.reservations.save(reservation)
            self.inventory.decrease(book.id)
            self.db.refresh(reservation)
            result = ReservationOut.model_validate(reservation)
        logger.info(f"User {result.user_id} reserved book {book_external_id} reservation {result.id} "
                    f"for {rental_days} days, fee {total_fee}")
        return result

    def return_book(self, reservation_id: int, actual_return_date: date) -> ReservationOut:
        with transaction(self.db):
            reservation = self._get(reservation_id, lock=True)
            if reservation.is_closed:
                raise AlreadyReturned(reservation_id, reservation.status)
            if actual_return_date < reservation.start_date:
                raise InvalidReturnDate(reservation_id, actual_return_date, reservation.start_date)

            late_days = fees.days_late(reservation.expected_return_date, actual_return_date)
            if late_days == 0:
                status, late_fee = ReservationStatus.RETURNED, fees.ZERO
            else:
                status = ReservationStatus.OVERDUE
                late_fee = fees.late_fee(reservation.daily_rate, late_days)

            # closes the reservation only if nobody else closed it first
            updated = (self.db.query(Reservation)
                       .filter(Reservation.id == reservation_id,
                               Reservation.status == ReservationStatus.ACTIVE)
                       .update({Reservation.status: status,
                                Reservation.late_fee: late_fee,
                                Reservation.actual_return_date: actual_return_date},
                               synchronize_session=False))
            self.db.refresh(reservation)
            if not updated:
                raise AlreadyReturned(reservation_id, reservation.status)
            self.inventory.increase(reservation.book_id)
            result = ReservationOut.model_validate(reservation)
        logger.info(f"Reservation {reservation_id} returned on {actual_return_date}: "
                    f"{status.value}, {late_days} days late, late fee {late_fee}")
        return result

    def get_reservation(self, reservation_id: int) -> ReservationOut:
        with transaction(self.db):
            return ReservationOut.model_validate(self._get(reservation_id))

    def get_all(self) -> List[ReservationOut]:
        with transaction(self.db):
            return self._project(self.reservations.find_all())

    def get_by_user(self, user_id: int) -> List[ReservationOut]:
        with transaction(self.db):
            return self._project(self.reservations.find_by_user_id(user_id))

    def get_active_by_user(self, user_id: int) -> List[ReservationOut]:
        with transaction(self.db):
            return self._project(self.reservations.find_active_by_user_id(user_id))

    def get_by_status(self, status: Union[ReservationStatus, str]) -> List[ReservationOut]:
        try:
            status = ReservationStatus(status)
        except ValueError:
            logger.warning(f"Unknown reservation status {status!r}")
            return []
        with transaction(self.db):
            return self._project(self.reservations.find_by_status(status))

    def get_active(self) -> List[ReservationOut]:
        return self.get_by_status(ReservationStatus.ACTIVE)

    def get_by_book(self, book_external_id: int) -> List[ReservationOut]:
        with transaction(self.db):
            return self._project(self.reservations.find_by_book_external_id(book_external_id))

    def get_overdue(self, as_of: Optional[date] = None) -> List[ReservationOut]:
        """ACTIVE reservations whose expected return date is before ``as_of``.

        Defaults to today. The stored status is left as ACTIVE; it only moves
        to OVERDUE when the book is actually returned late.
        """
        with transaction(self.db):
            return self._project(self.reservations.find_overdue(as_of or self.today()))

    def get_by_date_range(self, start: date, end: date) -> List[ReservationOut]:
        with transaction(self.db):
            return self._project(self.reservations.find_by_date_range(start, end))

    def count_active_by_book(self, book_external_id: int) -> int:
        with transaction(self.db):
            return self.reservations.count_active_by_book_external_id(book_external_id)

    def _get(self, reservation_id: int, lock: bool = False) -> Reservation:
        reservation = self.reservations.find_by_id(reservation_id, lock=lock)
        if reservation is None:
            raise ReservationNotFound(reservation_id)
        return reservation

    @staticmethod
    def _project(items: List[Reservation]) -> List[ReservationOut]:
        return [ReservationOut.model_validate(r) for r in items]
