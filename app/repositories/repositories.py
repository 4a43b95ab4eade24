from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.models import Book, User, Reservation, ReservationStatus


class UserRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def add(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

    def list_all(self, skip: int = 0, limit: int = 50) -> List[User]:
        return self.db.query(User).order_by(User.name).offset(skip).limit(limit).all()


class BookRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, book_id: int) -> Optional[Book]:
        return self.db.query(Book).filter(Book.id == book_id).first()

    def find_by_external_id(self, external_id: int, lock: bool = False) -> Optional[Book]:
        query = self.db.query(Book).filter(Book.external_id == external_id)
        # row lock on engines that support SELECT ... FOR UPDATE
        if lock:
            query = query.with_for_update().populate_existing()
        return query.first()

    def get_by_isbn(self, isbn: str) -> Optional[Book]:
        return self.db.query(Book).filter(Book.isbn == isbn).first()

    def save(self, book: Book) -> Book:
        self.db.add(book)
        self.db.flush()
        return book

    def list_all(self, skip: int = 0, limit: int = 20) -> List[Book]:
        return self.db.query(Book).order_by(Book.title).offset(skip).limit(limit).all()


class ReservationRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def save(self, reservation: Reservation) -> Reservation:
        self.db.add(reservation)
        self.db.flush()
        return reservation

    def find_by_id(self, reservation_id: int, lock: bool = False) -> Optional[Reservation]:
        query = self.db.query(Reservation).filter(Reservation.id == reservation_id)
        if lock:
            query = query.with_for_update().populate_existing()
        return query.first()

    def find_all(self) -> List[Reservation]:
        return self.db.query(Reservation).order_by(Reservation.id).all()

    def find_by_user_id(self, user_id: int) -> List[Reservation]:
        return (self.db.query(Reservation)
                .filter(Reservation.user_id == user_id)
                .order_by(Reservation.id).all())

    def find_active_by_user_id(self, user_id: int) -> List[Reservation]:
        return (self.db.query(Reservation)
                .filter(Reservation.user_id == user_id,
                        Reservation.status == ReservationStatus.ACTIVE)
                .order_by(Reservation.id).all())

    def find_by_status(self, status: ReservationStatus) -> List[Reservation]:
        return (self.db.query(Reservation)
                .filter(Reservation.status == status)
                .order_by(Reservation.id).all())

    def find_by_book_external_id(self, external_id: int) -> List[Reservation]:
        return (self.db.query(Reservation).join(Book)
                .filter(Book.external_id == external_id)
                .order_by(Reservation.id).all())

    def find_by_date_range(self, start: date, end: date) -> List[Reservation]:
        return (self.db.query(Reservation)
                .filter(Reservation.start_date >= start, Reservation.start_date <= end)
                .order_by(Reservation.start_date, Reservation.id).all())

    def find_overdue(self, as_of: date) -> List[Reservation]:
        return (self.db.query(Reservation)
                .filter(Reservation.status == ReservationStatus.ACTIVE,
                        Reservation.expected_return_date < as_of)
                .order_by(Reservation.expected_return_date, Reservation.id).all())

    def count_active_by_book_external_id(self, external_id: int) -> int:
        return (self.db.query(func.count(Reservation.id))
                .select_from(Reservation).join(Book)
                .filter(Book.external_id == external_id,
                        Reservation.status == ReservationStatus.ACTIVE)
                .scalar())
