import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, Enum, ForeignKey, Index, Numeric
from sqlalchemy.orm import relationship

from app.core.database import Base


class ReservationStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    RETURNED = "RETURNED"
    OVERDUE = "OVERDUE"


class Book(Base):
    __tablename__ = "books"
    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(Integer, unique=True, nullable=False, index=True)
    title = Column(String, nullable=False, index=True)
    author = Column(String, nullable=True, index=True)
    isbn = Column(String, unique=True, index=True, nullable=True)
    daily_rate = Column(Numeric(10, 2), nullable=False)
    copies_total = Column(Integer, nullable=False, default=1)
    copies_available = Column(Integer, nullable=False, default=1, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    reservations = relationship("Reservation", back_populates="book")


Index('ix_books_title_author', Book.title, Book.author)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    joined_at = Column(DateTime, default=datetime.utcnow)
    reservations = relationship("Reservation", back_populates="user")


class Reservation(Base):
    __tablename__ = "reservations"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)
    rental_days = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False, index=True)
    expected_return_date = Column(Date, nullable=False, index=True)
    actual_return_date = Column(Date, nullable=True)
    daily_rate = Column(Numeric(10, 2), nullable=False)
    total_fee = Column(Numeric(10, 2), nullable=False)
    late_fee = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(Enum(ReservationStatus), nullable=False, default=ReservationStatus.ACTIVE, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    user = relationship("User", back_populates="reservations")
    book = relationship("Book", back_populates="reservations")

    @property
    def book_external_id(self):
        return self.book.external_id if self.book is not None else None

    @property
    def is_closed(self) -> bool:
        return self.status in (ReservationStatus.RETURNED, ReservationStatus.OVERDUE)
