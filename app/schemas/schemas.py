from pydantic import BaseModel, ConfigDict, Field, constr, field_validator
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from app.core.config import DEFAULT_RENTAL_DAYS
from app.models.models import ReservationStatus

class BookBase(BaseModel):
    external_id: int
    title: constr(min_length=1)
    author: Optional[str] = None
    isbn: Optional[str] = None
    daily_rate: Decimal = Field(decimal_places=2)
    copies_total: int = Field(default=1, ge=0)

    @field_validator('daily_rate')
    @classmethod
    def ensure_non_negative_rate(cls, v):
        if v < 0:
            raise ValueError('daily_rate must be >= 0')
        return v

class BookCreate(BookBase):
    pass

class BookOut(BookBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    copies_available: int
    created_at: datetime

class UserBase(BaseModel):
    name: constr(min_length=1)
    email: constr(min_length=5)

class UserCreate(UserBase):
    pass

class UserOut(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    joined_at: datetime

class ReservationCreate(BaseModel):
    user_id: int
    book_external_id: int
    rental_days: int = DEFAULT_RENTAL_DAYS
    start_date: date = Field(default_factory=date.today)

class ReturnBookRequest(BaseModel):
    return_date: Optional[date] = None

class ReservationOut(BaseModel):
    """Read-only projection of a reservation handed to callers."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    book_id: int
    book_external_id: int
    rental_days: int
    start_date: date
    expected_return_date: date
    actual_return_date: Optional[date] = None
    daily_rate: Decimal
    total_fee: Decimal
    late_fee: Decimal
    status: ReservationStatus
    created_at: datetime
