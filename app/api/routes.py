import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.models import ReservationStatus
from app.schemas import schemas
from app.services.catalog import BookService, UserService
from app.services.reservations import ReservationService

logger = logging.getLogger("elibrary.api")

router = APIRouter()

def get_reservation_service(db: Session = Depends(get_db)) -> ReservationService:
    return ReservationService(db)

# -----------------------------
# Books
# -----------------------------
@router.post("/books/", response_model=schemas.BookOut)
def create_book(book_in: schemas.BookCreate, db: Session = Depends(get_db)):
    books = BookService(db)
    if books.external_id_taken(book_in.external_id):
        logger.warning(f"Rejected duplicate book external_id={book_in.external_id}")
        raise HTTPException(status_code=400, detail="External id already exists")
    if book_in.isbn and books.isbn_taken(book_in.isbn):
        raise HTTPException(status_code=400, detail="ISBN already exists")
    return books.create_book(book_in)

@router.get("/books/", response_model=List[schemas.BookOut])
def list_books(skip: int = 0, limit: int = 20, db: Session = Depends(get_db)):
    return BookService(db).list_books(skip, limit)

@router.get("/books/{external_id}", response_model=schemas.BookOut)
def read_book(external_id: int, db: Session = Depends(get_db)):
    return BookService(db).get_book(external_id)

# -----------------------------
# Users
# -----------------------------
@router.post("/users/", response_model=schemas.UserOut)
def create_user(user_in: schemas.UserCreate, db: Session = Depends(get_db)):
    users = UserService(db)
    if users.email_taken(user_in.email):
        logger.warning(f"Rejected duplicate user email={user_in.email}")
        raise HTTPException(status_code=400, detail="Email already registered")
    return users.create_user(user_in)

@router.get("/users/", response_model=List[schemas.UserOut])
def list_users(skip: int = 0, limit: int = 50, db: Session = Depends(get_db)):
    return UserService(db).list_users(skip, limit)

@router.get("/users/{user_id}", response_model=schemas.UserOut)
def read_user(user_id: int, db: Session = Depends(get_db)):
    return UserService(db).get_user(user_id)

# -----------------------------
# Reservations
# -----------------------------
@router.post("/reservations/", response_model=schemas.ReservationOut)
def create_reservation(req: schemas.ReservationCreate,
                       service: ReservationService = Depends(get_reservation_service)):
    return service.create_reservation(req.user_id, req.book_external_id, req.rental_days, req.start_date)

@router.post("/reservations/{reservation_id}/return", response_model=schemas.ReservationOut)
def return_book(reservation_id: int, req: Optional[schemas.ReturnBookRequest] = None,
                service: ReservationService = Depends(get_reservation_service)):
    return_date = req.return_date if req and req.return_date else date.today()
    return service.return_book(reservation_id, return_date)

@router.get("/reservations/", response_model=List[schemas.ReservationOut])
def list_reservations(service: ReservationService = Depends(get_reservation_service)):
    return service.get_all()

# fixed paths are registered before /reservations/{reservation_id}
@router.get("/reservations/active", response_model=List[schemas.ReservationOut])
def list_active(service: ReservationService = Depends(get_reservation_service)):
    return service.get_active()

@router.get("/reservations/overdue", response_model=List[schemas.ReservationOut])
def list_overdue(as_of: Optional[date] = Query(None),
                 service: ReservationService = Depends(get_reservation_service)):
    return service.get_overdue(as_of)

@router.get("/reservations/range", response_model=List[schemas.ReservationOut])
def list_by_date_range(start: date, end: date,
                       service: ReservationService = Depends(get_reservation_service)):
    return service.get_by_date_range(start, end)

@router.get("/reservations/status/{status}", response_model=List[schemas.ReservationOut])
def list_by_status(status: ReservationStatus,
                   service: ReservationService = Depends(get_reservation_service)):
    return service.get_by_status(status)

@router.get("/reservations/user/{user_id}", response_model=List[schemas.ReservationOut])
def list_by_user(user_id: int, service: ReservationService = Depends(get_reservation_service)):
    return service.get_by_user(user_id)

@router.get("/reservations/user/{user_id}/active", response_model=List[schemas.ReservationOut])
def list_active_by_user(user_id: int, service: ReservationService = Depends(get_reservation_service)):
    return service.get_active_by_user(user_id)

@router.get("/reservations/book/{external_id}", response_model=List[schemas.ReservationOut])
def list_by_book(external_id: int, service: ReservationService = Depends(get_reservation_service)):
    return service.get_by_book(external_id)

@router.get("/reservations/{reservation_id}", response_model=schemas.ReservationOut)
def read_reservation(reservation_id: int, service: ReservationService = Depends(get_reservation_service)):
    return service.get_reservation(reservation_id)
