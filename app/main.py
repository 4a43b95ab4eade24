from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import logger
from app.core.database import Base, engine
from app.core.errors import ErrorKind, LibraryError
from app.api import routes

ERROR_STATUS = {
    ErrorKind.USER_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.BOOK_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.RESERVATION_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.NO_COPIES_AVAILABLE: HTTPStatus.CONFLICT,
    ErrorKind.INSUFFICIENT_STOCK: HTTPStatus.CONFLICT,
    ErrorKind.ALREADY_RETURNED: HTTPStatus.CONFLICT,
    ErrorKind.INVALID_RETURN_DATE: HTTPStatus.BAD_REQUEST,
    ErrorKind.INVALID_RENTAL_PERIOD: HTTPStatus.BAD_REQUEST,
}

Base.metadata.create_all(bind=engine)
app = FastAPI(title="E-Library Rental Manager")
app.include_router(routes.router)

@app.exception_handler(LibraryError)
def library_error_handler(request: Request, exc: LibraryError):
    status = ERROR_STATUS.get(exc.kind, HTTPStatus.BAD_REQUEST)
    logger.warning(f"{request.method} {request.url.path} -> {int(status)} {exc.kind.value}: {exc.message}")
    return JSONResponse(status_code=int(status), content=exc.to_dict())

@app.get("/health")
def health():
    return {"status": "ok"}
