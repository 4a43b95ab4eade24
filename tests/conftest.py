from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.core.database import Base, get_db, make_engine
from app.main import app
from app.schemas import schemas
from app.services.catalog import BookService, UserService


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def user(db):
    return UserService(db).create_user(schemas.UserCreate(name="Juan Perez", email="juan@example.com"))


@pytest.fixture
def make_book(db):
    def _make(external_id=258027, copies=10, daily_rate="15.99", title="The Lord of the Rings"):
        return BookService(db).create_book(schemas.BookCreate(
            external_id=external_id,
            title=title,
            daily_rate=Decimal(daily_rate),
            copies_total=copies,
        ))
    return _make


@pytest.fixture
def book(make_book):
    return make_book()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
