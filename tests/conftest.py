import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from bookdaan.auth import jwt_handler  # noqa: E402
from bookdaan.database import Base, get_db  # noqa: E402
from bookdaan.main import app  # noqa: E402
from bookdaan.models.book import Book  # noqa: E402
from bookdaan.models.enums import BookStatus, UserRole  # noqa: E402
from bookdaan.models.user import User  # noqa: E402


@pytest.fixture
def db():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_user(db):
    def _make_user(email: str, role: str = UserRole.RECIPIENT.value, preferences=None) -> User:
        user = User(email=email, role=role, first_name=email.split('@')[0], preferences=preferences or [])
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_book(db):
    def _make_book(donor: User, title: str = 'X', **fields) -> Book:
        book = Book(
            title=title,
            author=fields.pop('author', 'Some Author'),
            category=fields.pop('category', 'Fiction'),
            condition=fields.pop('condition', 'good'),
            status=fields.pop('status', BookStatus.AVAILABLE.value),
            donor_id=donor.id,
            **fields,
        )
        db.add(book)
        db.commit()
        db.refresh(book)
        return book

    return _make_book


def auth_headers(user: User) -> dict:
    return {'Authorization': f'Bearer {jwt_handler.create_access_token(subject=user.email)}'}


@pytest.fixture
def headers_for():
    return auth_headers
