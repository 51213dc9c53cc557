from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookdaan.auth.dependencies import get_current_user
from bookdaan.core import config
from bookdaan.database import database_unavailable, get_db
from bookdaan.models.book import Book
from bookdaan.models.enums import BookStatus
from bookdaan.models.user import User
from bookdaan.schemas import (
    BookDetailResponse,
    BookListResponse,
    BookResponse,
    CreateBookRequest,
    UpdateBookRequest,
)
from bookdaan.services.lifecycle import has_live_request

router = APIRouter(tags=['books'])

REQUIRED_BOOK_FIELDS = {'title', 'author', 'category', 'language', 'condition'}


LIKE_ESCAPE = '\\'


def contains_pattern(value: str) -> str:
    """ILIKE pattern matching ``value`` literally anywhere in a column."""
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace('%', LIKE_ESCAPE + '%')
        .replace('_', LIKE_ESCAPE + '_')
    )
    return f'%{escaped}%'


def newest_first(query):
    return query.order_by(Book.created_at.desc(), Book.id.desc())


def search_books(
    db: Session,
    search: str | None = None,
    category: str | None = None,
    book_status: str | None = None,
    page: int = 1,
    limit: int = config.DEFAULT_PAGE_SIZE,
) -> tuple[list[Book], int]:
    query = db.query(Book)

    if search:
        pattern = contains_pattern(search)
        query = query.filter(
            or_(
                Book.title.ilike(pattern, escape=LIKE_ESCAPE),
                Book.author.ilike(pattern, escape=LIKE_ESCAPE),
                Book.description.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    if category:
        query = query.filter(Book.category == category)

    if book_status:
        query = query.filter(Book.status == book_status)

    total = query.count()
    books = newest_first(query).limit(limit).offset((page - 1) * limit).all()
    return books, total


def get_owned_book(book_id: int, current_user: User, db: Session) -> Book:
    book = db.get(Book, book_id)
    if book is None or book.donor_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Unauthorized')
    return book


@router.get('', response_model=BookListResponse)
def list_books(
    search: str | None = Query(default=None),
    category: str | None = Query(default=None),
    book_status: str = Query(default=BookStatus.AVAILABLE.value, alias='status'),
    page: int = Query(default=1, ge=1, le=config.MAX_PAGE),
    limit: int = Query(default=config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    try:
        books, total = search_books(
            db,
            search=search.strip() if search else None,
            category=category.strip() if category else None,
            book_status=book_status.strip().lower() or BookStatus.AVAILABLE.value,
            page=page,
            limit=limit,
        )
        return BookListResponse(
            books=[BookResponse.model_validate(book) for book in books],
            total=total,
        )
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/donor/me', response_model=list[BookResponse])
def list_my_books(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return newest_first(db.query(Book).filter(Book.donor_id == current_user.id)).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{book_id}', response_model=BookDetailResponse)
def get_book(book_id: int, db: Session = Depends(get_db)):
    try:
        book = db.get(Book, book_id)
        if book is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Book not found')

        return BookDetailResponse.model_validate(book)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('', response_model=BookResponse, status_code=status.HTTP_201_CREATED)
def create_book(
    data: CreateBookRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        book = Book(
            title=data.title,
            author=data.author,
            isbn=data.isbn,
            category=data.category,
            language=data.language,
            condition=data.condition.value,
            cover_image_url=data.cover_image_url,
            description=data.description,
            donor_id=current_user.id,
            status=BookStatus.AVAILABLE.value,
        )
        db.add(book)
        db.commit()
        db.refresh(book)
        return book
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.patch('/{book_id}', response_model=BookResponse)
def update_book(
    book_id: int,
    data: UpdateBookRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        book = get_owned_book(book_id, current_user, db)

        for field_name, value in data.model_dump(exclude_unset=True).items():
            if value is None and field_name in REQUIRED_BOOK_FIELDS:
                continue
            if field_name == 'condition':
                value = value.value
            setattr(book, field_name, value)

        db.commit()
        db.refresh(book)
        return book
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{book_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_book(
    book_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        book = get_owned_book(book_id, current_user, db)

        if has_live_request(db, book.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Book has an active request and cannot be deleted.',
            )

        db.delete(book)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)
