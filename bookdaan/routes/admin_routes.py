import math

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookdaan.auth.dependencies import require_admin
from bookdaan.core import config
from bookdaan.database import database_unavailable, get_db
from bookdaan.models.book import Book
from bookdaan.models.book_request import BookRequest
from bookdaan.models.user import User
from bookdaan.schemas import StatsResponse, UserResponse

router = APIRouter(tags=['admin'])


def co2_saved_tonnes(total_books: int) -> float:
    """CO2 saved by ``total_books`` donations, in tonnes rounded half-up to one decimal."""
    tonnes = total_books * config.CO2_KG_PER_BOOK / 1000
    return math.floor(tonnes * 10 + 0.5) / 10


@router.get('/stats', response_model=StatsResponse)
def get_stats(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    del admin

    try:
        total_books = db.query(Book).count()
        total_users = db.query(User).count()
        total_requests = db.query(BookRequest).count()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc

    return StatsResponse(
        total_books=total_books,
        total_users=total_users,
        total_requests=total_requests,
        co2_saved=co2_saved_tonnes(total_books),
    )


@router.get('/users', response_model=list[UserResponse])
def list_users(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    del admin

    try:
        return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
