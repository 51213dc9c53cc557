from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookdaan.auth.dependencies import get_current_user
from bookdaan.core import config
from bookdaan.database import database_unavailable, get_db
from bookdaan.models.book import Book
from bookdaan.models.enums import BookStatus
from bookdaan.models.user import User
from bookdaan.routes.book_routes import LIKE_ESCAPE, contains_pattern, newest_first, search_books
from bookdaan.schemas import BookResponse

router = APIRouter(tags=['recommendations'])


def recommend_books(db: Session, user: User, limit: int = config.RECOMMENDATION_LIMIT) -> list[Book]:
    """Newest available books matching the user's preferred categories, or simply the newest ones."""
    preferences = [preference for preference in (user.preferences or []) if preference]
    if not preferences:
        books, _ = search_books(db, book_status=BookStatus.AVAILABLE.value, limit=limit)
        return books

    query = db.query(Book).filter(
        Book.status == BookStatus.AVAILABLE.value,
        or_(*[Book.category.ilike(contains_pattern(preference), escape=LIKE_ESCAPE) for preference in preferences]),
    )
    return newest_first(query).limit(limit).all()


@router.get('', response_model=list[BookResponse])
def get_recommendations(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return recommend_books(db, current_user)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
