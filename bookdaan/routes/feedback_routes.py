from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookdaan.auth.dependencies import get_current_user
from bookdaan.database import database_unavailable, get_db
from bookdaan.models.book import Book
from bookdaan.models.feedback import Feedback
from bookdaan.models.book_request import BookRequest
from bookdaan.models.user import User
from bookdaan.schemas import CreateFeedbackRequest, FeedbackResponse

router = APIRouter(tags=['feedback'])


def feedback_counterpart(book_request: BookRequest, book: Book, author: User) -> int:
    """Return the id of the other participant of ``book_request``, or raise 403 for outsiders."""
    if author.id == book_request.recipient_id:
        return book.donor_id
    if author.id == book.donor_id:
        return book_request.recipient_id
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail='Only the donor or recipient of this request can leave feedback.',
    )


@router.get('', response_model=list[FeedbackResponse])
def list_my_feedback(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return db.query(Feedback).filter(
            Feedback.to_id == current_user.id,
        ).order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('', response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
def create_feedback(
    data: CreateFeedbackRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        book_request = db.get(BookRequest, data.request_id)
        if book_request is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Request not found')

        feedback = Feedback(
            from_id=current_user.id,
            to_id=feedback_counterpart(book_request, book_request.book, current_user),
            request_id=book_request.id,
            rating=data.rating,
            comment=data.comment,
        )
        db.add(feedback)
        db.commit()
        db.refresh(feedback)
        return feedback
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
