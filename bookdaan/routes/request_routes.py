from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookdaan.auth.dependencies import get_current_user
from bookdaan.database import database_unavailable, get_db
from bookdaan.models.book import Book
from bookdaan.models.book_request import BookRequest
from bookdaan.models.user import User
from bookdaan.schemas import BookRequestResponse, CreateBookRequestBody, UpdateRequestStatusBody
from bookdaan.services import lifecycle

router = APIRouter(tags=['requests'])

LIFECYCLE_ERROR_STATUS = {
    lifecycle.BookNotFoundError: status.HTTP_404_NOT_FOUND,
    lifecycle.RequestNotFoundError: status.HTTP_404_NOT_FOUND,
    lifecycle.BookUnavailableError: status.HTTP_400_BAD_REQUEST,
    lifecycle.InvalidTransitionError: status.HTTP_400_BAD_REQUEST,
    lifecycle.NotBookOwnerError: status.HTTP_403_FORBIDDEN,
}


def lifecycle_http_error(exc: lifecycle.LifecycleError) -> HTTPException:
    status_code = LIFECYCLE_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=str(exc))


@router.post('', response_model=BookRequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    data: CreateBookRequestBody,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return lifecycle.create_request(
            db,
            book_id=data.book_id,
            recipient=current_user,
            message=data.message,
            pickup_location=data.pickup_location,
        )
    except lifecycle.LifecycleError as exc:
        raise lifecycle_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/recipient/me', response_model=list[BookRequestResponse])
def list_my_requests(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return db.query(BookRequest).filter(
            BookRequest.recipient_id == current_user.id,
        ).order_by(BookRequest.created_at.desc(), BookRequest.id.desc()).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/donor/me', response_model=list[BookRequestResponse])
def list_requests_for_my_books(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return db.query(BookRequest).join(Book, BookRequest.book_id == Book.id).filter(
            Book.donor_id == current_user.id,
        ).order_by(BookRequest.created_at.desc(), BookRequest.id.desc()).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.patch('/{request_id}/status', response_model=BookRequestResponse)
def update_request_status(
    request_id: int,
    data: UpdateRequestStatusBody,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return lifecycle.update_request_status(db, request_id, current_user, data.status)
    except lifecycle.LifecycleError as exc:
        raise lifecycle_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
