"""
Request/book lifecycle.

A book is held by at most one live (pending or accepted) request. Each flow
below is one transaction whose writes are guarded by a conditional UPDATE on
the status it read; zero affected rows means another caller got there first.
"""

import logging

from sqlalchemy.orm import Session

from bookdaan.models.book import Book
from bookdaan.models.book_request import BookRequest
from bookdaan.models.enums import BookStatus, NotificationType, RequestStatus
from bookdaan.models.notification import Notification
from bookdaan.models.user import User

logger = logging.getLogger(__name__)

REQUEST_TRANSITIONS = {
    RequestStatus.PENDING: {RequestStatus.ACCEPTED, RequestStatus.REJECTED, RequestStatus.COMPLETED},
    RequestStatus.ACCEPTED: {RequestStatus.COMPLETED},
    RequestStatus.REJECTED: set(),
    RequestStatus.COMPLETED: set(),
}

BOOK_STATUS_FOR_REQUEST_STATUS = {
    RequestStatus.ACCEPTED: BookStatus.REQUESTED,
    RequestStatus.REJECTED: BookStatus.AVAILABLE,
    RequestStatus.COMPLETED: BookStatus.DONATED,
}

LIVE_REQUEST_STATUSES = {RequestStatus.PENDING.value, RequestStatus.ACCEPTED.value}


class LifecycleError(Exception):
    """Base class for rejected lifecycle operations."""


class BookNotFoundError(LifecycleError):
    pass


class RequestNotFoundError(LifecycleError):
    pass


class BookUnavailableError(LifecycleError):
    """The book is not in ``available`` status."""


class NotBookOwnerError(LifecycleError):
    """The caller is not the donor who listed the book."""


class InvalidTransitionError(LifecycleError):
    pass


def can_transition(current: str, target: str) -> bool:
    try:
        current_status = RequestStatus(current)
        target_status = RequestStatus(target)
    except ValueError:
        return False
    return target_status in REQUEST_TRANSITIONS[current_status]


def book_status_for(request_status: str) -> BookStatus:
    return BOOK_STATUS_FOR_REQUEST_STATUS[RequestStatus(request_status)]


def create_request(
    db: Session,
    book_id: int,
    recipient: User,
    message: str | None = None,
    pickup_location: str | None = None,
) -> BookRequest:
    """Request a book on behalf of ``recipient`` and notify its donor."""
    book = db.get(Book, book_id)
    if book is None:
        raise BookNotFoundError('Book not found')
    if book.status != BookStatus.AVAILABLE.value:
        raise BookUnavailableError('Book is not available for request')

    try:
        claimed = db.query(Book).filter(
            Book.id == book_id,
            Book.status == BookStatus.AVAILABLE.value,
        ).update({Book.status: BookStatus.REQUESTED.value}, synchronize_session=False)
        if claimed == 0:
            raise BookUnavailableError('Book is not available for request')

        book_request = BookRequest(
            book_id=book_id,
            recipient_id=recipient.id,
            message=message,
            pickup_location=pickup_location,
            status=RequestStatus.PENDING.value,
        )
        db.add(book_request)
        db.add(
            Notification(
                user_id=book.donor_id,
                type=NotificationType.BOOK_REQUEST.value,
                message=f'Someone has requested your book "{book.title}"',
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(book_request)
    db.refresh(book)
    logger.info('Book %s requested by user %s (request %s)', book_id, recipient.id, book_request.id)
    return book_request


def update_request_status(db: Session, request_id: int, actor: User, new_status: str) -> BookRequest:
    """Move a request to ``new_status`` on behalf of the donor and notify the recipient."""
    book_request = db.get(BookRequest, request_id)
    if book_request is None:
        raise RequestNotFoundError('Request not found')

    book = db.get(Book, book_request.book_id)
    if book is None or book.donor_id != actor.id:
        raise NotBookOwnerError('Unauthorized')

    current_status = book_request.status
    if not can_transition(current_status, new_status):
        raise InvalidTransitionError(f'Cannot change request from {current_status} to {new_status}')

    try:
        updated = db.query(BookRequest).filter(
            BookRequest.id == request_id,
            BookRequest.status == current_status,
        ).update({BookRequest.status: new_status}, synchronize_session=False)
        if updated == 0:
            raise InvalidTransitionError(f'Cannot change request from {current_status} to {new_status}')

        db.query(Book).filter(Book.id == book.id).update(
            {Book.status: book_status_for(new_status).value},
            synchronize_session=False,
        )
        db.add(
            Notification(
                user_id=book_request.recipient_id,
                type=NotificationType.REQUEST_UPDATE.value,
                message=f'Your book request has been {new_status}',
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(book_request)
    db.refresh(book)
    logger.info('Request %s moved %s -> %s by donor %s', request_id, current_status, new_status, actor.id)
    return book_request


def has_live_request(db: Session, book_id: int) -> bool:
    return db.query(BookRequest.id).filter(
        BookRequest.book_id == book_id,
        BookRequest.status.in_(LIVE_REQUEST_STATUSES),
    ).first() is not None
