from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookdaan.auth.dependencies import get_current_user, require_admin
from bookdaan.database import database_unavailable, get_db
from bookdaan.models.enums import NotificationType
from bookdaan.models.notification import Notification
from bookdaan.models.user import User
from bookdaan.schemas import CreateNotificationRequest, NotificationResponse

router = APIRouter(tags=['notifications'])


@router.get('', response_model=list[NotificationResponse])
def list_notifications(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return db.query(Notification).filter(
            Notification.user_id == current_user.id,
        ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('', response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
def send_notification(
    data: CreateNotificationRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    del admin

    try:
        if db.get(User, data.user_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='User not found')

        notification = Notification(
            user_id=data.user_id,
            type=NotificationType.ANNOUNCEMENT.value,
            message=data.message.strip(),
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.patch('/{notification_id}/read', status_code=status.HTTP_204_NO_CONTENT)
def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        notification = db.get(Notification, notification_id)
        if notification is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Notification not found')
        if notification.user_id != current_user.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Unauthorized')

        notification.is_read = True
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)
