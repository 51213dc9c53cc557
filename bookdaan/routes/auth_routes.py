import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookdaan.auth import jwt_handler
from bookdaan.auth.dependencies import get_current_user
from bookdaan.core import config
from bookdaan.database import database_unavailable, get_db
from bookdaan.models.enums import UserRole
from bookdaan.models.user import User
from bookdaan.schemas import LoginRequest, TokenResponse, UserResponse

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)


def resolve_role(email: str, requested_role: str) -> str:
    if email in config.ADMIN_EMAILS:
        return UserRole.ADMIN.value
    return requested_role


@router.post('/login', response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Passwordless development login: create the account on first use and issue a token."""
    if not config.DEMO_LOGIN_ENABLED:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Not Found')

    try:
        user = db.query(User).filter(User.email == data.email).first()
        if user is None:
            user = User(
                email=data.email,
                first_name=data.first_name,
                last_name=data.last_name,
                role=resolve_role(data.email, data.role),
                preferences=[],
            )
            db.add(user)
            db.commit()
            logger.info('Created %s account for %s', user.role, data.email)
        else:
            user.first_name = user.first_name or data.first_name
            user.last_name = user.last_name or data.last_name
            db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    return TokenResponse(access_token=jwt_handler.create_access_token(subject=data.email))


@router.get('/user', response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
