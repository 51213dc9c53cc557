from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookdaan.auth.dependencies import get_current_user
from bookdaan.database import database_unavailable, get_db
from bookdaan.models.user import User
from bookdaan.schemas import UpdateProfileRequest, UserResponse

router = APIRouter(tags=['users'])


@router.patch('/profile', response_model=UserResponse)
def update_profile(
    data: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        for field_name, value in data.model_dump(exclude_unset=True).items():
            if field_name == 'preferences' and value is None:
                value = []
            setattr(current_user, field_name, value)

        db.commit()
        db.refresh(current_user)
        return current_user
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
