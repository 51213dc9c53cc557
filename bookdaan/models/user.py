"""User model definitions."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, func

from bookdaan.database import Base
from bookdaan.models.enums import UserRole


class User(Base):
    """Represents a donor, recipient or admin account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String)
    last_name = Column(String)
    profile_image_url = Column(String)
    role = Column(String, nullable=False, default=UserRole.RECIPIENT.value)  # donor/recipient/admin
    phone = Column(String)
    address = Column(Text)
    preferences = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
