"""Book model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from bookdaan.database import Base
from bookdaan.models.enums import BookStatus


class Book(Base):
    """Represents a book listed by a donor."""
    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    author = Column(String, nullable=False)
    isbn = Column(String)
    category = Column(String, nullable=False)
    language = Column(String, nullable=False, default="English")
    condition = Column(String, nullable=False)
    cover_image_url = Column(Text)
    description = Column(Text)
    donor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(String, nullable=False, default=BookStatus.AVAILABLE.value)
    created_at = Column(DateTime, server_default=func.now())

    donor = relationship("User")
    requests = relationship("BookRequest", back_populates="book", cascade="all, delete-orphan")
