"""Book request model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from bookdaan.database import Base
from bookdaan.models.enums import RequestStatus


class BookRequest(Base):
    """Represents a recipient's request for one book."""
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False)
    recipient_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    message = Column(Text)
    status = Column(String, nullable=False, default=RequestStatus.PENDING.value)
    pickup_location = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    book = relationship("Book", back_populates="requests")
    feedback = relationship("Feedback", back_populates="request", cascade="all, delete-orphan")
