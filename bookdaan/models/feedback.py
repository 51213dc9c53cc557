"""Feedback model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.orm import relationship

from bookdaan.database import Base


class Feedback(Base):
    """A rating one participant of a request leaves for the other."""
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True)
    from_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    to_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    request_id = Column(Integer, ForeignKey("requests.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    request = relationship("BookRequest", back_populates="feedback")
