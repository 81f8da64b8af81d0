from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from .base import Base, utcnow


class AssignmentModel(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    type = Column(String, nullable=False)  # 'quiz', 'written' or 'upload'
    standard = Column(String, index=True, nullable=False)
    division = Column(String, index=True, nullable=False)
    content = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
