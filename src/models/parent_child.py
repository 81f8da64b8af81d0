from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from .base import Base, utcnow


class ParentChildModel(Base):
    __tablename__ = "parent_children"
    __table_args__ = (
        UniqueConstraint("parent_id", "child_id", name="uq_parent_children_parent_child"),
    )

    id = Column(Integer, primary_key=True, index=True)
    parent_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    child_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
