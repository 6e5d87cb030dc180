"""Perspective database model"""

from sqlalchemy import (
    Column, Integer, String, Text, JSON, DateTime, ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from perspectize.core.database import Base


class Privacy(str, enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class ReviewStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Perspective(Base):
    """Perspectives table: a user's rated claim about a content item"""
    __tablename__ = "perspectives"

    id = Column(Integer, primary_key=True, autoincrement=True)
    claim = Column(String(255), nullable=False)
    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )
    content_id = Column(
        Integer,
        ForeignKey("content.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    like = Column(Text, nullable=True)
    quality = Column(Integer, nullable=True)
    agreement = Column(Integer, nullable=True)
    importance = Column(Integer, nullable=True)
    confidence = Column(Integer, nullable=True)
    privacy = Column(String(20), nullable=False, default=Privacy.PUBLIC.value)
    parts = Column(JSON, nullable=True)
    category = Column(Text, nullable=True)
    labels = Column(JSON, nullable=True)
    description = Column(Text, nullable=True)
    review_status = Column(String(20), nullable=True)
    categorized_ratings = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    user = relationship("User", back_populates="perspectives")
    content = relationship("Content", back_populates="perspectives")

    __table_args__ = (
        UniqueConstraint("claim", "user_id", name="uq_perspectives_claim_user"),
        Index("idx_perspectives_created", "created_at"),
    )

    def __repr__(self):
        return f"<Perspective {self.id} user={self.user_id}>"
