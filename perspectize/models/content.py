"""Content database model"""

from sqlalchemy import Column, Integer, String, Text, JSON, DateTime, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from perspectize.core.database import Base

CONTENT_TYPE_YOUTUBE = "youtube"

JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class Content(Base):
    """Content: a catalogued piece of media with normalized metadata"""
    __tablename__ = "content"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    url = Column(Text, nullable=True, unique=True)
    content_type = Column(String(50), nullable=False, index=True)
    length = Column(Integer, nullable=True)
    length_units = Column(String(50), nullable=True)
    response = Column(JSONDocument, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    perspectives = relationship("Perspective", back_populates="content", passive_deletes=True)

    __table_args__ = (
        Index("idx_content_created", "created_at"),
    )

    def __repr__(self):
        return f"<Content {self.id} {self.name!r}>"
