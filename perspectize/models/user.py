"""User database model"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from perspectize.core.database import Base

# Owns perspectives reassigned away from deleted users
DELETED_USER_USERNAME = "[deleted]"
# Owns rows created before user tracking existed
SYSTEM_USER_USERNAME = "[system]"

SENTINEL_USERNAMES = (DELETED_USER_USERNAME, SYSTEM_USER_USERNAME)


class User(Base):
    """Users table: people who submit perspectives"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    perspectives = relationship("Perspective", back_populates="user", passive_deletes="all")

    @property
    def is_sentinel(self) -> bool:
        return self.username in SENTINEL_USERNAMES

    def __repr__(self):
        return f"<User {self.id} {self.username}>"
