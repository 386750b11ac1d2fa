"""
User model for authentication and authorization.

Passwords are only ever stored as bcrypt hashes.
"""

from sqlalchemy import Boolean, Column, String, Text, false
from sqlalchemy.orm import relationship
from app.core.database import Base


class User(Base):
    """
    User account, keyed by an immutable username.

    is_admin grants access to admin-only endpoints and to every user's
    own-account endpoints.
    """
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)

    # Authentication credentials
    password = Column(Text, nullable=False)

    # User profile
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)

    # Admin role for protected endpoints
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    # Relationships
    applications = relationship("Application", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
