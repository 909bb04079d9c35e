"""User model definitions."""

from sqlalchemy import Column, Integer, String
from sweetshop.database import Base


class User(Base):
    """Represents a shop account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default="user")  # user/admin
