"""
Master Tables: AppUser
"""
from sqlalchemy import Column, String, DateTime, func
from app.core import Base
from .base import UUIDMixin
import enum

class UserRole(str, enum.Enum):
    ADMIN = "admin"
    STAFF = "staff"
    MANAGER = "manager"

class AppUser(Base, UUIDMixin):
    """Shop employee (order taker, measurer)"""
    __tablename__ = "users"

    name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True)
    role = Column(String(20), default=UserRole.STAFF.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
