"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, String, func

from innovatefund.infrastructure.database import Base, new_id


class UserModel(Base):
    """Database representation of a marketplace principal."""

    __tablename__ = "user"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    user_type = Column(String(20), nullable=False)
    profile_picture = Column(String(500), nullable=False, default="")
    push_token = Column(String(512), nullable=True)
    notifications_enabled = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_active = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())


__all__ = ["UserModel"]
