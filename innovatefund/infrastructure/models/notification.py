"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from innovatefund.infrastructure.database import Base, new_id
from innovatefund.utils import now_utc_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_created", "recipient_id", "created_at"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    recipient_id = Column(
        String(32), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id = Column(String(32), ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    kind = Column(String(40), nullable=False)
    title = Column(String(100), nullable=False)
    body = Column(String(300), nullable=False)
    related_item_type = Column(String(20), nullable=True)
    related_item_id = Column(String(64), nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime, nullable=True)
    action_url = Column(String(500), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=now_utc_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_utc_naive_datetime)

    sender = relationship("UserModel", foreign_keys=[sender_id], lazy="joined")


__all__ = ["NotificationModel"]
