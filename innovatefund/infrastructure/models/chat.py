"""SQLAlchemy models for chat threads, messages and read receipts."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from innovatefund.infrastructure.database import Base, new_id
from innovatefund.utils import now_utc_naive_datetime


class ChatThreadModel(Base):
    """Database representation of a conversation."""

    __tablename__ = "chat_thread"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), nullable=True)
    is_group = Column(Boolean, nullable=False, default=False)
    last_message_id = Column(String(32), nullable=True)
    last_activity = Column(DateTime, nullable=False, default=now_utc_naive_datetime)
    created_at = Column(DateTime, nullable=False, default=now_utc_naive_datetime)

    participants = relationship(
        "ChatParticipantModel",
        order_by="ChatParticipantModel.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ChatParticipantModel(Base):
    __tablename__ = "chat_thread_participant"

    thread_id = Column(
        String(32), ForeignKey("chat_thread.id", ondelete="CASCADE"), primary_key=True
    )
    user_id = Column(
        String(32), ForeignKey("user.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    position = Column(Integer, nullable=False, default=0)

    user = relationship("UserModel", lazy="joined")


class ChatMessageModel(Base):
    """Database representation of a chat message."""

    __tablename__ = "chat_message"

    id = Column(String(32), primary_key=True, default=new_id)
    thread_id = Column(
        String(32),
        ForeignKey("chat_thread.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = Column(String(32), ForeignKey("user.id"), nullable=False)
    content = Column(Text, nullable=False)
    kind = Column(String(10), nullable=False, default="text")
    created_at = Column(DateTime, nullable=False, default=now_utc_naive_datetime)

    sender = relationship("UserModel", lazy="joined")
    receipts = relationship(
        "ChatReadReceiptModel",
        order_by="ChatReadReceiptModel.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ChatReadReceiptModel(Base):
    __tablename__ = "chat_read_receipt"
    __table_args__ = (UniqueConstraint("message_id", "reader_id", name="uq_receipt_reader"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    message_id = Column(
        String(32),
        ForeignKey("chat_message.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reader_id = Column(String(32), ForeignKey("user.id"), nullable=False)
    read_at = Column(DateTime, nullable=False, default=now_utc_naive_datetime)


__all__ = [
    "ChatMessageModel",
    "ChatParticipantModel",
    "ChatReadReceiptModel",
    "ChatThreadModel",
]
