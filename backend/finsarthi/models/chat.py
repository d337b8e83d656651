from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Text,
    text,
)
from sqlalchemy.orm import relationship

from finsarthi.db.base import Base


class ChatStatus(str, PyEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CLOSED = "closed"


ACTIVE_STATUSES = (ChatStatus.PENDING, ChatStatus.ACCEPTED)

_ACTIVE_PAIR_PREDICATE = text("status IN ('pending', 'accepted')")


class ChatRequest(Base):
    __tablename__ = "chat_requests"
    __table_args__ = (
        # At most one live request per (customer, coach) pair.
        Index(
            "uq_chat_requests_active_pair",
            "customer_id",
            "coach_id",
            unique=True,
            postgresql_where=_ACTIVE_PAIR_PREDICATE,
            sqlite_where=_ACTIVE_PAIR_PREDICATE,
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    coach_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        SQLEnum(ChatStatus, values_callable=lambda enum: [item.value for item in enum]),
        nullable=False,
        default=ChatStatus.PENDING,
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    customer = relationship("User", foreign_keys=[customer_id])
    coach = relationship("User", foreign_keys=[coach_id])
    messages = relationship(
        "ChatMessage", back_populates="chat_request", order_by="ChatMessage.created_at"
    )

    def involves(self, user_id: int) -> bool:
        return user_id in (self.customer_id, self.coach_id)

    def partner_id(self, user_id: int) -> int:
        return self.customer_id if self.coach_id == user_id else self.coach_id


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True)
    chat_request_id = Column(
        Integer, ForeignKey("chat_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    chat_request = relationship("ChatRequest", back_populates="messages")
