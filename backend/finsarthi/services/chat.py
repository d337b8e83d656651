"""Coach matching: chat request lifecycle, messages and unread counts.

A customer opens a request to a coach, the coach accepts or declines it, and
once accepted either side may exchange messages or close the chat. The
allowed moves live in ``TRANSITIONS``; anything else is rejected.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finsarthi.models.chat import ACTIVE_STATUSES, ChatMessage, ChatRequest, ChatStatus
from finsarthi.models.user import User

logger = logging.getLogger(__name__)

COACH = "coach"
PARTICIPANT = "participant"

# (current, target) -> who may perform the move
TRANSITIONS: dict[tuple[ChatStatus, ChatStatus], str] = {
    (ChatStatus.PENDING, ChatStatus.ACCEPTED): COACH,
    (ChatStatus.PENDING, ChatStatus.DECLINED): COACH,
    (ChatStatus.ACCEPTED, ChatStatus.CLOSED): PARTICIPANT,
}


class ChatError(ValueError):
    """Base class for rejected chat operations."""


class InvalidTransitionError(ChatError):
    def __init__(self, current: ChatStatus, target: ChatStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move a {current.value} chat request to {target.value}")


class ChatPermissionError(ChatError):
    pass


class ChatStateError(ChatError):
    pass


def _active_request_for_pair(
    db: Session, customer_id: int, coach_id: int
) -> Optional[ChatRequest]:
    return (
        db.query(ChatRequest)
        .filter(
            ChatRequest.customer_id == customer_id,
            ChatRequest.coach_id == coach_id,
            ChatRequest.status.in_(ACTIVE_STATUSES),
        )
        .first()
    )


def create_chat_request(db: Session, customer_id: int, coach_id: int) -> ChatRequest:
    existing = _active_request_for_pair(db, customer_id, coach_id)
    if existing:
        logger.debug(
            "Active chat request %s already exists for customer %s and coach %s",
            existing.id,
            customer_id,
            coach_id,
        )
        return existing

    request = ChatRequest(
        customer_id=customer_id,
        coach_id=coach_id,
        status=ChatStatus.PENDING,
    )
    db.add(request)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent insert for the same pair.
        db.rollback()
        existing = _active_request_for_pair(db, customer_id, coach_id)
        if existing is None:
            raise
        return existing
    db.refresh(request)
    return request


def get_chat_request(db: Session, request_id: int) -> Optional[ChatRequest]:
    return db.query(ChatRequest).filter(ChatRequest.id == request_id).first()


def get_chat_requests_for_coach(db: Session, coach_id: int) -> list[dict[str, Any]]:
    # Inner join: requests whose customer row is gone are dropped.
    rows = (
        db.query(ChatRequest, User)
        .join(User, ChatRequest.customer_id == User.id)
        .filter(ChatRequest.coach_id == coach_id)
        .order_by(ChatRequest.created_at.desc(), ChatRequest.id.desc())
        .all()
    )
    return [
        {
            "request": request,
            "customer": {
                "id": customer.id,
                "full_name": customer.full_name,
                "email": customer.email,
            },
        }
        for request, customer in rows
    ]


def get_chat_requests_for_customer(db: Session, customer_id: int) -> list[ChatRequest]:
    return (
        db.query(ChatRequest)
        .filter(ChatRequest.customer_id == customer_id)
        .order_by(ChatRequest.created_at.desc(), ChatRequest.id.desc())
        .all()
    )


def update_chat_request_status(
    db: Session,
    request_id: int,
    status: ChatStatus,
    actor_id: int | None = None,
) -> Optional[ChatRequest]:
    """Move a request to ``status``.

    Returns ``None`` when the request does not exist. Raises
    ``InvalidTransitionError`` for moves outside ``TRANSITIONS`` and
    ``ChatPermissionError`` when ``actor_id`` is given but is not allowed to
    make the move.
    """
    request = get_chat_request(db, request_id)
    if request is None:
        return None

    current = ChatStatus(request.status)
    target = ChatStatus(status)
    allowed_actor = TRANSITIONS.get((current, target))
    if allowed_actor is None:
        raise InvalidTransitionError(current, target)

    if actor_id is not None:
        if allowed_actor == COACH and actor_id != request.coach_id:
            raise ChatPermissionError("Only the requested coach can respond to this request")
        if allowed_actor == PARTICIPANT and not request.involves(actor_id):
            raise ChatPermissionError("Only chat participants can close this chat")

    request.status = target
    request.updated_at = datetime.utcnow()
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info("Chat request %s moved from %s to %s", request.id, current.value, target.value)
    return request


def get_active_chat_session(db: Session, user_id: int) -> Optional[dict[str, Any]]:
    request = (
        db.query(ChatRequest)
        .filter(
            or_(ChatRequest.customer_id == user_id, ChatRequest.coach_id == user_id),
            ChatRequest.status == ChatStatus.ACCEPTED,
        )
        .order_by(ChatRequest.updated_at.desc(), ChatRequest.id.desc())
        .first()
    )
    if request is None:
        return None

    partner = db.query(User).filter(User.id == request.partner_id(user_id)).first()
    if partner is None:
        return None
    return {"request": request, "partner": partner}


def send_message(
    db: Session, chat_request_id: int, sender_id: int, content: str
) -> Optional[ChatMessage]:
    request = get_chat_request(db, chat_request_id)
    if request is None:
        return None
    if not request.involves(sender_id):
        raise ChatPermissionError("Only chat participants can send messages")
    if request.status != ChatStatus.ACCEPTED:
        raise ChatStateError("Messages can only be sent in an accepted chat")

    message = ChatMessage(
        chat_request_id=chat_request_id,
        sender_id=sender_id,
        content=content,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def get_messages_for_chat(db: Session, chat_request_id: int) -> list[ChatMessage]:
    return (
        db.query(ChatMessage)
        .filter(ChatMessage.chat_request_id == chat_request_id)
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .all()
    )


def mark_messages_as_read(db: Session, chat_request_id: int, reader_id: int) -> int:
    """Mark the other party's messages in a chat as read; returns how many changed."""
    updated = (
        db.query(ChatMessage)
        .filter(
            ChatMessage.chat_request_id == chat_request_id,
            ChatMessage.sender_id != reader_id,
            ChatMessage.is_read.is_(False),
        )
        .update({"is_read": True}, synchronize_session=False)
    )
    db.commit()
    return updated


def get_unread_message_count_for_user(db: Session, user_id: int) -> int:
    count = (
        db.query(func.count(ChatMessage.id))
        .join(ChatRequest, ChatMessage.chat_request_id == ChatRequest.id)
        .filter(
            ChatRequest.status == ChatStatus.ACCEPTED,
            or_(ChatRequest.customer_id == user_id, ChatRequest.coach_id == user_id),
            ChatMessage.sender_id != user_id,
            ChatMessage.is_read.is_(False),
        )
        .scalar()
    )
    return count or 0
