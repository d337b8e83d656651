import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from finsarthi.api import deps
from finsarthi.db.session import get_db
from finsarthi.models.chat import ChatRequest, ChatStatus
from finsarthi.models.user import User, UserRole
from finsarthi.schemas.chat import (
    ActiveChatSession,
    ChatMessageCreate,
    ChatMessagePublic,
    ChatRequestCreate,
    ChatRequestPublic,
    IncomingChatRequest,
    MarkReadResponse,
    OutgoingChatRequests,
    UnreadCount,
)
from finsarthi.services import chat as chat_service
from finsarthi.services import users as user_service
from finsarthi.services.polling import next_poll_delay

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_request_or_404(db: Session, request_id: int, user: User) -> ChatRequest:
    request = chat_service.get_chat_request(db, request_id)
    if not request or not request.involves(user.id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Chat request not found"
        )
    return request


def _transition(db: Session, request_id: int, target: ChatStatus, user: User) -> ChatRequest:
    _get_request_or_404(db, request_id, user)
    try:
        return chat_service.update_chat_request_status(db, request_id, target, actor_id=user.id)
    except chat_service.ChatPermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except chat_service.InvalidTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post("/requests", response_model=ChatRequestPublic)
def create_request(
    payload: ChatRequestCreate,
    db: Session = Depends(get_db),
    current_customer: User = Depends(deps.get_current_customer),
) -> ChatRequestPublic:
    coach = user_service.get_user_by_id(db, payload.coach_id)
    if not coach or coach.role != UserRole.COACH:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Coach not found")
    return chat_service.create_chat_request(db, current_customer.id, coach.id)


@router.get("/requests/incoming", response_model=list[IncomingChatRequest])
def list_incoming_requests(
    db: Session = Depends(get_db),
    current_coach: User = Depends(deps.get_current_coach),
) -> list[IncomingChatRequest]:
    return chat_service.get_chat_requests_for_coach(db, current_coach.id)


@router.get("/requests/outgoing", response_model=OutgoingChatRequests)
def list_outgoing_requests(
    db: Session = Depends(get_db),
    current_customer: User = Depends(deps.get_current_customer),
) -> OutgoingChatRequests:
    requests = chat_service.get_chat_requests_for_customer(db, current_customer.id)
    return OutgoingChatRequests(
        requests=[ChatRequestPublic.model_validate(request) for request in requests],
        poll_after_seconds=next_poll_delay(requests),
    )


@router.post("/requests/{request_id}/accept", response_model=ChatRequestPublic)
def accept_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> ChatRequestPublic:
    return _transition(db, request_id, ChatStatus.ACCEPTED, current_user)


@router.post("/requests/{request_id}/decline", response_model=ChatRequestPublic)
def decline_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> ChatRequestPublic:
    return _transition(db, request_id, ChatStatus.DECLINED, current_user)


@router.post("/requests/{request_id}/close", response_model=ChatRequestPublic)
def close_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> ChatRequestPublic:
    return _transition(db, request_id, ChatStatus.CLOSED, current_user)


@router.get("/active", response_model=ActiveChatSession | None)
def get_active_session(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> ActiveChatSession | None:
    return chat_service.get_active_chat_session(db, current_user.id)


@router.get("/requests/{request_id}/messages", response_model=list[ChatMessagePublic])
def list_messages(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> list[ChatMessagePublic]:
    _get_request_or_404(db, request_id, current_user)
    return chat_service.get_messages_for_chat(db, request_id)


@router.post(
    "/requests/{request_id}/messages",
    response_model=ChatMessagePublic,
    status_code=status.HTTP_201_CREATED,
)
def post_message(
    request_id: int,
    payload: ChatMessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> ChatMessagePublic:
    _get_request_or_404(db, request_id, current_user)
    try:
        return chat_service.send_message(db, request_id, current_user.id, payload.content)
    except chat_service.ChatStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post("/requests/{request_id}/read", response_model=MarkReadResponse)
def mark_read(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> MarkReadResponse:
    _get_request_or_404(db, request_id, current_user)
    updated = chat_service.mark_messages_as_read(db, request_id, current_user.id)
    return MarkReadResponse(updated=updated)


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> UnreadCount:
    return UnreadCount(count=chat_service.get_unread_message_count_for_user(db, current_user.id))
