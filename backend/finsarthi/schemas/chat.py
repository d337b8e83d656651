from datetime import datetime

from pydantic import BaseModel, Field

from finsarthi.models.chat import ChatStatus
from finsarthi.schemas.user import CoachPublic


class ChatRequestCreate(BaseModel):
    coach_id: int


class ChatRequestPublic(BaseModel):
    id: int
    customer_id: int
    coach_id: int
    status: ChatStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerSummary(BaseModel):
    id: int
    full_name: str | None = None
    email: str | None = None


class IncomingChatRequest(BaseModel):
    request: ChatRequestPublic
    customer: CustomerSummary


class OutgoingChatRequests(BaseModel):
    requests: list[ChatRequestPublic]
    # Seconds until the client should poll again; null once nothing is pending.
    poll_after_seconds: int | None = None


class ChatPartner(CoachPublic):
    email: str | None = None


class ActiveChatSession(BaseModel):
    request: ChatRequestPublic
    partner: ChatPartner


class ChatMessageCreate(BaseModel):
    content: str = Field(min_length=1, max_length=4000)


class ChatMessagePublic(BaseModel):
    id: int
    chat_request_id: int
    sender_id: int
    content: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class MarkReadResponse(BaseModel):
    updated: int


class UnreadCount(BaseModel):
    count: int
