from finsarthi.models.user import User, UserRole
from finsarthi.models.advice_session import AdviceLanguage, AdviceSession
from finsarthi.models.chat import ChatMessage, ChatRequest, ChatStatus

__all__ = [
    "User",
    "UserRole",
    "AdviceLanguage",
    "AdviceSession",
    "ChatMessage",
    "ChatRequest",
    "ChatStatus",
]
