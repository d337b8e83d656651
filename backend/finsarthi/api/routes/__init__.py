from fastapi import APIRouter

from finsarthi.api.routes import (
    advice,
    ai,
    auth,
    chat,
    coaches,
    users,
)


api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(coaches.router, prefix="/coaches", tags=["coaches"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
api_router.include_router(advice.router, prefix="/advice", tags=["advice"])
api_router.include_router(ai.router, prefix="/ai", tags=["ai"])
