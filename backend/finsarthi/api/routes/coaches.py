from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from finsarthi.db.session import get_db
from finsarthi.schemas.user import CoachPublic
from finsarthi.services import users as user_service

router = APIRouter()


@router.get("/", response_model=list[CoachPublic])
def list_available_coaches(db: Session = Depends(get_db)) -> list[CoachPublic]:
    return user_service.get_available_coaches(db)
