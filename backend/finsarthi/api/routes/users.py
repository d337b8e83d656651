from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from finsarthi.api import deps
from finsarthi.db.session import get_db
from finsarthi.models.user import User
from finsarthi.schemas.user import AvailabilityUpdate, UserPublic, UserUpdate
from finsarthi.services import users as user_service

router = APIRouter()


@router.get("/me", response_model=UserPublic)
def get_profile(current_user: User = Depends(deps.get_current_user)) -> UserPublic:
    return current_user


@router.patch("/me", response_model=UserPublic)
def update_profile(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> UserPublic:
    data = payload.dict(exclude_unset=True)
    phone = data.get("phone", current_user.phone)
    if not phone and not current_user.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account needs an email or a phone number",
        )
    if phone and phone != current_user.phone and user_service.contact_in_use(db, email=None, phone=phone):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Phone already registered"
        )
    for key, value in data.items():
        setattr(current_user, key, value)
    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return current_user


@router.put("/me/availability", response_model=UserPublic)
def set_availability(
    payload: AvailabilityUpdate,
    db: Session = Depends(get_db),
    current_coach: User = Depends(deps.get_current_coach),
) -> UserPublic:
    return user_service.update_user_availability(db, current_coach.id, payload.is_available)
