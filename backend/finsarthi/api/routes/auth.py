import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from finsarthi.api import deps
from finsarthi.core.config import get_settings
from finsarthi.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    generate_otp,
    get_password_hash,
    otp_expiry,
    verify_password,
)
from finsarthi.db.session import get_db
from finsarthi.models.user import User, UserRole
from finsarthi.schemas import auth as auth_schema
from finsarthi.schemas.user import UserPublic
from finsarthi.services import advice as advice_service
from finsarthi.services import users as user_service

logger = logging.getLogger(__name__)

router = APIRouter()

OTP_SENT_MESSAGE = "If that account exists, we've sent a one-time code."
MAX_OTP_ATTEMPTS = 5


def _clear_otp(user: User) -> None:
    user.otp_hash = None
    user.otp_expires_at = None
    user.otp_attempts = 0


def _token_pair(user: User) -> auth_schema.TokenPair:
    return auth_schema.TokenPair(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id),
    )


@router.post("/signup", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def signup_coach(
    payload: auth_schema.CoachSignupRequest,
    db: Session = Depends(get_db),
) -> UserPublic:
    if user_service.contact_in_use(db, email=payload.email, phone=None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )
    return user_service.create_user(
        db,
        full_name=payload.full_name,
        email=payload.email,
        hashed_password=get_password_hash(payload.password),
        role=UserRole.COACH,
        is_available=False,
    )


@router.post("/register", response_model=auth_schema.TokenPair, status_code=status.HTTP_201_CREATED)
def register_customer(
    payload: auth_schema.CustomerRegisterRequest,
    db: Session = Depends(get_db),
) -> auth_schema.TokenPair:
    if user_service.contact_in_use(db, email=payload.email, phone=payload.phone):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email or phone already registered",
        )
    data = payload.dict(exclude={"advice_session_id", "advice_session_token"})
    user = user_service.create_user(db, role=UserRole.CUSTOMER, **data)
    if payload.advice_session_id is not None:
        try:
            claimed = advice_service.associate_session_with_user(
                db, payload.advice_session_id, user.id, payload.advice_session_token
            )
        except advice_service.SessionClaimError:
            claimed = None
        if claimed is None:
            logger.warning(
                "Advice session %s could not be claimed by new user %s",
                payload.advice_session_id,
                user.id,
            )
    return _token_pair(user)


@router.post("/login", response_model=auth_schema.TokenPair)
def login_user(
    payload: auth_schema.LoginRequest,
    db: Session = Depends(get_db),
) -> auth_schema.TokenPair:
    user = user_service.find_user_by_email_or_phone(db, payload.identifier)
    if (
        not user
        or not user.hashed_password
        or not verify_password(payload.password, user.hashed_password)
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect credentials",
        )
    return _token_pair(user)


@router.post("/otp/request")
def request_otp(
    payload: auth_schema.OtpRequest,
    db: Session = Depends(get_db),
) -> dict[str, str]:
    """Issue a one-time login code for a customer.

    The code is only logged in development; delivery by SMS or email is left
    to the deployment.
    """
    user = user_service.find_user_by_email_or_phone(db, payload.identifier)
    if not user or user.role != UserRole.CUSTOMER:
        return {"message": OTP_SENT_MESSAGE}

    code = generate_otp()
    user.otp_hash = get_password_hash(code)
    user.otp_expires_at = otp_expiry()
    user.otp_attempts = 0
    db.add(user)
    db.commit()
    if get_settings().environment == "development":
        logger.info("One-time code for %s: %s", payload.identifier, code)
    return {"message": OTP_SENT_MESSAGE}


@router.post("/otp/verify", response_model=auth_schema.TokenPair)
def verify_otp(
    payload: auth_schema.OtpVerifyRequest,
    db: Session = Depends(get_db),
) -> auth_schema.TokenPair:
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired code",
    )
    user = user_service.find_user_by_email_or_phone(db, payload.identifier)
    if (
        not user
        or not user.otp_hash
        or not user.otp_expires_at
        or user.otp_expires_at < datetime.utcnow()
    ):
        raise invalid

    if not verify_password(payload.code, user.otp_hash):
        user.otp_attempts = (user.otp_attempts or 0) + 1
        if user.otp_attempts >= MAX_OTP_ATTEMPTS:
            logger.warning("Too many wrong one-time codes for user %s; code revoked", user.id)
            _clear_otp(user)
        db.add(user)
        db.commit()
        raise invalid

    _clear_otp(user)
    db.add(user)
    db.commit()
    return _token_pair(user)


@router.post("/refresh", response_model=auth_schema.TokenPair)
def refresh_token(
    payload: auth_schema.RefreshRequest,
    db: Session = Depends(get_db),
) -> auth_schema.TokenPair:
    try:
        data = decode_token(payload.refresh_token)
        if data.get("type") != "refresh":
            raise ValueError("Invalid refresh token")
        user_id = int(data["sub"])
    except (ValueError, KeyError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        ) from exc
    user = user_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return _token_pair(user)


@router.get("/me", response_model=UserPublic)
def read_current_user(
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> UserPublic:
    return current_user
