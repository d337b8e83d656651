from typing import Any, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from finsarthi.models.user import User, UserRole


def normalize_email(email: str | None) -> str | None:
    return email.strip().lower() if email else email


def create_user(db: Session, **fields: Any) -> User:
    fields["email"] = normalize_email(fields.get("email"))
    user = User(**fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def find_user_by_email_or_phone(db: Session, identifier: str) -> Optional[User]:
    if not identifier:
        return None
    return (
        db.query(User)
        .filter(
            or_(
                func.lower(User.email) == normalize_email(identifier),
                User.phone == identifier.strip(),
            )
        )
        .first()
    )


def contact_in_use(db: Session, *, email: str | None, phone: str | None) -> bool:
    clauses = []
    if email:
        clauses.append(func.lower(User.email) == normalize_email(email))
    if phone:
        clauses.append(User.phone == phone)
    if not clauses:
        return False
    return db.query(User.id).filter(or_(*clauses)).first() is not None


def get_available_coaches(db: Session) -> list[User]:
    coaches = (
        db.query(User)
        .filter(User.role == UserRole.COACH, User.is_available.is_(True))
        .all()
    )
    return sorted(coaches, key=lambda coach: (coach.full_name or "").casefold())


def update_user_availability(db: Session, user_id: int, is_available: bool) -> Optional[User]:
    user = get_user_by_id(db, user_id)
    if user is None:
        return None
    user.is_available = is_available
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
