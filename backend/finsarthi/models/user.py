from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Column, DateTime, Enum as SQLEnum, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from finsarthi.db.base import Base


class UserRole(str, PyEnum):
    CUSTOMER = "customer"
    COACH = "coach"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("phone", name="uq_users_phone"),
    )

    id = Column(Integer, primary_key=True, index=True)
    role = Column(
        SQLEnum(UserRole, values_callable=lambda enum: [item.value for item in enum]),
        nullable=False,
        default=UserRole.CUSTOMER,
    )
    # Only meaningful for coaches; flipped by the coach from the dashboard.
    is_available = Column(Boolean, nullable=False, default=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(32), nullable=True)
    full_name = Column(String(255), nullable=True)
    hashed_password = Column(String(255), nullable=True)
    age = Column(Integer, nullable=True)
    city = Column(String(128), nullable=True)
    country = Column(String(128), nullable=True)
    gender = Column(String(32), nullable=True)
    otp_hash = Column(String(255), nullable=True)
    otp_expires_at = Column(DateTime, nullable=True)
    otp_attempts = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    advice_sessions = relationship("AdviceSession", back_populates="user")

    @property
    def is_coach(self) -> bool:
        return self.role == UserRole.COACH
