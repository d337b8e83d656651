from datetime import datetime
from enum import Enum as PyEnum
from typing import Any

from sqlalchemy import JSON, DateTime, Enum as SQLEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finsarthi.db.base import Base


class AdviceLanguage(str, PyEnum):
    EN = "en"
    HI = "hi"
    MR = "mr"


def _number_field(form_data: dict[str, Any] | None, key: str) -> float:
    try:
        return float((form_data or {}).get(key) or 0)
    except (TypeError, ValueError):
        return 0.0


class AdviceSession(Base):
    __tablename__ = "advice_sessions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    # Null until an anonymous onboarding session is claimed by a new account.
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    prompt_key: Mapped[str] = mapped_column(String(64), nullable=False)
    form_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    language: Mapped[AdviceLanguage] = mapped_column(
        SQLEnum(
            AdviceLanguage,
            name="language",
            values_callable=lambda enum: [item.value for item in enum],
        ),
        nullable=False,
    )
    generated_advice: Mapped[str] = mapped_column(Text, nullable=False)
    # Proves ownership of an anonymous session; cleared once it is claimed.
    claim_token: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    user = relationship("User", back_populates="advice_sessions")

    @property
    def income(self) -> float:
        return _number_field(self.form_data, "income")

    @property
    def expenses(self) -> float:
        return _number_field(self.form_data, "expenses")
