from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from finsarthi.models.advice_session import AdviceLanguage


class AdviceTopic(BaseModel):
    key: str
    title: str
    is_prompt: bool


class QuestionPublic(BaseModel):
    key: str
    type: str
    label: str
    placeholder: str = ""
    options: list[str] = Field(default_factory=list)


class PromptDetail(BaseModel):
    key: str
    title: str
    questions: list[QuestionPublic]
    total_steps: int


class StepValidationRequest(BaseModel):
    prompt_key: str
    step: int = Field(ge=0)
    value: Any = None
    language: Literal["en", "hi", "mr"] = "en"


class StepValidationResponse(BaseModel):
    key: str
    value: Any
    next_step: int | None
    total_steps: int


class OnboardingRequest(BaseModel):
    language: str = "en"
    income: float | str | None = None
    expenses: float | str | None = None
    goals: str | None = None
    literacy: str | None = None


class GenerateAdviceRequest(BaseModel):
    prompt_key: str
    form_data: dict[str, Any]
    language: Literal["en", "hi", "mr"] = "en"


class AdviceSessionClaim(BaseModel):
    claim_token: str | None = None


class AdviceSessionPublic(BaseModel):
    id: int
    user_id: int | None = None
    prompt_key: str
    form_data: dict[str, Any]
    language: AdviceLanguage
    generated_advice: str
    income: float
    expenses: float
    created_at: datetime
    # Only set on anonymous sessions; pass it back to claim the session.
    claim_token: str | None = None

    class Config:
        from_attributes = True
