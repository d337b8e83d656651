from typing import Literal

from pydantic import BaseModel, Field

ConversationLanguage = Literal["English", "Hindi", "Marathi"]


class CoachTurn(BaseModel):
    role: Literal["user", "model"]
    content: str


class CoachQuery(BaseModel):
    query: str = Field(min_length=1)
    language: ConversationLanguage = "English"
    history: list[CoachTurn] = Field(default_factory=list)


class CoachResponse(BaseModel):
    response: str


class SummarizeRequest(BaseModel):
    article_content: str = Field(min_length=1)
    language: Literal["English", "Hindi", "Marathi", "German"] = "English"


class SummarizeResponse(BaseModel):
    summary: str


class TranslateTermRequest(BaseModel):
    term: str = Field(min_length=1)
    language: str = "English"
    user_literacy_level: Literal["beginner", "intermediate", "advanced"] = "beginner"


class TranslateTermResponse(BaseModel):
    simplified_explanation: str


class SpeechRequest(BaseModel):
    text: str = Field(min_length=1, max_length=5000)


class SpeechResponse(BaseModel):
    audio: str = Field(..., description="Base64 encoded WAV data URI")


class ProductPublic(BaseModel):
    name: str
    description: str
