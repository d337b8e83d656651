from pydantic import BaseModel, EmailStr, Field, model_validator


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    identifier: str = Field(min_length=1, description="Email address or phone number")
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class CoachSignupRequest(BaseModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)


class CustomerRegisterRequest(BaseModel):
    """Account created at the end of onboarding."""
    full_name: str = Field(min_length=1)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=6, max_length=32)
    age: int | None = Field(default=None, ge=13, le=120)
    city: str | None = None
    country: str | None = None
    gender: str | None = None
    advice_session_id: int | None = None
    # The claim_token returned with an anonymous onboarding session.
    advice_session_token: str | None = None

    @model_validator(mode="after")
    def require_contact(self) -> "CustomerRegisterRequest":
        if not self.email and not self.phone:
            raise ValueError("Either email or phone is required")
        return self


class OtpRequest(BaseModel):
    identifier: str = Field(min_length=1)


class OtpVerifyRequest(BaseModel):
    identifier: str = Field(min_length=1)
    code: str = Field(min_length=4, max_length=8)
