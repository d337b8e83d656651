from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator


LanguageCode = Literal["en", "hi", "mr"]
LANGUAGE_CODES: tuple[str, ...] = ("en", "hi", "mr")

QuestionType = Literal["number", "text", "textarea", "select"]


class WizardValidationError(ValueError):
    """Raised when one or more wizard answers fail validation."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{key}: {message}" for key, message in errors.items()))


class Question(BaseModel):
    key: str
    type: QuestionType
    label: dict[str, str]
    placeholder: dict[str, str] | None = None
    options: list[str] = Field(default_factory=list)
    positive: bool = False
    min_length: int | None = None

    @model_validator(mode="after")
    def check_options(self) -> "Question":
        if self.type == "select" and not self.options:
            raise ValueError(f"Select question {self.key!r} needs options")
        return self

    def localized_label(self, language: str) -> str:
        return self.label.get(language) or self.label.get("en") or self.key

    def localized_placeholder(self, language: str) -> str:
        if not self.placeholder:
            return ""
        return self.placeholder.get(language) or self.placeholder.get("en", "")

    def clean(self, raw: Any, language: str = "en") -> int | float | str:
        """Validate one answer and return its normalized value."""
        label = self.localized_label(language)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            raise WizardValidationError({self.key: f"{label} is required."})

        if self.type == "number":
            return self._clean_number(raw, label)

        value = str(raw).strip()
        if self.type == "select" and value not in self.options:
            raise WizardValidationError(
                {self.key: f"{label} must be one of: {', '.join(self.options)}."}
            )
        if self.min_length and len(value) < self.min_length:
            raise WizardValidationError(
                {self.key: f"Please describe your {label.lower()} in more detail."}
            )
        return value

    def _clean_number(self, raw: Any, label: str) -> int | float:
        if isinstance(raw, bool):
            raise WizardValidationError({self.key: f"{label} must be a number."})
        try:
            number = float(str(raw).strip().replace(",", ""))
        except ValueError:
            raise WizardValidationError({self.key: f"{label} must be a number."}) from None
        if not math.isfinite(number):
            raise WizardValidationError({self.key: f"{label} must be a number."})
        if self.positive and number <= 0:
            raise WizardValidationError({self.key: f"{label} must be positive."})
        if number < 0:
            raise WizardValidationError({self.key: f"{label} cannot be negative."})
        return int(number) if number.is_integer() else number


def clean_language(raw: Any) -> str:
    value = str(raw or "").strip()
    if value not in LANGUAGE_CODES:
        raise WizardValidationError({"language": "Please select a language."})
    return value
