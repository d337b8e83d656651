"""Step-by-step answer collection for advice prompts.

The onboarding wizard is the ``onboarding`` prompt with a language step in
front (language, income, expenses, goals, literacy). Topic prompts picked
from the tree run their questions only. Each step is validated on its own
before the client advances; nothing checks answers against each other.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel

from finsarthi.wizard.questions import (
    Question,
    WizardValidationError,
    clean_language,
)
from finsarthi.wizard.tree import AdviceNode, AdviceTree, get_advice_tree

ONBOARDING_PROMPT_KEY = "onboarding"
LANGUAGE_STEP = "language"


class WizardStep(BaseModel):
    key: str
    question: Question | None = None


class StepResult(BaseModel):
    key: str
    value: Any
    next_step: int | None
    total_steps: int


class WizardFlow:
    def __init__(self, prompt: AdviceNode, *, include_language_step: bool = False):
        if not prompt.is_prompt:
            raise ValueError(f"{prompt.key!r} is a category, not a prompt")
        self.prompt = prompt
        self.steps: list[WizardStep] = []
        if include_language_step:
            self.steps.append(WizardStep(key=LANGUAGE_STEP))
        self.steps.extend(WizardStep(key=question.key, question=question) for question in prompt.questions)

    @classmethod
    def for_prompt(cls, key: str, tree: AdviceTree | None = None) -> WizardFlow:
        tree = tree or get_advice_tree()
        prompt = tree.find_prompt(key)
        if prompt is None:
            raise KeyError(key)
        return cls(prompt, include_language_step=key == ONBOARDING_PROMPT_KEY)

    @classmethod
    def onboarding(cls, tree: AdviceTree | None = None) -> WizardFlow:
        return cls.for_prompt(ONBOARDING_PROMPT_KEY, tree)

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def validate_step(self, index: int, raw: Any, language: str = "en") -> StepResult:
        if not 0 <= index < self.total_steps:
            raise WizardValidationError({"step": f"Step must be between 0 and {self.total_steps - 1}."})
        step = self.steps[index]
        if step.question is None:
            value = clean_language(raw)
        else:
            value = step.question.clean(raw, language)
        next_step = index + 1 if index + 1 < self.total_steps else None
        return StepResult(key=step.key, value=value, next_step=next_step, total_steps=self.total_steps)

    def collect(self, answers: Mapping[str, Any], language: str = "en") -> dict[str, Any]:
        """Validate a full submission and return the prompt's form data.

        Keys that do not belong to this prompt are dropped, as is the
        language, which is stored next to the form data rather than in it.
        """
        errors: dict[str, str] = {}
        form_data: dict[str, Any] = {}
        for question in self.prompt.questions:
            try:
                form_data[question.key] = question.clean(answers.get(question.key), language)
            except WizardValidationError as exc:
                errors.update(exc.errors)
        if errors:
            raise WizardValidationError(errors)
        return form_data
