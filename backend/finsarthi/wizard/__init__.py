from finsarthi.wizard.flows import ONBOARDING_PROMPT_KEY, WizardFlow
from finsarthi.wizard.questions import LANGUAGE_CODES, Question, WizardValidationError
from finsarthi.wizard.tree import AdviceNode, AdviceTree, get_advice_tree

__all__ = [
    "ONBOARDING_PROMPT_KEY",
    "LANGUAGE_CODES",
    "AdviceNode",
    "AdviceTree",
    "Question",
    "WizardFlow",
    "WizardValidationError",
    "get_advice_tree",
]
