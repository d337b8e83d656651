from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from finsarthi.wizard.tree import AdviceNode


class SpeechUnavailableError(RuntimeError):
    """The provider could not produce audio for the request."""


class GatewayAdapter(ABC):
    """Interface for generative AI providers.

    Text operations never raise for provider failures; they log and return an
    apology string instead.
    """

    @abstractmethod
    def coach_reply(
        self, query: str, language: str, history: list[Mapping[str, str]] | None = None
    ) -> str:
        """Answer one turn of the financial coaching conversation."""

    @abstractmethod
    def generate_advice(
        self, prompt: AdviceNode, form_data: Mapping[str, Any], language: str
    ) -> str:
        """Produce personalized advice for a completed wizard."""

    @abstractmethod
    def summarize_news(self, article: str, language: str) -> str:
        """Summarize a financial news article."""

    @abstractmethod
    def explain_term(self, term: str, language: str, literacy_level: str) -> str:
        """Explain a financial term in plain language."""

    @abstractmethod
    def synthesize_speech(self, text: str) -> str:
        """Return a ``data:audio/wav;base64,...`` URI or raise SpeechUnavailableError."""
