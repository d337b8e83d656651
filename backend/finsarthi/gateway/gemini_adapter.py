from __future__ import annotations

import logging
from typing import Any, Mapping

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from finsarthi.gateway import prompts
from finsarthi.gateway.adapter import GatewayAdapter, SpeechUnavailableError
from finsarthi.services.products import find_financial_products
from finsarthi.wizard.tree import AdviceNode

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"


class GeminiGatewayAdapter(GatewayAdapter):
    def __init__(
        self,
        api_key: str | None = None,
        *,
        model_name: str | None = None,
        model: Any = None,
        coach_model: Any = None,
    ):
        model_name = model_name or DEFAULT_MODEL
        if model is None or coach_model is None:
            genai.configure(api_key=api_key)
        self.model = model or genai.GenerativeModel(model_name)
        self.coach_model = coach_model or genai.GenerativeModel(
            model_name, tools=[find_financial_products]
        )

    def _prepare_prompt(self, preamble: str, request: str) -> str:
        return preamble + "\n\nRequest:\n" + request

    def _generate(self, content: str, **config: Any) -> str:
        result = self.model.generate_content(content, generation_config=config)
        return result.text

    def coach_reply(
        self, query: str, language: str, history: list[Mapping[str, str]] | None = None
    ) -> str:
        # Gemini names the turns "user" and "model", as the clients already do.
        chat_history = [
            {"role": "model" if turn.get("role") == "model" else "user", "parts": [turn.get("content", "")]}
            for turn in history or []
        ]
        try:
            chat = self.coach_model.start_chat(
                history=chat_history, enable_automatic_function_calling=True
            )
            result = chat.send_message(
                self._prepare_prompt(prompts.coach_system_prompt(language), query),
                generation_config={"temperature": 0.7, "max_output_tokens": 1024},
            )
            return result.text or prompts.COACH_EMPTY_REPLY
        except (google_exceptions.GoogleAPIError, ValueError) as exc:
            logger.exception("Coach reply failed: %s", exc)
            return prompts.COACH_ERROR_REPLY

    def generate_advice(
        self, prompt: AdviceNode, form_data: Mapping[str, Any], language: str
    ) -> str:
        try:
            text = self._generate(
                prompts.build_advice_prompt(prompt, form_data, language),
                temperature=0.7,
                max_output_tokens=2048,
            )
        except (google_exceptions.GoogleAPIError, ValueError) as exc:
            logger.exception("Advice generation failed: %s", exc)
            return prompts.ADVICE_ERROR_REPLY
        if not text:
            return prompts.ADVICE_ERROR_REPLY
        logger.info("Generated advice for prompt %s (%s chars)", prompt.key, len(text))
        return text

    def summarize_news(self, article: str, language: str) -> str:
        try:
            text = self._generate(
                prompts.build_summary_prompt(article, language),
                temperature=0.2,
                max_output_tokens=1024,
                response_mime_type="application/json",
            )
            return prompts.parse_summary(text or "")
        except (google_exceptions.GoogleAPIError, ValueError) as exc:
            logger.exception("News summary failed: %s", exc)
            return prompts.SUMMARY_ERROR_REPLY

    def explain_term(self, term: str, language: str, literacy_level: str) -> str:
        try:
            text = self._generate(
                prompts.build_term_prompt(term, language, literacy_level),
                temperature=0.3,
                max_output_tokens=1024,
            )
        except (google_exceptions.GoogleAPIError, ValueError) as exc:
            logger.exception("Term explanation failed: %s", exc)
            return prompts.EXPLANATION_ERROR_REPLY
        return text or prompts.EXPLANATION_ERROR_REPLY

    def synthesize_speech(self, text: str) -> str:
        raise SpeechUnavailableError("Speech synthesis is not available with the Gemini provider.")
