from __future__ import annotations

import base64
import json
import logging
from typing import Any, Mapping

from openai import OpenAI, OpenAIError

from finsarthi.gateway import prompts
from finsarthi.gateway.adapter import GatewayAdapter, SpeechUnavailableError
from finsarthi.services.products import find_financial_products
from finsarthi.wizard.tree import AdviceNode

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama-3.1-8b-instant"
DEFAULT_TTS_MODEL = "playai-tts"
DEFAULT_TTS_VOICE = "Fritz-PlayAI"


class OpenAIGatewayAdapter(GatewayAdapter):
    """Adapter for OpenAI-compatible endpoints (Groq, OpenAI)."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        model: str | None = None,
        tts_model: str | None = None,
        tts_voice: str | None = None,
        client: Any = None,
    ):
        self.model = model or DEFAULT_MODEL
        self.tts_model = tts_model or DEFAULT_TTS_MODEL
        self.tts_voice = tts_voice or DEFAULT_TTS_VOICE
        self.client = client or OpenAI(api_key=api_key, base_url=base_url)

    def _complete(self, messages: list[dict[str, Any]], **params: Any) -> Any:
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            **params,
        )
        return completion.choices[0].message

    def coach_reply(
        self, query: str, language: str, history: list[Mapping[str, str]] | None = None
    ) -> str:
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": prompts.coach_system_prompt(language)},
            *prompts.history_messages(history),
            {"role": "user", "content": query},
        ]
        try:
            message = self._complete(
                messages,
                temperature=0.7,
                max_tokens=1024,
                tools=[prompts.PRODUCT_TOOL],
                tool_choice="auto",
            )
            tool_calls = getattr(message, "tool_calls", None)
            if tool_calls and tool_calls[0].function.name == prompts.PRODUCT_TOOL_NAME:
                return self._answer_with_products(messages, message, tool_calls[0])
            return message.content or prompts.COACH_EMPTY_REPLY
        except (OpenAIError, ValueError) as exc:
            logger.exception("Coach reply failed: %s", exc)
            return prompts.COACH_ERROR_REPLY

    def _answer_with_products(
        self, messages: list[dict[str, Any]], message: Any, tool_call: Any
    ) -> str:
        arguments = json.loads(tool_call.function.arguments or "{}")
        products = find_financial_products(arguments.get("category", ""))
        messages.append(
            {
                "role": "assistant",
                "content": message.content or "",
                "tool_calls": [
                    {
                        "id": tool_call.id,
                        "type": "function",
                        "function": {
                            "name": tool_call.function.name,
                            "arguments": tool_call.function.arguments,
                        },
                    }
                ],
            }
        )
        messages.append(
            {
                "role": "tool",
                "tool_call_id": tool_call.id,
                "content": json.dumps(products),
            }
        )
        followup = self._complete(messages)
        return followup.content or prompts.COACH_EMPTY_TOOL_REPLY

    def generate_advice(
        self, prompt: AdviceNode, form_data: Mapping[str, Any], language: str
    ) -> str:
        content = prompts.build_advice_prompt(prompt, form_data, language)
        try:
            message = self._complete(
                [{"role": "user", "content": content}],
                temperature=0.7,
                max_tokens=2048,
            )
        except OpenAIError as exc:
            logger.exception("Advice generation failed: %s", exc)
            return prompts.ADVICE_ERROR_REPLY
        if not message.content:
            logger.warning("Advice generation returned an empty response for %s", prompt.key)
            return prompts.ADVICE_ERROR_REPLY
        logger.info("Generated advice for prompt %s (%s chars)", prompt.key, len(message.content))
        return message.content

    def summarize_news(self, article: str, language: str) -> str:
        try:
            message = self._complete(
                [{"role": "user", "content": prompts.build_summary_prompt(article, language)}],
                temperature=0.2,
                max_tokens=1024,
                response_format={"type": "json_object"},
            )
            return prompts.parse_summary(message.content or "")
        except (OpenAIError, ValueError) as exc:
            logger.exception("News summary failed: %s", exc)
            return prompts.SUMMARY_ERROR_REPLY

    def explain_term(self, term: str, language: str, literacy_level: str) -> str:
        try:
            message = self._complete(
                [{"role": "user", "content": prompts.build_term_prompt(term, language, literacy_level)}],
                temperature=0.3,
                max_tokens=1024,
            )
        except OpenAIError as exc:
            logger.exception("Term explanation failed: %s", exc)
            return prompts.EXPLANATION_ERROR_REPLY
        return message.content or prompts.EXPLANATION_ERROR_REPLY

    def synthesize_speech(self, text: str) -> str:
        try:
            response = self.client.audio.speech.create(
                model=self.tts_model,
                voice=self.tts_voice,
                input=text,
                response_format="wav",
            )
        except OpenAIError as exc:
            logger.exception("Speech synthesis failed: %s", exc)
            raise SpeechUnavailableError("No audio data returned from the model.") from exc
        audio = response.content
        if not audio:
            raise SpeechUnavailableError("No audio data returned from the model.")
        return "data:audio/wav;base64," + base64.b64encode(audio).decode("ascii")
