from __future__ import annotations

import json
from typing import Any, Mapping

from finsarthi.services.products import get_products
from finsarthi.wizard.tree import AdviceNode

LANGUAGE_NAMES = {"en": "English", "hi": "Hindi", "mr": "Marathi"}

COACH_EMPTY_REPLY = "I'm sorry, I couldn't generate a response. Please try again."
COACH_EMPTY_TOOL_REPLY = (
    "I'm sorry, I couldn't generate a response after looking up products. Please try again."
)
COACH_ERROR_REPLY = "I'm sorry, there was an error processing your request."
ADVICE_ERROR_REPLY = (
    "I'm sorry, I was unable to generate advice at this time. This could be due to a "
    "temporary issue. Please try adjusting your input or try again later."
)
SUMMARY_ERROR_REPLY = "Failed to generate summary."
EXPLANATION_ERROR_REPLY = "Failed to generate explanation."

PRODUCT_TOOL_NAME = "find_financial_products"
PRODUCT_TOOL = {
    "type": "function",
    "function": {
        "name": PRODUCT_TOOL_NAME,
        "description": (
            "Finds financial products based on a specified category (e.g., savings, "
            "investment, loan). Use this tool to recommend specific product examples to the user."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "category": {
                    "type": "string",
                    "enum": ["savings", "investment", "loan"],
                    "description": "The category of the financial product to search for.",
                }
            },
            "required": ["category"],
        },
    },
}


def coach_system_prompt(language: str) -> str:
    return (
        "You are FinSarthi, an expert financial coach. Your goal is to provide clear, simple, "
        "and personalized financial advice.\n"
        "You are an expert on topics like budgeting, saving, investing, and loans.\n"
        f"The user is conversing with you in {language}. Your response MUST be in the same language.\n\n"
        "If the user asks for product recommendations (e.g., \"which mutual fund...\"), you MUST use the "
        f"'{PRODUCT_TOOL_NAME}' tool to get a list of suitable product examples. Integrate these product "
        "suggestions naturally into your advice. DO NOT make up product names.\n\n"
        "Converse with the user based on their query and the history of the conversation provided.\n"
        "Be friendly, empathetic, and encouraging."
    )


def history_messages(history: list[Mapping[str, str]] | None) -> list[dict[str, str]]:
    # Clients label the coach's turns "model"; chat APIs call them "assistant".
    return [
        {
            "role": "assistant" if turn.get("role") == "model" else "user",
            "content": turn.get("content", ""),
        }
        for turn in history or []
    ]


def format_answers(prompt: AdviceNode, form_data: Mapping[str, Any], language: str) -> str:
    lines = []
    for key, value in form_data.items():
        question = prompt.question(key)
        if question is None:
            continue
        display = f"₹{value}" if question.type == "number" else value
        lines.append(f"- {question.localized_label(language)}: {display}")
    return "\n".join(lines)


def product_context() -> str:
    return (
        "Here is a list of available financial products. When you suggest a product type "
        "(like a savings account, mutual fund, or loan), you MUST use appropriate examples from this list.\n"
        f"- Savings Products: {json.dumps(get_products('savings'), ensure_ascii=False)}\n"
        f"- Investment Products: {json.dumps(get_products('investment'), ensure_ascii=False)}\n"
        f"- Loan Products: {json.dumps(get_products('loan'), ensure_ascii=False)}"
    )


def build_advice_prompt(prompt: AdviceNode, form_data: Mapping[str, Any], language: str) -> str:
    language_name = LANGUAGE_NAMES.get(language, language)
    return (
        f"{prompt.localized_system_prompt(language)}\n\n"
        "The user has provided the following information:\n"
        f"{format_answers(prompt, form_data, language)}\n\n"
        "Available Financial Products for Recommendation:\n"
        f"{product_context()}\n\n"
        "Your Task:\n"
        "1. Analyze the user's situation based on the information they provided.\n"
        "2. Provide Actionable Steps: Give 3-5 clear, simple, and prioritized steps.\n"
        "3. Suggest Products: When relevant, suggest suitable products from the list provided. "
        "Do not invent products.\n"
        f"4. Language and Tone: Your response MUST be in {language_name}. Be encouraging, empathetic, "
        "and supportive. Your name is FinSarthi.\n"
        "5. Output Format: Your response MUST be ONLY the advice text. Do not include any other text, "
        "greetings, explanations, or markdown formatting."
    )


def build_summary_prompt(article: str, language: str) -> str:
    return (
        "You are an AI that summarizes financial news articles.\n\n"
        "Summarize the following article in the specified language. Your response MUST be ONLY a valid "
        "JSON object with a single key \"summary\". Do not add any other text, explanations, or markdown "
        "formatting.\n\n"
        f'Article Content: """{article}"""\n\n'
        f"Language: {language}"
    )


def build_term_prompt(term: str, language: str, literacy_level: str) -> str:
    return (
        "You are a financial expert who can translate complex financial terms into easy-to-understand "
        "language.\n\n"
        f'Term: "{term}"\n'
        f"Language: {language}\n"
        f"Literacy Level: {literacy_level}\n\n"
        "Please provide a simplified explanation of the term in the specified language, tailored to the "
        "user's literacy level.\n"
        "Your response should contain ONLY the explanation text. Do not add any other text, greetings, "
        "or markdown formatting."
    )


def parse_summary(content: str) -> str:
    """Pull the summary out of a JSON-mode reply; raises ValueError if malformed."""
    data = json.loads(content)
    summary = data.get("summary") if isinstance(data, dict) else None
    if not isinstance(summary, str) or not summary.strip():
        raise ValueError("Summary missing from model response")
    return summary
