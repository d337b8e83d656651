from functools import lru_cache

from finsarthi.core.config import get_settings
from finsarthi.gateway.adapter import GatewayAdapter
from finsarthi.gateway.gemini_adapter import GeminiGatewayAdapter
from finsarthi.gateway.openai_adapter import OpenAIGatewayAdapter


@lru_cache
def get_gateway_adapter() -> GatewayAdapter:
    settings = get_settings()
    if settings.ai_provider == "gemini":
        return GeminiGatewayAdapter(api_key=settings.gemini_api_key, model_name=settings.ai_model)
    return OpenAIGatewayAdapter(
        api_key=settings.ai_api_key,
        base_url=settings.ai_base_url,
        model=settings.ai_model or ("gpt-4o-mini" if settings.ai_provider == "openai" else None),
        tts_model=settings.tts_model or ("tts-1" if settings.ai_provider == "openai" else None),
        tts_voice=settings.tts_voice or ("alloy" if settings.ai_provider == "openai" else None),
    )
