from fastapi import APIRouter, Depends, HTTPException, status

from finsarthi.gateway.adapter import GatewayAdapter, SpeechUnavailableError
from finsarthi.gateway.factory import get_gateway_adapter
from finsarthi.schemas.ai import (
    CoachQuery,
    CoachResponse,
    ProductPublic,
    SpeechRequest,
    SpeechResponse,
    SummarizeRequest,
    SummarizeResponse,
    TranslateTermRequest,
    TranslateTermResponse,
)
from finsarthi.services.products import ProductCategory, get_products

router = APIRouter()


@router.post("/coach", response_model=CoachResponse)
def coach(
    payload: CoachQuery,
    adapter: GatewayAdapter = Depends(get_gateway_adapter),
) -> CoachResponse:
    history = [turn.dict() for turn in payload.history]
    return CoachResponse(response=adapter.coach_reply(payload.query, payload.language, history))


@router.post("/summarize", response_model=SummarizeResponse)
def summarize(
    payload: SummarizeRequest,
    adapter: GatewayAdapter = Depends(get_gateway_adapter),
) -> SummarizeResponse:
    return SummarizeResponse(summary=adapter.summarize_news(payload.article_content, payload.language))


@router.post("/translate", response_model=TranslateTermResponse)
def translate(
    payload: TranslateTermRequest,
    adapter: GatewayAdapter = Depends(get_gateway_adapter),
) -> TranslateTermResponse:
    explanation = adapter.explain_term(payload.term, payload.language, payload.user_literacy_level)
    return TranslateTermResponse(simplified_explanation=explanation)


@router.post("/speech", response_model=SpeechResponse)
def speech(
    payload: SpeechRequest,
    adapter: GatewayAdapter = Depends(get_gateway_adapter),
) -> SpeechResponse:
    try:
        return SpeechResponse(audio=adapter.synthesize_speech(payload.text))
    except SpeechUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc


@router.get("/products/{category}", response_model=list[ProductPublic])
def products(category: ProductCategory) -> list[ProductPublic]:
    return get_products(category)
