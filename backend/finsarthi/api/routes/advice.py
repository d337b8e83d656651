from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from finsarthi.api import deps
from finsarthi.db.session import get_db
from finsarthi.gateway.adapter import GatewayAdapter
from finsarthi.gateway.factory import get_gateway_adapter
from finsarthi.models.user import User
from finsarthi.schemas.advice import (
    AdviceSessionClaim,
    AdviceSessionPublic,
    AdviceTopic,
    GenerateAdviceRequest,
    OnboardingRequest,
    PromptDetail,
    QuestionPublic,
    StepValidationRequest,
    StepValidationResponse,
)
from finsarthi.services import advice as advice_service
from finsarthi.wizard import WizardFlow, WizardValidationError, get_advice_tree
from finsarthi.wizard.questions import clean_language

router = APIRouter()


def _flow_or_404(prompt_key: str) -> WizardFlow:
    try:
        return WizardFlow.for_prompt(prompt_key)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Advice topic not found"
        ) from exc


def _unprocessable(exc: WizardValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"errors": exc.errors},
    )


@router.get("/prompts", response_model=list[AdviceTopic])
def list_topics(
    path: list[str] = Query(default=[]),
    language: str = "en",
) -> list[AdviceTopic]:
    try:
        nodes = get_advice_tree().children(path)
    except WizardValidationError as exc:
        raise _unprocessable(exc) from exc
    return [
        AdviceTopic(key=node.key, title=node.localized_title(language), is_prompt=node.is_prompt)
        for node in nodes
    ]


@router.get("/prompts/{prompt_key}", response_model=PromptDetail)
def get_prompt(prompt_key: str, language: str = "en") -> PromptDetail:
    flow = _flow_or_404(prompt_key)
    return PromptDetail(
        key=flow.prompt.key,
        title=flow.prompt.localized_title(language),
        questions=[
            QuestionPublic(
                key=question.key,
                type=question.type,
                label=question.localized_label(language),
                placeholder=question.localized_placeholder(language),
                options=question.options,
            )
            for question in flow.prompt.questions
        ],
        total_steps=flow.total_steps,
    )


@router.post("/wizard/validate", response_model=StepValidationResponse)
def validate_step(payload: StepValidationRequest) -> StepValidationResponse:
    flow = _flow_or_404(payload.prompt_key)
    try:
        result = flow.validate_step(payload.step, payload.value, payload.language)
    except WizardValidationError as exc:
        raise _unprocessable(exc) from exc
    return StepValidationResponse(**result.dict())


@router.post("/onboarding", response_model=AdviceSessionPublic, status_code=status.HTTP_201_CREATED)
def complete_onboarding(
    payload: OnboardingRequest,
    db: Session = Depends(get_db),
    adapter: GatewayAdapter = Depends(get_gateway_adapter),
    current_user: User | None = Depends(deps.get_optional_user),
) -> AdviceSessionPublic:
    flow = WizardFlow.onboarding()
    try:
        language = clean_language(payload.language)
        return advice_service.complete_wizard(
            db,
            adapter,
            flow,
            payload.dict(exclude={"language"}),
            language=language,
            user_id=current_user.id if current_user else None,
        )
    except WizardValidationError as exc:
        raise _unprocessable(exc) from exc


@router.post("/generate", response_model=AdviceSessionPublic, status_code=status.HTTP_201_CREATED)
def generate_advice(
    payload: GenerateAdviceRequest,
    db: Session = Depends(get_db),
    adapter: GatewayAdapter = Depends(get_gateway_adapter),
    current_user: User | None = Depends(deps.get_optional_user),
) -> AdviceSessionPublic:
    flow = _flow_or_404(payload.prompt_key)
    try:
        return advice_service.complete_wizard(
            db,
            adapter,
            flow,
            payload.form_data,
            language=payload.language,
            user_id=current_user.id if current_user else None,
        )
    except WizardValidationError as exc:
        raise _unprocessable(exc) from exc


@router.post("/sessions/{session_id}/claim", response_model=AdviceSessionPublic)
def claim_session(
    session_id: int,
    payload: AdviceSessionClaim | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> AdviceSessionPublic:
    claim_token = payload.claim_token if payload else None
    try:
        session = advice_service.associate_session_with_user(
            db, session_id, current_user.id, claim_token
        )
    except advice_service.SessionAlreadyClaimedError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except advice_service.InvalidClaimTokenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Advice session not found"
        )
    return session


@router.get("/sessions/latest", response_model=AdviceSessionPublic | None)
def latest_session(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> AdviceSessionPublic | None:
    return advice_service.get_latest_advice_session_for_user(db, current_user.id)


@router.get("/sessions", response_model=list[AdviceSessionPublic])
def advice_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> list[AdviceSessionPublic]:
    return advice_service.get_advice_history_for_user(db, current_user.id)
