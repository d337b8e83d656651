import logging
import secrets
from typing import Any, Optional

from sqlalchemy.orm import Session

from finsarthi.gateway.adapter import GatewayAdapter
from finsarthi.models.advice_session import AdviceLanguage, AdviceSession
from finsarthi.wizard.flows import WizardFlow

logger = logging.getLogger(__name__)


class SessionClaimError(ValueError):
    """Base class for refused advice session claims."""


class SessionAlreadyClaimedError(SessionClaimError):
    pass


class InvalidClaimTokenError(SessionClaimError):
    pass


def create_advice_session(
    db: Session,
    *,
    prompt_key: str,
    form_data: dict[str, Any],
    language: str,
    generated_advice: str,
    user_id: int | None = None,
) -> AdviceSession:
    session = AdviceSession(
        user_id=user_id,
        prompt_key=prompt_key,
        form_data=form_data,
        language=AdviceLanguage(language),
        generated_advice=generated_advice,
        claim_token=None if user_id else secrets.token_urlsafe(32),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def complete_wizard(
    db: Session,
    adapter: GatewayAdapter,
    flow: WizardFlow,
    answers: dict[str, Any],
    *,
    language: str,
    user_id: int | None = None,
) -> AdviceSession:
    """Validate the answers, generate advice and store the session.

    Raises WizardValidationError before any model call if an answer is invalid.
    """
    form_data = flow.collect(answers, language)
    advice = adapter.generate_advice(flow.prompt, form_data, language)
    session = create_advice_session(
        db,
        prompt_key=flow.prompt.key,
        form_data=form_data,
        language=language,
        generated_advice=advice,
        user_id=user_id,
    )
    logger.info(
        "Stored advice session %s for prompt %s (%s)",
        session.id,
        session.prompt_key,
        "user %s" % user_id if user_id else "anonymous",
    )
    return session


def associate_session_with_user(
    db: Session, session_id: int, user_id: int, claim_token: str | None = None
) -> Optional[AdviceSession]:
    """Attach an anonymous session to ``user_id``.

    An unowned session is only handed over against the claim token issued
    when it was created. Claiming a session the user already owns is a no-op.
    """
    session = db.query(AdviceSession).filter(AdviceSession.id == session_id).first()
    if session is None:
        return None
    if session.user_id is not None:
        if session.user_id != user_id:
            raise SessionAlreadyClaimedError("Advice session already belongs to another user")
        return session
    if not (
        claim_token
        and session.claim_token
        and secrets.compare_digest(claim_token, session.claim_token)
    ):
        raise InvalidClaimTokenError("Invalid claim token for this advice session")
    session.user_id = user_id
    session.claim_token = None
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_latest_advice_session_for_user(db: Session, user_id: int) -> Optional[AdviceSession]:
    return (
        db.query(AdviceSession)
        .filter(AdviceSession.user_id == user_id)
        .order_by(AdviceSession.created_at.desc(), AdviceSession.id.desc())
        .first()
    )


def get_advice_history_for_user(db: Session, user_id: int) -> list[AdviceSession]:
    return (
        db.query(AdviceSession)
        .filter(AdviceSession.user_id == user_id)
        .order_by(AdviceSession.created_at.desc(), AdviceSession.id.desc())
        .all()
    )
