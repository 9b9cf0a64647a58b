"""Routes that proxy the AI assistant."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from innovatefund.domain.entities import User
from innovatefund.infrastructure.openai_client import AssistantService, OpenAIServiceError
from innovatefund.interfaces.api.dependencies import (
    get_assistant_service,
    get_current_active_user,
)
from innovatefund.interfaces.api.schemas import (
    AIChatRequest,
    AIChatResponse,
    ImpactScoreRequest,
    ImpactScoreResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


def _bad_gateway(exc: OpenAIServiceError) -> HTTPException:
    logger.warning("Assistant provider error: %s", exc)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.post("/chat", response_model=AIChatResponse)
def chat(
    payload: AIChatRequest,
    _: User = Depends(get_current_active_user),
    service: AssistantService = Depends(get_assistant_service),
) -> AIChatResponse:
    try:
        reply = service.chat(payload.transcript())
    except OpenAIServiceError as exc:
        raise _bad_gateway(exc) from exc
    return AIChatResponse(response=reply)


@router.post("/impact-score", response_model=ImpactScoreResponse)
def impact_score(
    payload: ImpactScoreRequest,
    _: User = Depends(get_current_active_user),
    service: AssistantService = Depends(get_assistant_service),
) -> ImpactScoreResponse:
    try:
        score = service.impact_score(payload.idea)
    except OpenAIServiceError as exc:
        raise _bad_gateway(exc) from exc
    return ImpactScoreResponse(impact_score=score)
