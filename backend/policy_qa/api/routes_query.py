"""Question answering API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from policy_qa.answer.service import QAService
from policy_qa.api.dependencies import get_qa_service
from policy_qa.models.dto import AskRequest, AskResponse, ErrorResponse

router = APIRouter()


@router.post(
    "/ask",
    response_model=AskResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
    summary="Answer a question from the indexed policies",
)
async def ask(
    request: AskRequest,
    service: QAService = Depends(get_qa_service),
) -> AskResponse:
    payload = await service.ask(request.question)
    return AskResponse(**payload)
