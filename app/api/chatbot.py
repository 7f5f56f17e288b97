"""
Chatbot API Route

Thin delegation layer to the orchestrator.
Contains NO business logic, routing, or function-specific code.

Orchestration errors are turned into responses by the exception handlers
registered in app.main; anything else is logged and collapsed into a
generic orchestration error here.
"""

import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_orchestrator
from orchestration.errors import OrchestrationError
from orchestration.orchestrator import Orchestrator
from schemas.request import ChatRequest
from schemas.response import ChatResponse


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chatbot", response_model=ChatResponse)
async def chatbot(
    request: ChatRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> ChatResponse:
    """
    Answer one user message.

    Flow:
    1. Orchestrator runs the LLM / backend function-call loop
    2. The final LLM answer is returned as `message`
    """
    try:
        result = await orchestrator.handle_user_message(
            request.message,
            prior_transcript=request.conversation,
        )
    except OrchestrationError:
        raise
    except Exception as e:
        logger.exception("Unhandled error while answering message")
        raise OrchestrationError(str(e)) from e

    return ChatResponse(message=result.answer)
