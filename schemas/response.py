from typing import List
from pydantic import BaseModel, Field


class ChatResponse(BaseModel):
    """
    API response model for the /api/chatbot endpoint.

    Every outcome, including errors, is reported through `message`.
    """
    message: str = Field(..., description="Final answer or error description")


class OrchestrationResult(BaseModel):
    """
    Internal result of one orchestrated user turn.
    """
    request_id: str = Field(..., description="Identifier used in log lines")
    answer: str = Field(..., description="Final natural-language answer from the LLM")
    rounds: int = Field(default=0, ge=0, description="Number of LLM calls made")
    functions_called: List[str] = Field(default_factory=list, description="Short names invoked, in order")
