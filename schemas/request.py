from typing import List, Optional
from pydantic import BaseModel, Field

from schemas.conversation import ConversationTurn


class ChatRequest(BaseModel):
    """
    API request model for the /api/chatbot endpoint.

    This is the external contract: clients send this.
    `message` is optional at the schema level so that a missing message
    is reported as a plain bad request instead of a validation error.
    """
    message: Optional[str] = Field(default=None, description="User's message")
    conversation: Optional[List[ConversationTurn]] = Field(
        default=None,
        description="Optional prior transcript, echoed forward to the LLM",
    )
