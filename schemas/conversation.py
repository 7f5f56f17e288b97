"""
Conversation Schemas

Transcript entries exchanged with the LLM within one user request.

DESIGN RULES:
- Transcripts are append-only for the lifetime of a request
- Nothing here is persisted
- Serialization matches the chat-completions message format
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Author of a transcript entry."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"


class FunctionCall(BaseModel):
    """Function-call directive produced by the LLM."""
    name: str = Field(..., description="Short name of the registered function")
    arguments: str = Field(default="", description="Raw JSON arguments string, passed through untouched")


class ConversationTurn(BaseModel):
    """
    One entry of the transcript.

    `content` is null for assistant turns that only carry a function call.
    """
    role: Role
    content: Optional[str] = None
    name: Optional[str] = Field(default=None, description="Function name for function-role turns")
    function_call: Optional[FunctionCall] = None

    @classmethod
    def user(cls, content: str) -> "ConversationTurn":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant_call(cls, call: FunctionCall) -> "ConversationTurn":
        return cls(role=Role.ASSISTANT, content=None, function_call=call)

    @classmethod
    def function_result(cls, name: str, content: str) -> "ConversationTurn":
        return cls(role=Role.FUNCTION, name=name, content=content)

    def to_message(self) -> Dict[str, Any]:
        """Serialize for the chat-completions `messages` array."""
        message: Dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.name is not None:
            message["name"] = self.name
        if self.function_call is not None:
            message["function_call"] = self.function_call.model_dump()
        return message
