# Schemas Package
from schemas.conversation import ConversationTurn, FunctionCall, Role
from schemas.request import ChatRequest
from schemas.response import ChatResponse, OrchestrationResult

__all__ = [
    "ConversationTurn",
    "FunctionCall",
    "Role",
    "ChatRequest",
    "ChatResponse",
    "OrchestrationResult",
]
