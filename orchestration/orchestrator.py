"""
Chat Orchestrator

Brokers one user turn between the LLM and the specialist backend.

FLOW:
User message → LLM → (function call → backend → LLM)* → final answer

GUARANTEES:
- At most `max_iterations` LLM calls per user turn
- Prior transcript is forwarded untouched; only new turns are appended
- No retries; any failure aborts the whole turn
"""

import json
import logging
import uuid
from typing import Any, Dict, List, Optional, Protocol, Sequence

from functions.registry import FunctionRegistry
from llm.openai_chat import LLMReply
from orchestration.errors import (
    ClientInputError,
    ConfigurationError,
    DepthExceededError,
)
from schemas.conversation import ConversationTurn
from schemas.response import OrchestrationResult


logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 10


class ChatModel(Protocol):
    configured: bool

    async def complete(
        self,
        messages: List[Dict[str, Any]],
        functions: List[Dict[str, Any]],
    ) -> LLMReply: ...


class Backend(Protocol):
    async def call(self, route: str, arguments: str) -> Any: ...


class Orchestrator:
    """
    Function-calling loop.

    This is the glue, not the brain: the LLM decides which function to
    call, the registry decides where it lives, the backend answers.
    """

    def __init__(
        self,
        llm: ChatModel,
        backend: Backend,
        registry: FunctionRegistry,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ):
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self._llm = llm
        self._backend = backend
        self._registry = registry
        self._max_iterations = max_iterations

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    async def handle_user_message(
        self,
        text: Optional[str],
        prior_transcript: Optional[Sequence[ConversationTurn]] = None,
    ) -> OrchestrationResult:
        """
        Answer one user message.

        Args:
            text: The user's message
            prior_transcript: Optional transcript from earlier turns, forwarded as-is

        Returns:
            OrchestrationResult with the LLM's final answer

        Raises:
            ClientInputError: message missing or blank
            ConfigurationError: LLM credentials not set
            UpstreamProtocolError: malformed LLM response
            UnknownFunctionError: LLM called an unregistered function
            BackendError: backend unreachable or not JSON
            DepthExceededError: no final answer within the iteration cap
        """
        if text is None or not text.strip():
            raise ClientInputError("message is missing")

        if not self._llm.configured:
            logger.error("LLM API key is not configured")
            raise ConfigurationError("LLM API key not set")

        request_id = str(uuid.uuid4())
        transcript: List[ConversationTurn] = list(prior_transcript or [])
        transcript.append(ConversationTurn.user(text))
        functions = self._registry.as_llm_functions()
        functions_called: List[str] = []

        logger.info(f"[{request_id}] Starting turn (prior_turns={len(transcript) - 1})")

        for round_number in range(1, self._max_iterations + 1):
            reply = await self._llm.complete(
                [turn.to_message() for turn in transcript],
                functions,
            )

            if not reply.is_function_call:
                logger.info(f"[{request_id}] Final answer after {round_number} round(s)")
                return OrchestrationResult(
                    request_id=request_id,
                    answer=reply.content or "",
                    rounds=round_number,
                    functions_called=functions_called,
                )

            call = reply.function_call
            transcript.append(ConversationTurn.assistant_call(call))

            route = self._registry.resolve(call.name)
            logger.info(f"[{request_id}] Round {round_number}: {call.name} -> {route}")
            result = await self._backend.call(route, call.arguments)
            functions_called.append(call.name)

            transcript.append(
                ConversationTurn.function_result(
                    name=call.name,
                    content=json.dumps(result, ensure_ascii=False),
                )
            )

        logger.error(f"[{request_id}] No final answer after {self._max_iterations} rounds")
        raise DepthExceededError(f"exceeded {self._max_iterations} rounds")
