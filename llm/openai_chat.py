"""
OpenAI Chat Client Wrapper

Thin async wrapper around the OpenAI SDK for function-calling chat completions.

DESIGN RULES:
- No retries (SDK retries are disabled)
- No streaming
- No prompt logging
- Returns plain schema types, no SDK objects leak out
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from openai import AsyncOpenAI

from orchestration.errors import UpstreamProtocolError
from schemas.conversation import FunctionCall


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMReply:
    """
    One assistant message from the LLM.

    Exactly one of `content` / `function_call` is meaningful:
    a reply carrying a function call is never treated as a final answer.
    """
    content: Optional[str] = None
    function_call: Optional[FunctionCall] = None

    @property
    def is_function_call(self) -> bool:
        return self.function_call is not None


class OpenAIChatClient:
    """
    Chat-completion client with the declared function list attached to every call.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            api_key: Bearer token for the provider; blank means unconfigured
            model: Model name sent with every request
            base_url: Provider endpoint (OpenAI-compatible)
            timeout: Request timeout in seconds
            http_client: Optional preconfigured httpx client (tests inject a mock transport)
        """
        self._api_key = (api_key or "").strip()
        self._model = model
        self._base_url = base_url
        self._timeout = timeout
        self._http_client = http_client
        self._client: Optional[AsyncOpenAI] = None

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self) -> AsyncOpenAI:
        # AsyncOpenAI refuses to build without a key, so construction is deferred
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    async def complete(
        self,
        messages: List[Dict[str, Any]],
        functions: List[Dict[str, Any]],
    ) -> LLMReply:
        """
        Run one chat completion.

        Args:
            messages: Transcript in chat-completions message format
            functions: Function descriptors advertised to the model

        Returns:
            LLMReply with either text content or a function call

        Raises:
            UpstreamProtocolError: if the response has no choices or no message
        """
        request: Dict[str, Any] = {"model": self._model, "messages": messages}
        if functions:
            request["functions"] = functions

        start_time = time.time()
        response = await self._get_client().chat.completions.create(**request)
        latency_ms = int((time.time() - start_time) * 1000)

        choices = getattr(response, "choices", None)
        if not choices:
            raise UpstreamProtocolError("Invalid response from LLM: no choices")
        message = getattr(choices[0], "message", None)
        if message is None:
            raise UpstreamProtocolError("Invalid response from LLM: no message")

        usage = getattr(response, "usage", None)
        tokens = usage.total_tokens if usage else "n/a"
        logger.debug(f"chat completion model={self._model} latency_ms={latency_ms} tokens={tokens}")

        function_call = getattr(message, "function_call", None)
        if function_call is not None:
            return LLMReply(
                function_call=FunctionCall(
                    name=function_call.name,
                    arguments=function_call.arguments or "",
                )
            )
        return LLMReply(content=message.content)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
