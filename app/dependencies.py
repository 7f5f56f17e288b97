"""
FastAPI Dependencies

All object creation happens here, not per request.
This module provides dependency injection for the orchestration layer.

RULE: FastAPI routes call exactly one entry point, Orchestrator.handle_user_message()
"""

from functools import lru_cache

from app.core.config import settings
from backend.client import BackendClient
from functions.registry import get_registry
from llm.openai_chat import OpenAIChatClient
from orchestration.orchestrator import Orchestrator


@lru_cache(maxsize=1)
def get_llm_client() -> OpenAIChatClient:
    return OpenAIChatClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        timeout=settings.llm_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_backend_client() -> BackendClient:
    return BackendClient(
        base_url=settings.backend_base_url,
        timeout=settings.backend_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_orchestrator() -> Orchestrator:
    """
    Create and cache the Orchestrator singleton.

    All components are wired here:
    - OpenAIChatClient: chat completions with function calling
    - BackendClient: specialist backend routes
    - FunctionRegistry: short name -> route lookup

    Returns:
        Orchestrator: The single entry point for a user turn.
    """
    return Orchestrator(
        llm=get_llm_client(),
        backend=get_backend_client(),
        registry=get_registry(),
        max_iterations=settings.max_iterations,
    )


async def close_clients() -> None:
    """Release HTTP connections held by cached clients."""
    if get_backend_client.cache_info().currsize:
        await get_backend_client().aclose()
    if get_llm_client.cache_info().currsize:
        await get_llm_client().aclose()
