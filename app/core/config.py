from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Application configuration settings.
    """
    model_config = SettingsConfigDict(env_prefix="SPECIALIST_CHAT_", env_file=".env", extra="ignore")

    # Service Info
    service_name: str = "specialist-chat-orchestrator"
    environment: str = "local"
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # LLM (OpenAI-compatible chat completions)
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("SPECIALIST_CHAT_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4-0125-preview"
    llm_timeout_seconds: float = 60.0

    # Specialist backend
    backend_base_url: str = "http://localhost:8080/api/v1"
    backend_timeout_seconds: float = 30.0

    # Function-call loop bound
    max_iterations: int = Field(default=10, ge=1)

    # Terminal chat client
    chat_api_url: str = "http://localhost:8000/api/chatbot"

settings = Settings()
