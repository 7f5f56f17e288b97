"""
Orchestration error hierarchy.

Each error carries the HTTP status and the message exposed to the caller.
The API layer maps them to responses; nothing below it builds responses.
"""

GENERIC_ERROR_MESSAGE = "Internal Server Error"


class OrchestrationError(Exception):
    """Base error. Fatal for the current user turn."""

    status_code: int = 500
    public_message: str = GENERIC_ERROR_MESSAGE


class ClientInputError(OrchestrationError):
    """Missing or empty user message."""

    status_code = 400
    public_message = "Bad request"


class ConfigurationError(OrchestrationError):
    """LLM credentials are not configured. Reported as a soft failure."""

    status_code = 200
    public_message = "Error: OpenAI API key not set"


class UpstreamProtocolError(OrchestrationError):
    """LLM response is missing choices or a message."""


class DepthExceededError(OrchestrationError):
    """Function-call loop did not converge within the iteration cap."""

    public_message = "Exceeded maximum operation depth."


class UnknownFunctionError(OrchestrationError):
    """LLM invoked a function that is not in the registry."""


class BackendError(OrchestrationError):
    """Backend call failed at the transport level or returned a non-JSON body."""


class RegistryError(Exception):
    """Function registry is inconsistent. Raised at startup, never per request."""
