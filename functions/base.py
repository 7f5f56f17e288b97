"""
Function Descriptor

Contract for functions advertised to the LLM.
Descriptors are data only; calling a function means posting its
arguments to the backend route it is mapped to.

NAMING RULE:
    The LLM provider only accepts names matching ^[a-zA-Z0-9_-]{1,64}$,
    so slash-bearing backend routes are exposed under hyphenated aliases
    (e.g. "specialist-find" -> "specialist/find").
"""

import copy
import re
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


FUNCTION_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


class FunctionDescriptor(BaseModel):
    """
    A function the LLM may call.

    Immutable once built; the registry hands the same instances to every request.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Short name exposed to the LLM")
    description: str = Field(..., description="When and why the LLM should call this function")
    parameters: Optional[Dict[str, Any]] = Field(
        default=None,
        description="JSON Schema of the arguments object",
    )

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not FUNCTION_NAME_PATTERN.match(value):
            raise ValueError(f"function name {value!r} does not match {FUNCTION_NAME_PATTERN.pattern}")
        return value

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the chat-completions `functions` array. The schema is copied."""
        payload: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
        }
        if self.parameters is not None:
            payload["parameters"] = copy.deepcopy(self.parameters)
        return payload
