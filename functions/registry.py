"""
Function Registry

Static mapping from LLM-facing short names to backend routes, plus the
descriptors advertised to the LLM on every chat-completion call.

DESIGN RULES:
- Built once at startup from catalog.yaml, never mutated afterwards
- Every advertised descriptor must have a route (validated on build)
- Lookup is pure: no I/O, no side effects
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from functions.base import FunctionDescriptor
from orchestration.errors import RegistryError, UnknownFunctionError


CATALOG_PATH = Path(__file__).with_name("catalog.yaml")


class FunctionRegistry:
    """
    Central registry for callable functions.

    Features:
    - Ordered descriptor list (sent verbatim to the LLM)
    - Short name -> backend route resolution
    - Consistency validation
    """

    _instance: Optional["FunctionRegistry"] = None

    def __init__(
        self,
        descriptors: Iterable[FunctionDescriptor],
        mapping: Mapping[str, str],
    ):
        self._descriptors: Tuple[FunctionDescriptor, ...] = tuple(descriptors)
        self._mapping: Dict[str, str] = dict(mapping)
        self.validate()

    @classmethod
    def from_catalog(cls, entries: List[Dict[str, Any]]) -> "FunctionRegistry":
        """
        Build a registry from catalog entries.

        Args:
            entries: List of {name, route, description, parameters?} dicts

        Returns:
            Validated FunctionRegistry
        """
        descriptors = []
        mapping: Dict[str, str] = {}
        for entry in entries:
            try:
                descriptor = FunctionDescriptor(
                    name=entry["name"],
                    description=entry["description"],
                    parameters=entry.get("parameters"),
                )
                route = entry["route"]
            except (KeyError, TypeError, ValueError) as e:
                raise RegistryError(f"Invalid catalog entry {entry!r}: {e}") from e
            descriptors.append(descriptor)
            mapping[descriptor.name] = route
        return cls(descriptors, mapping)

    @classmethod
    def load(cls, path: Path = CATALOG_PATH) -> "FunctionRegistry":
        """Load and validate the YAML catalog."""
        with open(path, "r", encoding="utf-8") as f:
            entries = yaml.safe_load(f) or []
        if not isinstance(entries, list):
            raise RegistryError(f"Catalog {path} must contain a list of functions")
        return cls.from_catalog(entries)

    @classmethod
    def get_instance(cls) -> "FunctionRegistry":
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset singleton (for testing)."""
        cls._instance = None

    def validate(self) -> None:
        """
        Check that every advertised function is routable.

        Raises:
            RegistryError: on duplicate names, unmapped names or empty routes
        """
        seen = set()
        for descriptor in self._descriptors:
            if descriptor.name in seen:
                raise RegistryError(f"Duplicate function name: {descriptor.name}")
            seen.add(descriptor.name)

        missing = [name for name in seen if name not in self._mapping]
        if missing:
            raise RegistryError(f"Functions without a backend route: {sorted(missing)}")

        for name, route in self._mapping.items():
            if not route or not route.strip("/"):
                raise RegistryError(f"Empty backend route for function: {name}")

    def resolve(self, name: str) -> str:
        """
        Resolve a short name to its backend route.

        Raises:
            UnknownFunctionError: if the LLM invoked an unregistered name
        """
        route = self._mapping.get(name)
        if route is None:
            raise UnknownFunctionError(f"Function not registered: {name!r}")
        return route

    def descriptors(self) -> List[FunctionDescriptor]:
        """Get all descriptors in declaration order."""
        return list(self._descriptors)

    def names(self) -> List[str]:
        return [d.name for d in self._descriptors]

    def routes(self) -> Dict[str, str]:
        return dict(self._mapping)

    def as_llm_functions(self) -> List[Dict[str, Any]]:
        """Descriptor payload for the `functions` field of a chat completion."""
        return [d.to_dict() for d in self._descriptors]


def get_registry() -> FunctionRegistry:
    """Get the process-wide registry."""
    return FunctionRegistry.get_instance()
