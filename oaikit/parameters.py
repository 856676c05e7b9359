"""Description of a single parameter of a callable function."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FunctionParameter:
    """A function parameter: its name, JSON type, description and optional enum."""

    name: str = ""
    type: str = ""
    description: str = ""
    enumeration: list[str] | None = field(default=None)

    def __post_init__(self) -> None:
        if self.enumeration is not None:
            self.enumeration = list(self.enumeration)

    def to_schema(self) -> dict[str, Any]:
        """Return the JSON schema fragment stored under the parameter's name."""
        schema: dict[str, Any] = {"description": self.description}
        if self.enumeration is not None:
            schema["enum"] = list(self.enumeration)
        schema["type"] = self.type
        return schema