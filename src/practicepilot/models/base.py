"""
Shared pydantic base for every value object the engine produces.

Fields are snake_case in Python and camelCase on the wire, so the same
models can be handed straight to a JSON rendering layer.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """BaseModel that accepts and emits camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        """Export as camelCase JSON."""
        return self.model_dump_json(indent=2, by_alias=True)

    def to_dict(self) -> dict[str, Any]:
        """Export as a JSON-compatible dictionary."""
        return self.model_dump(by_alias=True, mode="json")
