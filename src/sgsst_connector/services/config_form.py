"""
Configuration form served to the reporting host.

The host renders the form and sends the answers back as ``configParams``. Input
ids are the normalised labels, so ``"Company ID"`` is answered under
``company_id``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ..config import DEFAULT_ENDPOINT
from ..core.naming import normalize_identifier

INSTRUCTIONS = "Enter your API credentials and select the fields you want to display."


@dataclass(frozen=True, slots=True)
class TextInput:
    label: str
    help_text: str
    required: bool = True
    allow_override: bool = True

    @property
    def input_id(self) -> str:
        return normalize_identifier(self.label)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "TEXTINPUT",
            "id": self.input_id,
            "name": f"{self.label} *" if self.required else self.label,
            "helpText": self.help_text,
            "allowOverride": self.allow_override,
        }


def default_inputs(default_endpoint: str = DEFAULT_ENDPOINT) -> Sequence[TextInput]:
    return (
        TextInput("Company ID", "Enter your Company ID", allow_override=False),
        TextInput("Username", "Enter your API username", allow_override=False),
        TextInput("Password", "Enter your API password", allow_override=False),
        TextInput("Endpoint", f"Enter the endpoint for fetching siag data. Default is {default_endpoint}"),
    )


def build_config(inputs: Sequence[TextInput]) -> Dict[str, List[Dict[str, Any]]]:
    """Render the info block followed by ``inputs`` in the host's config shape."""

    entries: List[Dict[str, Any]] = [{"type": "INFO", "id": "instructions", "text": INSTRUCTIONS}]
    entries.extend(item.to_dict() for item in inputs)
    return {"configParams": entries}


__all__ = ["INSTRUCTIONS", "TextInput", "build_config", "default_inputs"]
