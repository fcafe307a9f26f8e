"""Pydantic model for a single match returned by the grammar checker.

Offsets always refer to the exact text that was sent (or, after
``decode_offsets``, to the text before the checker encoding was applied).
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import DiagnosticCategory

MAX_REPLACEMENTS = 20


class CheckMatch(BaseModel):
    """One flagged span reported by the checker service."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    offset: int = Field(ge=0)
    length: int = Field(ge=0)
    replacements: List[str] = Field(default_factory=list)
    category: DiagnosticCategory = DiagnosticCategory.OTHER
    rule_id: str = ""
    message: str = ""
    short_message: str = ""

    @field_validator("replacements", mode="before")
    def _normalise_replacements(cls, value: object) -> List[str]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            cleaned = [str(x) for x in value if str(x).strip()]
        else:
            cleaned = [str(value)]
        return cleaned[:MAX_REPLACEMENTS]

    @field_validator("category", mode="before")
    def _coerce_category(cls, value: object) -> DiagnosticCategory:
        if isinstance(value, DiagnosticCategory):
            return value
        return DiagnosticCategory(str(value or ""))

    @field_validator("rule_id", "message", "short_message", mode="before")
    def _strip_strings(cls, value: object) -> str:
        return str(value or "").strip()

    @property
    def end(self) -> int:
        return self.offset + self.length

    def shifted(self, delta: int) -> "CheckMatch":
        """Return a copy with ``offset`` moved by ``delta``."""

        return self.model_copy(update={"offset": self.offset + delta})
