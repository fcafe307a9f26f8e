"""Final, original-coordinate-mapped finding handed to the editor.

The column span addresses UTF-8 bytes of the original line so the result can
be used directly as an editor highlight range.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .check_match import MAX_REPLACEMENTS
from .enums import DiagnosticCategory, SegmentKind


class Diagnostic(BaseModel):
    """A single issue located on one line of the original source file.

    Contract:
    - line_number: 1-based line in the original file
    - start_column/end_column: byte range of ``original`` on that line
    - original: the flagged excerpt exactly as it appears in the file
    - options: up to 20 suggested replacements
    - category: LanguageTool category of the rule that fired
    - segment_kind: kind of segment the finding originated from
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    line_number: int = Field(ge=1)
    start_column: int = Field(ge=0)
    end_column: int = Field(ge=1)
    original: str
    options: List[str] = Field(default_factory=list)
    category: DiagnosticCategory = DiagnosticCategory.OTHER
    segment_kind: SegmentKind = SegmentKind.COMMENT
    rule_id: str = ""
    message: str = ""

    @field_validator("options", mode="before")
    def _normalise_options(cls, value: object) -> List[str]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(x) for x in value if str(x).strip()]
        return [str(value)]

    @model_validator(mode="after")
    def final_checks(self) -> "Diagnostic":
        if self.start_column >= self.end_column:
            raise ValueError("start_column must be smaller than end_column")
        if not self.original:
            raise ValueError("original must not be empty")
        return self

    @property
    def key(self) -> tuple[int, int, int]:
        """Identity used for de-duplication."""

        return (self.line_number, self.start_column, self.end_column)

    def with_options_limit(self, limit: int = MAX_REPLACEMENTS) -> "Diagnostic":
        if len(self.options) <= limit:
            return self
        return self.model_copy(update={"options": list(self.options[:limit])})
