from __future__ import annotations

import base64
import mimetypes
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# ---------------------------
# Decision input
# ---------------------------

class Criterion(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    weight: int = 5  # 1-10
    description: Optional[str] = None


class Attachment(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str = "attachment"
    mime_type: str
    data: str  # base64, no "data:" prefix

    @classmethod
    def from_path(cls, path: str | Path, attachment_id: str | None = None) -> "Attachment":
        p = Path(path)
        mime, _ = mimetypes.guess_type(p.name)
        return cls(
            id=attachment_id or p.stem,
            name=p.name,
            mime_type=mime or "application/octet-stream",
            data=base64.b64encode(p.read_bytes()).decode("ascii"),
        )


class Option(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    attachments: List[Attachment] = Field(default_factory=list)


class DecisionSpec(BaseModel):
    title: str
    description: str = ""
    criteria: List[Criterion] = Field(default_factory=list)
    options: List[Option] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self) -> "DecisionSpec":
        for label, items in (("criterion", self.criteria), ("option", self.options)):
            seen: set[str] = set()
            for it in items:
                if it.id in seen:
                    raise ValueError(f"Duplicate {label} id: {it.id!r}")
                seen.add(it.id)
        return self


# ---------------------------
# Model request (what the invoker receives)
# ---------------------------

class ContentPart(BaseModel):
    """Either plain text or an inline binary payload tagged with a MIME type."""

    text: Optional[str] = None
    mime_type: Optional[str] = None
    data: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_inline_data(self) -> bool:
        return self.data is not None


class ModelMessage(BaseModel):
    role: Literal["system", "user"]
    parts: List[ContentPart] = Field(default_factory=list)


class ModelRequest(BaseModel):
    model: str
    messages: List[ModelMessage]
    temperature: Optional[float] = 0.15
    response_mime_type: str = "text/plain"


# ---------------------------
# Analysis result (what the caller receives)
# ---------------------------

class _ResultModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CriterionScore(_ResultModel):
    criteria_id: str = ""
    score: int = Field(0, ge=0, le=100)
    reasoning: str = ""
    confidence: Optional[int] = Field(None, ge=0, le=100)


class OptionAnalysis(_ResultModel):
    option_id: str
    criteria_analysis: List[CriterionScore] = Field(default_factory=list)
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)


class AnalysisResult(_ResultModel):
    analysis: List[OptionAnalysis] = Field(default_factory=list)
    verdict: str = ""
    winner_id: str = ""
    recommendation: str = ""

    # optional extras the model sometimes adds
    summary: Optional[str] = None
    top_risks: Optional[List[str]] = None
    next_steps: Optional[List[str]] = None

    def option_ids(self) -> List[str]:
        return [a.option_id for a in self.analysis]

    def get(self, option_id: str) -> Optional[OptionAnalysis]:
        for a in self.analysis:
            if a.option_id == option_id:
                return a
        return None
