"""Pydantic models for engine inputs and outputs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

QuestionType = Literal["likert", "nps", "multiple_choice", "ranking", "open_ended"]
ConditionOperator = Literal[
    "equals", "not_equals", "greater_than", "less_than", "contains"
]

SCALED_TYPES = frozenset({"likert", "nps", "ranking"})


class Demographics(BaseModel):
    model_config = ConfigDict(frozen=True)

    age: int = Field(ge=0)
    gender: str
    location: str
    income: str
    education: str
    occupation: str


class Psychographics(BaseModel):
    model_config = ConfigDict(frozen=True)

    values: List[str] = Field(default_factory=list)
    lifestyle: str = ""
    interests: List[str] = Field(default_factory=list)
    personality: str = ""


class PersonaContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    industry: Optional[str] = None
    role: Optional[str] = None
    product_experience: Optional[str] = None
    brand_affinity: List[str] = Field(default_factory=list)


class Persona(BaseModel):
    """Simulated respondent profile; read-only to the engine."""

    model_config = ConfigDict(frozen=True)

    id: str
    demographics: Demographics
    psychographics: Psychographics = Field(default_factory=Psychographics)
    context: PersonaContext = Field(default_factory=PersonaContext)


class ScaleAnchors(BaseModel):
    model_config = ConfigDict(frozen=True)

    low: str
    high: str
    labels: Optional[List[str]] = None


class QuestionCondition(BaseModel):
    """Show a question only when an earlier answer satisfies this rule."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    operator: ConditionOperator
    value: Union[int, float, str]

    def describe(self) -> str:
        return f"Question {self.question_id} {self.operator} {self.value}"


class SurveyQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: QuestionType
    text: str
    options: Optional[List[str]] = None
    scale_min: Optional[int] = None
    scale_max: Optional[int] = None
    scale_anchors: Optional[ScaleAnchors] = None
    show_if: Optional[QuestionCondition] = None

    @model_validator(mode="after")
    def _check_options(self) -> "SurveyQuestion":
        if self.type == "multiple_choice" and not self.options:
            raise ValueError(
                f"Question {self.id} is multiple_choice but defines no options"
            )
        return self

    @property
    def is_scaled(self) -> bool:
        return self.type in SCALED_TYPES


class ProductContext(BaseModel):
    """Product or service every persona in the panel is asked about."""

    model_config = ConfigDict(frozen=True)

    product_name: Optional[str] = None
    product_description: Optional[str] = None
    brand_name: Optional[str] = None
    industry: Optional[str] = None
    product_category: Optional[str] = None
    custom_context_instructions: Optional[str] = None

    def has_product(self) -> bool:
        return bool(self.product_name or self.product_description)


class SSRResponse(BaseModel):
    question_id: str
    rating: int
    explanation: str
    confidence: float = Field(ge=0.0, le=1.0)
    raw_text_response: str
    distribution: Optional[List[float]] = None
    skipped: bool = False
    skip_reason: Optional[str] = None


class SimulationMetadata(BaseModel):
    model_used: str
    timestamp: str
    processing_time_ms: int = Field(ge=0)


class SimulationResult(BaseModel):
    persona_id: str
    responses: List[SSRResponse]
    metadata: SimulationMetadata


class PanelSimulationOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: List[SimulationResult]
    cancelled: bool = False


class PanelSimulationRequest(BaseModel):
    personas: List[Persona] = Field(min_length=1)
    questions: List[SurveyQuestion] = Field(min_length=1)
    product_context: Optional[ProductContext] = None
    concurrency_limit: Optional[int] = Field(default=None, ge=1, le=64)


@dataclass(slots=True)
class RatingResult:
    """Rating sampled from the anchor-similarity distribution."""

    rating: int
    distribution: np.ndarray
    confidence: float


__all__ = [
    "ConditionOperator",
    "Demographics",
    "PanelSimulationOutcome",
    "PanelSimulationRequest",
    "Persona",
    "PersonaContext",
    "ProductContext",
    "Psychographics",
    "QuestionCondition",
    "QuestionType",
    "RatingResult",
    "SCALED_TYPES",
    "ScaleAnchors",
    "SimulationMetadata",
    "SimulationResult",
    "SSRResponse",
    "SurveyQuestion",
]
