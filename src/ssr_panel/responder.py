"""Per-question dispatch and per-persona question runs."""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

import numpy as np

from .errors import ParseError
from .generation import ResponseGenerator
from .models import (
    Persona,
    ProductContext,
    QuestionCondition,
    SimulationMetadata,
    SimulationResult,
    SSRResponse,
    SurveyQuestion,
)
from .ssr import SimilarityMapper

logger = logging.getLogger(__name__)

MULTIPLE_CHOICE_CONFIDENCE = 0.9

_CHOICE_PATTERN = re.compile(
    r"^\s*(\d+)|choose\s*(\d+)|option\s*(\d+)|pick\s*(\d+)", re.IGNORECASE
)


def parse_choice(text: str, option_count: int) -> int:
    """Return the 1-based option number chosen in ``text``.

    Raises ``ParseError`` when no number is found or it is out of range.
    """

    match = _CHOICE_PATTERN.search(text)
    if not match:
        raise ParseError("No option number found in multiple-choice answer")
    choice = int(next(group for group in match.groups() if group is not None))
    if not 1 <= choice <= option_count:
        raise ParseError(f"Option {choice} is outside 1..{option_count}")
    return choice


def _text_matches(response: SSRResponse, needle: str) -> bool:
    needle = needle.lower()
    return needle in response.explanation.lower() or needle in response.raw_text_response.lower()


def _as_number(value: object) -> Optional[float]:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def evaluate_condition(response: SSRResponse, condition: QuestionCondition) -> bool:
    """Check whether an earlier answer satisfies a show-if condition."""

    operator = condition.operator
    value = condition.value

    if operator in ("equals", "not_equals"):
        if isinstance(value, (int, float)):
            matched = response.rating == value
        else:
            number = _as_number(value)
            matched = (number is not None and response.rating == number) or _text_matches(
                response, str(value)
            )
        return matched if operator == "equals" else not matched

    if operator in ("greater_than", "less_than"):
        number = _as_number(value)
        if number is None:
            return False
        if operator == "greater_than":
            return response.rating > number
        return response.rating < number

    if operator == "contains":
        return _text_matches(response, str(value))

    return True


def _skipped(question: SurveyQuestion, condition: QuestionCondition) -> SSRResponse:
    return SSRResponse(
        question_id=question.id,
        rating=0,
        explanation="",
        confidence=0.0,
        raw_text_response="",
        skipped=True,
        skip_reason=f"Condition not met: {condition.describe()}",
    )


class QuestionResponder:
    """Answer survey questions for a persona, one question type at a time."""

    def __init__(self, generator: ResponseGenerator, mapper: SimilarityMapper) -> None:
        self._generator = generator
        self._mapper = mapper

    @property
    def model_name(self) -> str:
        return self._generator.model_name

    async def respond(
        self,
        persona: Persona,
        question: SurveyQuestion,
        product_context: Optional[ProductContext] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> SSRResponse:
        if question.type == "open_ended":
            text = await self._generator.generate_text(persona, question, product_context)
            return SSRResponse(
                question_id=question.id,
                rating=0,
                explanation=text,
                confidence=1.0,
                raw_text_response=text,
            )

        if question.type == "multiple_choice":
            return await self._respond_choice(persona, question, product_context)

        text = await self._generator.generate_text(persona, question, product_context)
        rating = await self._mapper.map_to_rating(text, question, rng)
        return SSRResponse(
            question_id=question.id,
            rating=rating.rating,
            explanation=text,
            confidence=rating.confidence,
            raw_text_response=text,
            distribution=rating.distribution.tolist(),
        )

    async def _respond_choice(
        self,
        persona: Persona,
        question: SurveyQuestion,
        product_context: Optional[ProductContext],
    ) -> SSRResponse:
        text = await self._generator.generate_choice(persona, question, product_context)
        try:
            choice = parse_choice(text, len(question.options or []))
        except ParseError as exc:
            logger.warning(
                "Defaulting to option 1 for persona %s question %s: %s",
                persona.id,
                question.id,
                exc,
            )
            choice = 1
        return SSRResponse(
            question_id=question.id,
            rating=choice,
            explanation=text,
            confidence=MULTIPLE_CHOICE_CONFIDENCE,
            raw_text_response=text,
        )

    async def simulate_persona(
        self,
        persona: Persona,
        questions: Sequence[SurveyQuestion],
        product_context: Optional[ProductContext] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> SimulationResult:
        """Answer every question for one persona, strictly in order.

        ``rng`` drives every rating draw for this persona and defaults to the
        mapper's own generator.
        """

        start = time.perf_counter()
        responses: List[SSRResponse] = []
        answered: Dict[str, SSRResponse] = {}

        for question in questions:
            condition = question.show_if
            if condition is not None:
                reference = answered.get(condition.question_id)
                if reference is None or not evaluate_condition(reference, condition):
                    responses.append(_skipped(question, condition))
                    continue

            response = await self.respond(persona, question, product_context, rng)
            responses.append(response)
            answered[question.id] = response

        return SimulationResult(
            persona_id=persona.id,
            responses=responses,
            metadata=SimulationMetadata(
                model_used=self.model_name,
                timestamp=datetime.now(timezone.utc).isoformat(),
                processing_time_ms=int((time.perf_counter() - start) * 1000),
            ),
        )


__all__ = [
    "MULTIPLE_CHOICE_CONFIDENCE",
    "QuestionResponder",
    "evaluate_condition",
    "parse_choice",
]
