import math
from typing import Optional, Union
import logging

from invisinsights.errors import EncodingError
from invisinsights.models.state import (
    Answer,
    AnswerRecord,
    BooleanQuestion,
    IntentScores,
    QuestionType,
    ScaleQuestion,
    TextQuestion,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def map_score_to_scale(score: float, scale_min: float, scale_max: float) -> Union[int, float]:
    """Linear map of a unit score onto [scale_min, scale_max], rounded and clamped"""
    raw = scale_min + (scale_max - scale_min) * score
    low, high = min(scale_min, scale_max), max(scale_min, scale_max)
    return min(high, max(low, round_half_up(raw)))


def scale_key(value: Union[int, float]) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class AnswerSynthesizer:
    """Turns intent scores into a concrete answer for one question.

    Returns None when the signal is absent or too weak; that is a deliberate
    omission, not a failure. EncodingError means the schema itself is broken.
    """

    def synthesize(self, scores: IntentScores, question) -> Optional[AnswerRecord]:
        try:
            question_type = QuestionType(question.type)
        except ValueError:
            raise EncodingError(f"Unsupported question type {question.type!r}") from None

        if question_type == QuestionType.TEXT:
            return self._synthesize_text(scores, question)
        if question_type == QuestionType.BOOLEAN:
            return self._synthesize_boolean(scores, question)
        return self._synthesize_scale(scores, question)

    def _synthesize_text(self, scores: IntentScores, question: TextQuestion) -> Optional[AnswerRecord]:
        confidence = scores.confidence_for(question.intent)
        if confidence is not None and confidence < question.confidence_threshold:
            logger.debug(f"Withholding text answer for {question.question_id}: confidence {confidence}")
            return None

        text = scores.feedback_text()
        if not text:
            return None
        return AnswerRecord(question_id=question.question_id, answers=[Answer(text=text)])

    def _synthesize_boolean(self, scores: IntentScores, question: BooleanQuestion) -> Optional[AnswerRecord]:
        score = scores.score_for(question.intent)
        if score is None:
            return None

        choice_id = question.true_choice_id if score >= question.threshold else question.false_choice_id
        if not choice_id:
            raise EncodingError(f"Boolean choice IDs missing for question {question.question_id}")
        return AnswerRecord(question_id=question.question_id, answers=[Answer(choice_id=choice_id)])

    def _synthesize_scale(self, scores: IntentScores, question: ScaleQuestion) -> Optional[AnswerRecord]:
        score = scores.score_for(question.intent)
        if score is None:
            return None

        value = map_score_to_scale(score, question.scale_min, question.scale_max)
        choice_id = (question.choice_ids or {}).get(scale_key(value))
        if not choice_id:
            raise EncodingError(
                f"Scale choice ID not resolved for question {question.question_id} (value {scale_key(value)})"
            )

        answer = Answer(choice_id=choice_id, row_id=question.row_id or None)
        return AnswerRecord(question_id=question.question_id, row_id=question.row_id or None, answers=[answer])
