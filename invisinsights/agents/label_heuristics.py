from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Tuple
import logging

from invisinsights.models.intents import Intent
from invisinsights.models.state import QuestionType
from invisinsights.models.survey_definition import RawChoice
from invisinsights.utils.text_utils import contains_any

logger = logging.getLogger(__name__)

# Checked in order, first match wins.
INTENT_KEYWORDS: List[Tuple[Intent, Tuple[str, ...]]] = [
    (Intent.CONFUSION_LEVEL, ("confus", "unclear", "confusing")),
    (Intent.FRUSTRATION_LEVEL, ("frustrat", "annoy", "angry")),
    (Intent.TRUST_CONFIDENCE, ("trust", "confiden", "secure", "safe")),
    (Intent.EASE_OF_USE, ("easy", "ease", "simple", "usable")),
    (Intent.LIKELIHOOD_TO_CONTINUE, ("recommend", "likely", "continue", "return")),
    (Intent.OVERALL_SATISFACTION, ("satisf", "overall", "experience")),
]

# Fallback intent when no keyword matches.
DEFAULT_INTENTS: Dict[QuestionType, Intent] = {
    QuestionType.TEXT: Intent.OPEN_FEEDBACK,
    QuestionType.BOOLEAN: Intent.CONFUSION_LEVEL,
    QuestionType.SCALE: Intent.OVERALL_SATISFACTION,
}

NEGATIVE_MARKERS: Tuple[str, ...] = ("no", "false")


class LabelHeuristics(ABC):
    """Infers intent and answer polarity from survey label text"""

    @abstractmethod
    def infer_intent(self, text: str, question_type: QuestionType) -> Intent:
        """Return the intent a question with this label most likely measures"""
        pass

    @abstractmethod
    def resolve_polarity(self, choices: Sequence[RawChoice]) -> Tuple[str, str]:
        """Return (true_choice_id, false_choice_id) for a two-option question"""
        pass


class KeywordLabelHeuristics(LabelHeuristics):
    """Case-insensitive substring matching over label text.

    Polarity: if exactly one of the two options carries a negative marker it becomes
    the false choice. Otherwise the result depends on `first_option_is_true`.
    """

    def __init__(self,
                 intent_keywords: Sequence[Tuple[Intent, Sequence[str]]] = INTENT_KEYWORDS,
                 negative_markers: Sequence[str] = NEGATIVE_MARKERS,
                 first_option_is_true: bool = True):
        self.intent_keywords = list(intent_keywords)
        self.negative_markers = tuple(marker.lower() for marker in negative_markers)
        self.first_option_is_true = first_option_is_true

    def infer_intent(self, text: str, question_type: QuestionType) -> Intent:
        question_type = QuestionType(question_type)
        if question_type == QuestionType.TEXT:
            return DEFAULT_INTENTS[QuestionType.TEXT]

        for intent, keywords in self.intent_keywords:
            if contains_any(text, keywords):
                return intent
        return DEFAULT_INTENTS[question_type]

    def resolve_polarity(self, choices: Sequence[RawChoice]) -> Tuple[str, str]:
        if len(choices) != 2:
            raise ValueError(f"Polarity needs exactly two options, got {len(choices)}")

        first, second = choices
        first_is_false = contains_any(first.text, self.negative_markers)
        second_is_false = contains_any(second.text, self.negative_markers)

        if first_is_false and not second_is_false:
            return second.id, first.id
        if second_is_false and not first_is_false:
            return first.id, second.id

        logger.debug(f"Ambiguous polarity for options {first.text!r}/{second.text!r}, using fallback")
        if self.first_option_is_true:
            return first.id, second.id
        return second.id, first.id
