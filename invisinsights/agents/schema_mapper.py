from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from pydantic import ValidationError

from invisinsights.agents.label_heuristics import KeywordLabelHeuristics, LabelHeuristics
from invisinsights.agents.schema_validator import SchemaValidator
from invisinsights.errors import MappingError
from invisinsights.models.intents import Intent
from invisinsights.models.state import QuestionType, SurveyConfig
from invisinsights.models.survey_definition import RawChoice, RawPage, RawQuestion, SurveyDetails
from invisinsights.utils.text_utils import extract_integer, extract_question_text

logger = logging.getLogger(__name__)


def build_choice_map(choices: Sequence[RawChoice]) -> Tuple[Dict[str, str], int, int]:
    """Map scale values to choice identifiers.

    When every label carries an integer ("1 - Strongly Disagree") those integers
    are the scale values. Otherwise options are numbered 1..n by position.
    """
    values = [extract_integer(choice.text) for choice in choices]
    if choices and all(value is not None for value in values):
        choice_map = {str(value): choice.id for value, choice in zip(values, choices)}
        return choice_map, min(values), max(values)

    choice_map = {str(index): choice.id for index, choice in enumerate(choices, start=1)}
    return choice_map, 1, len(choices)


class SchemaAutoMapper:
    """Infers a survey config from a raw survey-platform definition"""

    def __init__(self,
                 heuristics: Optional[LabelHeuristics] = None,
                 validator: Optional[SchemaValidator] = None):
        self.heuristics = heuristics or KeywordLabelHeuristics()
        self.validator = validator or SchemaValidator()

    def auto_map(self, survey_id: str, collector_id: str, raw_definition: Any) -> SurveyConfig:
        """Build and validate a survey config.

        Raises MappingError when the definition has no pages and
        SchemaValidationError when the inferred config is not acceptable.
        """
        details = self._parse_definition(raw_definition)
        if not details.pages:
            raise MappingError("Survey definition has no pages")

        questions = []
        for page in details.pages:
            for question in page.questions:
                mapped = self.map_question(page, question)
                if mapped is not None:
                    questions.append(mapped)

        logger.info(f"Auto-mapped {len(questions)} questions from survey {survey_id}")
        candidate = {
            "survey_id": survey_id,
            "collector_id": collector_id,
            "page_id": details.pages[0].id,
            "questions": questions
        }
        return self.validator.validate(candidate)

    def map_question(self, page: RawPage, question: RawQuestion) -> Optional[Dict[str, Any]]:
        """Map a single raw question, or return None for unsupported families"""
        if not question.id:
            return None

        text = extract_question_text(question)
        base = {"question_id": question.id, "page_id": page.id, "question_text": text}
        choices = question.answers.choices

        if question.family == "open_ended":
            return {**base, "type": QuestionType.TEXT.value, "intent": Intent.OPEN_FEEDBACK}

        if question.family == "single_choice" and len(choices) == 2:
            true_choice_id, false_choice_id = self.heuristics.resolve_polarity(choices)
            return {
                **base,
                "type": QuestionType.BOOLEAN.value,
                "true_choice_id": true_choice_id,
                "false_choice_id": false_choice_id,
                "intent": self.heuristics.infer_intent(text, QuestionType.BOOLEAN)
            }

        if question.family == "single_choice" and len(choices) > 2:
            return self._scale_question(base, text, choices)

        if question.family == "matrix" and choices:
            rows = question.answers.rows
            row_id = rows[0].id if rows else None
            return self._scale_question(base, text, choices, row_id=row_id)

        logger.debug(f"Skipping question {question.id} with family {question.family!r}")
        return None

    def _scale_question(self, base: Dict[str, Any], text: str, choices: List[RawChoice],
                        row_id: Optional[str] = None) -> Dict[str, Any]:
        choice_map, scale_min, scale_max = build_choice_map(choices)
        mapped = {
            **base,
            "type": QuestionType.SCALE.value,
            "scale_min": scale_min,
            "scale_max": scale_max,
            "choice_ids": choice_map,
            "intent": self.heuristics.infer_intent(text, QuestionType.SCALE)
        }
        if row_id:
            mapped["row_id"] = row_id
        return mapped

    def _parse_definition(self, raw_definition: Any) -> SurveyDetails:
        if isinstance(raw_definition, SurveyDetails):
            return raw_definition
        if not isinstance(raw_definition, dict):
            raise MappingError("Survey definition must be an object")
        try:
            return SurveyDetails.model_validate(raw_definition)
        except ValidationError as e:
            raise MappingError(f"Survey definition is malformed: {e}") from e
