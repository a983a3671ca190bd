from typing import Any, Dict, Optional
import logging
from pydantic import ValidationError
from invisinsights.errors import SchemaValidationError
from invisinsights.models.state import SurveyConfig

logger = logging.getLogger(__name__)


def _describe(error: Dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "config"
    return f"{location}: {error.get('msg', 'invalid')}"


class SchemaValidator:
    """Single acceptance gate for survey configs, hand-authored or auto-mapped alike"""

    def validate(self, candidate: Any) -> SurveyConfig:
        """Validate a survey config as a unit.

        Raises SchemaValidationError if any identifier is missing, the question list
        is empty, or any question fails its type-specific rules. Nothing is ever
        partially accepted.
        """
        if isinstance(candidate, SurveyConfig):
            candidate = candidate.model_dump()

        if not isinstance(candidate, dict):
            logger.warning("Survey config rejected: not an object")
            raise SchemaValidationError("Survey config must be an object", ["config: not an object"])

        try:
            config = SurveyConfig.model_validate(candidate)
        except ValidationError as e:
            problems = [_describe(error) for error in e.errors()]
            logger.warning(f"Survey config rejected: {'; '.join(problems)}")
            raise SchemaValidationError("Survey config failed validation", problems) from e

        logger.debug(f"Accepted survey config {config.survey_id} with {len(config.questions)} questions")
        return config

    def normalize(self, candidate: Any) -> Optional[SurveyConfig]:
        """Like validate, but returns None instead of raising"""
        try:
            return self.validate(candidate)
        except SchemaValidationError:
            return None
