import math
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from typing_extensions import Annotated, TypedDict
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    FiniteFloat,
    StringConstraints,
    field_validator,
    model_validator,
)

from invisinsights.models.intents import Intent
from invisinsights.utils.text_utils import clamp_unit, clean_feedback, join_feedback

DEFAULT_CONFIDENCE_THRESHOLD = 0.6
DEFAULT_BOOLEAN_THRESHOLD = 0.5

ExternalId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class QuestionType(str, Enum):
    TEXT = "text"
    BOOLEAN = "boolean"
    SCALE = "scale"


def normalize_question_type(value) -> str:
    return str(value or "").strip().lower()


def _number_or_default(value, default: float) -> float:
    # Legacy configs carry thresholds of any shape; only real numbers override the default.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        number = float(value)
    except OverflowError:
        return default
    if not math.isfinite(number):
        return default
    return number


class BaseQuestion(BaseModel):
    """Fields shared by every normalized survey question"""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    question_id: ExternalId = Field(description="Survey-platform question identifier")
    page_id: Optional[ExternalId] = Field(default=None, description="Page containing the question")
    intent: Intent = Field(
        validation_alias=AliasChoices("intent", "inferred_intent"),
        description="Behavioural category the question measures"
    )
    question_text: Optional[str] = Field(default=None, description="Question heading, informational only")


class TextQuestion(BaseQuestion):
    """Open-ended question answered with the collected free-text feedback"""
    type: Literal["text"] = "text"
    confidence_threshold: float = Field(
        default=DEFAULT_CONFIDENCE_THRESHOLD,
        description="Minimum confidence required before answering"
    )

    @field_validator("confidence_threshold", mode="before")
    @classmethod
    def _threshold_or_default(cls, value):
        return _number_or_default(value, DEFAULT_CONFIDENCE_THRESHOLD)


class BooleanQuestion(BaseQuestion):
    """Two-option question; the score picks a side of the threshold"""
    type: Literal["boolean"] = "boolean"
    true_choice_id: ExternalId
    false_choice_id: ExternalId
    threshold: float = Field(default=DEFAULT_BOOLEAN_THRESHOLD)

    @field_validator("threshold", mode="before")
    @classmethod
    def _threshold_or_default(cls, value):
        return _number_or_default(value, DEFAULT_BOOLEAN_THRESHOLD)


class ScaleQuestion(BaseQuestion):
    """Ordered multi-option or matrix question"""
    type: Literal["scale"] = "scale"
    scale_min: FiniteFloat
    scale_max: FiniteFloat
    choice_ids: Dict[str, ExternalId] = Field(min_length=1, description="Scale value -> choice identifier")
    row_id: Optional[ExternalId] = Field(default=None, description="Matrix row the answer belongs to")

    @field_validator("scale_min", "scale_max", mode="before")
    @classmethod
    def _bound_in_float_range(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                float(value)
            except OverflowError:
                raise ValueError("scale bound is out of range") from None
        return value

    @field_validator("choice_ids")
    @classmethod
    def _integer_keys(cls, value: Dict[str, str]) -> Dict[str, str]:
        normalized = {}
        for key, choice_id in value.items():
            try:
                normalized[str(int(str(key).strip()))] = choice_id
            except ValueError:
                raise ValueError(f"choice_ids key {key!r} is not an integer") from None
        return normalized

    @model_validator(mode="after")
    def _distinct_bounds(self) -> "ScaleQuestion":
        if self.scale_min == self.scale_max:
            raise ValueError("scale_min and scale_max must differ")
        return self


QuestionSchema = Annotated[
    Union[TextQuestion, BooleanQuestion, ScaleQuestion],
    Field(discriminator="type")
]


class SurveyConfig(BaseModel):
    """A survey bound to a collector together with its normalized questions"""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    survey_id: ExternalId
    collector_id: ExternalId
    page_id: ExternalId = Field(description="Default page for questions without their own")
    questions: List[QuestionSchema] = Field(min_length=1)

    @field_validator("questions", mode="before")
    @classmethod
    def _normalize_types(cls, value):
        if not isinstance(value, list):
            raise ValueError("questions must be a list")
        normalized = []
        for question in value:
            if isinstance(question, BaseModel):
                question = question.model_dump()
            if isinstance(question, dict):
                question = {**question, "type": normalize_question_type(question.get("type"))}
            normalized.append(question)
        return normalized

    @model_validator(mode="after")
    def _inherit_page(self) -> "SurveyConfig":
        for question in self.questions:
            if question.page_id is None:
                question.page_id = self.page_id
        return self

    @property
    def intents(self) -> List[Intent]:
        """Distinct intents referenced by the questions, in first-seen order"""
        seen = []
        for question in self.questions:
            if question.intent not in seen:
                seen.append(question.intent)
        return seen

    def question_pages(self) -> Dict[str, str]:
        return {question.question_id: question.page_id for question in self.questions}


def _read_unit_map(raw) -> Dict[Intent, float]:
    values = {}
    if not isinstance(raw, dict):
        return values
    for name, value in raw.items():
        try:
            intent = Intent.parse(name)
        except ValueError:
            continue
        clamped = clamp_unit(value)
        if clamped is not None:
            values[intent] = clamped
    return values


class IntentScores(BaseModel):
    """Per-intent scores and confidences reported by the reasoning service"""
    scores: Dict[Intent, float] = Field(default_factory=dict)
    confidence: Dict[Intent, float] = Field(default_factory=dict)
    open_feedback: List[str] = Field(default_factory=list)

    @classmethod
    def from_analysis(cls, analysis: Any) -> "IntentScores":
        """Convert untrusted reasoning-service JSON into typed scores.

        Unknown intents are dropped, non-numeric and non-finite values are treated
        as absent and everything else is clamped into [0, 1].
        """
        if not isinstance(analysis, dict):
            return cls()
        return cls(
            scores=_read_unit_map(analysis.get("intent_scores")),
            confidence=_read_unit_map(analysis.get("confidence")),
            open_feedback=clean_feedback(analysis.get("open_feedback"))
        )

    def score_for(self, intent: Intent) -> Optional[float]:
        return clamp_unit(self.scores.get(intent))

    def confidence_for(self, intent: Intent) -> Optional[float]:
        return clamp_unit(self.confidence.get(intent))

    def feedback_text(self) -> str:
        return join_feedback(self.open_feedback)


class Answer(BaseModel):
    choice_id: Optional[str] = None
    text: Optional[str] = None
    row_id: Optional[str] = None


class AnswerRecord(BaseModel):
    """Synthesized answer for a single question"""
    question_id: str = Field(serialization_alias="id")
    row_id: Optional[str] = None
    answers: List[Answer]


class PagePayload(BaseModel):
    page_id: str = Field(serialization_alias="id")
    questions: List[AnswerRecord]


class SubmissionPayload(BaseModel):
    """Response body accepted by the survey platform's collector endpoint"""
    response_status: Literal["completed"] = "completed"
    pages: List[PagePayload]

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProjectConnection(BaseModel):
    """Survey config associated with a project plus the token used to submit"""
    config: SurveyConfig
    access_token: Optional[str] = None


class AnalysisState(TypedDict, total=False):
    """State for the session analysis workflow"""
    session: Dict[str, Any]
    connection: ProjectConnection
    raw_analysis: Optional[Dict[str, Any]]
    scores: Optional[IntentScores]
    payload: Optional[SubmissionPayload]
    submitted: bool
