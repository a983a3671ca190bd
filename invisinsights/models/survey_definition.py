from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _dicts_only(value) -> list:
    # Platform payloads occasionally carry nulls or scalars inside lists; skip them.
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class RawChoice(RawModel):
    id: Optional[str] = None
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def _text_or_empty(cls, value):
        return "" if value is None else str(value)


class RawRow(RawModel):
    id: Optional[str] = None
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def _text_or_empty(cls, value):
        return "" if value is None else str(value)


class RawAnswers(RawModel):
    choices: List[RawChoice] = Field(default_factory=list)
    rows: List[RawRow] = Field(default_factory=list)

    @field_validator("choices", "rows", mode="before")
    @classmethod
    def _list_of_dicts(cls, value):
        return _dicts_only(value)


class RawHeading(RawModel):
    heading: Optional[str] = None


class RawQuestion(RawModel):
    """A question as returned by the survey platform's details endpoint"""
    id: Optional[str] = None
    family: str = ""
    headings: List[RawHeading] = Field(default_factory=list)
    heading: Optional[str] = None
    answers: RawAnswers = Field(default_factory=RawAnswers)

    @field_validator("family", mode="before")
    @classmethod
    def _normalize_family(cls, value):
        return str(value or "").strip().lower()

    @field_validator("headings", mode="before")
    @classmethod
    def _list_of_headings(cls, value):
        return _dicts_only(value)

    @field_validator("answers", mode="before")
    @classmethod
    def _answers_or_empty(cls, value):
        return value if isinstance(value, dict) else {}


class RawPage(RawModel):
    id: Optional[str] = None
    questions: List[RawQuestion] = Field(default_factory=list)

    @field_validator("questions", mode="before")
    @classmethod
    def _list_of_questions(cls, value):
        return _dicts_only(value)


class SurveyDetails(RawModel):
    """Raw survey definition: pages of heterogeneous questions"""
    pages: List[RawPage] = Field(default_factory=list)

    @field_validator("pages", mode="before")
    @classmethod
    def _list_of_pages(cls, value):
        return _dicts_only(value)
