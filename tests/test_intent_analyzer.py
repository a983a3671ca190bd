import json

import pytest
from langchain_core.language_models import FakeListChatModel

from invisinsights.agents.intent_analyzer import IntentAnalyzer
from invisinsights.errors import AnalysisError
from invisinsights.models.intents import Intent

SESSION = {"session_id": "abc", "rage_clicks": 4, "pages_visited": ["/cart", "/checkout"]}


def analyzer_returning(*responses):
    return IntentAnalyzer(FakeListChatModel(responses=list(responses)))


def test_prompt_lists_unique_intents():
    analyzer = analyzer_returning("{}")

    variables = analyzer.build_variables(
        SESSION, [Intent.CONFUSION_LEVEL, Intent.CONFUSION_LEVEL, "EASE_OF_USE"]
    )

    assert variables["intent_list"] == "- CONFUSION_LEVEL\n- EASE_OF_USE"
    assert '"EASE_OF_USE": number (0-1)' in variables["intent_fields"]
    assert json.loads(variables["session_json"]) == SESSION


def test_no_intents_is_an_error():
    with pytest.raises(ValueError):
        analyzer_returning("{}").build_variables(SESSION, [])


def test_parses_fenced_json_into_scores():
    response = "```json\n" + json.dumps({
        "intent_scores": {"CONFUSION_LEVEL": 0.8},
        "confidence": {"CONFUSION_LEVEL": 0.4},
        "open_feedback": ["The checkout button is hard to find"]
    }) + "\n```"

    scores = analyzer_returning(response).analyze(SESSION, [Intent.CONFUSION_LEVEL])

    assert scores.score_for(Intent.CONFUSION_LEVEL) == 0.8
    assert scores.confidence_for(Intent.CONFUSION_LEVEL) == 0.4
    assert scores.feedback_text() == "The checkout button is hard to find"


def test_non_json_output_is_analysis_error():
    with pytest.raises(AnalysisError):
        analyzer_returning("I could not analyse this session.").analyze(SESSION, [Intent.CONFUSION_LEVEL])


def test_non_object_json_is_analysis_error():
    with pytest.raises(AnalysisError):
        analyzer_returning("[0.1, 0.2]").analyze_raw(SESSION, [Intent.CONFUSION_LEVEL])
