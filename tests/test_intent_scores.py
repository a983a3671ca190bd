from invisinsights.models.intents import Intent
from invisinsights.models.state import IntentScores


def test_from_analysis(analysis_data):
    scores = IntentScores.from_analysis(analysis_data)

    assert scores.score_for(Intent.OVERALL_SATISFACTION) == 0.5
    assert scores.confidence_for(Intent.OPEN_FEEDBACK) == 0.9
    assert scores.score_for(Intent.TRUST_CONFIDENCE) is None
    assert scores.feedback_text() == "Checkout felt slow\nSearch worked well"


def test_untrusted_values_cleaned():
    scores = IntentScores.from_analysis({
        "intent_scores": {
            "OVERALL_SATISFACTION": 1.7,
            "EASE_OF_USE": -0.3,
            "CONFUSION_LEVEL": "0.4",
            "FRUSTRATION_LEVEL": True,
            "TRUST_CONFIDENCE": float("nan"),
            "LIKELIHOOD_TO_CONTINUE": float("inf"),
            "happiness": 0.5
        },
        "confidence": "high"
    })

    assert scores.scores == {Intent.OVERALL_SATISFACTION: 1.0, Intent.EASE_OF_USE: 0.0}
    assert scores.confidence == {}


def test_non_object_analysis_is_empty():
    scores = IntentScores.from_analysis(["not", "an", "object"])

    assert scores.scores == {}
    assert scores.feedback_text() == ""


def test_feedback_must_be_a_list():
    assert IntentScores.from_analysis({"open_feedback": "just a string"}).open_feedback == []


def test_oversized_integers_clamp_to_bounds():
    scores = IntentScores.from_analysis({
        "intent_scores": {"OVERALL_SATISFACTION": 10 ** 400, "EASE_OF_USE": -10 ** 400},
        "confidence": {"OPEN_FEEDBACK": 10 ** 400}
    })

    assert scores.score_for(Intent.OVERALL_SATISFACTION) == 1.0
    assert scores.score_for(Intent.EASE_OF_USE) == 0.0
    assert scores.confidence_for(Intent.OPEN_FEEDBACK) == 1.0
