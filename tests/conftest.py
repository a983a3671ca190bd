import copy

import pytest

SURVEY_DETAILS = {
    "pages": [
        {
            "id": "p1",
            "questions": [
                {
                    "id": "q1",
                    "family": "single_choice",
                    "headings": [{"heading": "How satisfied are you overall?"}],
                    "answers": {"choices": [
                        {"id": "c1", "text": "1 - Very dissatisfied"},
                        {"id": "c2", "text": "2"},
                        {"id": "c3", "text": "3 - Neutral"},
                        {"id": "c4", "text": "4"},
                        {"id": "c5", "text": "5 - Very satisfied"}
                    ]}
                },
                {
                    "id": "q2",
                    "family": "single_choice",
                    "headings": [{"heading": "Was anything confusing?"}],
                    "answers": {"choices": [
                        {"id": "yes-id", "text": "Yes"},
                        {"id": "no-id", "text": "No"}
                    ]}
                },
                {
                    "id": "q3",
                    "family": "open_ended",
                    "headings": [{"heading": "Anything else you want to tell us?"}]
                }
            ]
        },
        {
            "id": "p2",
            "questions": [
                {
                    "id": "q4",
                    "family": "matrix",
                    "heading": "How easy was it to use?",
                    "answers": {
                        "choices": [
                            {"id": "m1", "text": "Poor"},
                            {"id": "m2", "text": "Fair"},
                            {"id": "m3", "text": "Good"}
                        ],
                        "rows": [{"id": "r1", "text": "Checkout"}, {"id": "r2", "text": "Search"}]
                    }
                },
                {"id": "q5", "family": "presentation", "headings": [{"heading": "Thanks!"}]}
            ]
        }
    ]
}

SURVEY_CONFIG = {
    "survey_id": "s1",
    "collector_id": "col1",
    "page_id": "p1",
    "questions": [
        {
            "question_id": "q1",
            "type": "scale",
            "intent": "OVERALL_SATISFACTION",
            "scale_min": 1,
            "scale_max": 5,
            "choice_ids": {"1": "c1", "2": "c2", "3": "c3", "4": "c4", "5": "c5"}
        },
        {
            "question_id": "q2",
            "type": "Boolean",
            "inferred_intent": "CONFUSION_LEVEL",
            "true_choice_id": "yes-id",
            "false_choice_id": "no-id"
        },
        {
            "question_id": "q3",
            "page_id": "p2",
            "type": " TEXT ",
            "intent": "OPEN_FEEDBACK"
        }
    ]
}

ANALYSIS = {
    "intent_scores": {"OVERALL_SATISFACTION": 0.5, "CONFUSION_LEVEL": 0.2},
    "confidence": {"OVERALL_SATISFACTION": 0.7, "CONFUSION_LEVEL": 0.6, "OPEN_FEEDBACK": 0.9},
    "open_feedback": [" Checkout felt slow ", "", None, "Search worked well"]
}


@pytest.fixture
def survey_details():
    return copy.deepcopy(SURVEY_DETAILS)


@pytest.fixture
def config_data():
    return copy.deepcopy(SURVEY_CONFIG)


@pytest.fixture
def analysis_data():
    return copy.deepcopy(ANALYSIS)


class StubSurveyMonkeyClient:
    """Records calls instead of talking to SurveyMonkey"""

    def __init__(self, token, surveys=None, details=None, collectors=None, calls=None):
        self.token = token
        self.surveys = surveys if surveys is not None else [{"id": "s1", "title": "Checkout survey"}]
        self.details = details if details is not None else copy.deepcopy(SURVEY_DETAILS)
        self.collectors = collectors if collectors is not None else [{"id": "col1"}]
        self.calls = calls if calls is not None else []

    def list_surveys(self):
        self.calls.append(("list_surveys", self.token))
        return self.surveys

    def get_survey_details(self, survey_id):
        self.calls.append(("get_survey_details", survey_id))
        return self.details

    def list_collectors(self, survey_id):
        self.calls.append(("list_collectors", survey_id))
        return self.collectors

    def submit_response(self, collector_id, body):
        self.calls.append(("submit_response", collector_id, body))
        return 201


@pytest.fixture
def client_calls():
    return []


@pytest.fixture
def client_factory(client_calls):
    def factory(token):
        return StubSurveyMonkeyClient(token, calls=client_calls)
    return factory


@pytest.fixture
def stub_client_class():
    return StubSurveyMonkeyClient
