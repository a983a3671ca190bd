import json

import pytest
from langchain_core.language_models import FakeListChatModel

from invisinsights.agents.intent_analyzer import IntentAnalyzer
from invisinsights.agents.schema_validator import SchemaValidator
from invisinsights.errors import EncodingError
from invisinsights.graphs.workflow import build_workflow, run_analysis
from invisinsights.models.state import ProjectConnection

SESSION = {"session_id": "abc", "project_id": "proj"}


@pytest.fixture
def connection(config_data):
    return ProjectConnection(config=SchemaValidator().validate(config_data), access_token="token-1")


def analyzer_for(analysis):
    return IntentAnalyzer(FakeListChatModel(responses=[json.dumps(analysis)]))


def submissions(calls):
    return [call for call in calls if call[0] == "submit_response"]


def test_submits_payload_to_collector(connection, analysis_data, client_factory, client_calls):
    workflow = build_workflow(analyzer_for(analysis_data), client_factory)

    result = run_analysis(workflow, SESSION, connection)

    assert result["submitted"] is True
    assert result["raw_analysis"] == analysis_data
    [(_, collector_id, body)] = submissions(client_calls)
    assert collector_id == "col1"
    assert body["response_status"] == "completed"
    assert [page["id"] for page in body["pages"]] == ["p1", "p2"]


def test_default_token_used_when_connection_has_none(connection, analysis_data, client_factory, client_calls):
    connection.access_token = None
    workflow = build_workflow(analyzer_for(analysis_data), client_factory, default_access_token="env-token")

    result = run_analysis(workflow, SESSION, connection)

    assert result["submitted"] is True
    assert len(submissions(client_calls)) == 1


def test_skips_submission_without_token(connection, analysis_data, client_factory, client_calls):
    connection.access_token = None
    workflow = build_workflow(analyzer_for(analysis_data), client_factory)

    result = run_analysis(workflow, SESSION, connection)

    assert result["submitted"] is False
    assert result["payload"] is not None
    assert submissions(client_calls) == []


def test_nothing_to_submit_when_no_answers(connection, client_factory, client_calls):
    workflow = build_workflow(analyzer_for({"intent_scores": {}}), client_factory)

    result = run_analysis(workflow, SESSION, connection)

    assert result["payload"] is None
    assert result["submitted"] is False
    assert submissions(client_calls) == []


def test_encoding_error_prevents_submission(config_data, analysis_data, client_factory, client_calls):
    config_data["questions"][0]["choice_ids"] = {"1": "c1", "5": "c5"}
    connection = ProjectConnection(config=SchemaValidator().validate(config_data), access_token="token-1")
    workflow = build_workflow(analyzer_for(analysis_data), client_factory)

    with pytest.raises(EncodingError):
        run_analysis(workflow, SESSION, connection)
    assert submissions(client_calls) == []
