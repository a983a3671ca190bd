# invisinsights/graphs/workflow.py

import logging
from typing import Any, Callable, Dict, Optional

from langgraph.graph import StateGraph, START, END

from invisinsights.agents.intent_analyzer import IntentAnalyzer
from invisinsights.agents.response_builder import ResponseBuilder
from invisinsights.models.state import AnalysisState, IntentScores, ProjectConnection

logger = logging.getLogger(__name__)


def build_workflow(analyzer: IntentAnalyzer,
                   client_factory: Callable,
                   builder: Optional[ResponseBuilder] = None,
                   default_access_token: Optional[str] = None):
    """
    Constructs the session analysis workflow.

      START -> "analyze" -> "build_payload" -> "submit" -> END

    "submit" is skipped when no question could be answered. Errors propagate
    out of the graph, so a failed run never submits anything.
    """
    builder = builder or ResponseBuilder()

    def analyze_node(state: AnalysisState) -> AnalysisState:
        logger.info("Entering analyze_node")
        try:
            config = state["connection"].config
            raw_analysis = analyzer.analyze_raw(state["session"], config.intents)
            return {"raw_analysis": raw_analysis, "scores": IntentScores.from_analysis(raw_analysis)}
        except Exception as e:
            logger.error("Error in analyze_node: " + str(e))
            raise

    def build_payload_node(state: AnalysisState) -> AnalysisState:
        logger.info("Entering build_payload_node")
        try:
            payload = builder.build(state["scores"], state["connection"].config)
            return {"payload": payload}
        except Exception as e:
            logger.error("Error in build_payload_node: " + str(e))
            raise

    def submit_node(state: AnalysisState) -> AnalysisState:
        logger.info("Entering submit_node")
        connection = state["connection"]
        token = connection.access_token or default_access_token
        if not token:
            logger.info("Submission skipped: no SurveyMonkey access token")
            return {"submitted": False}

        body = state["payload"].to_wire()
        logger.debug(f"Submission payload: {body}")
        try:
            client_factory(token).submit_response(connection.config.collector_id, body)
        except Exception as e:
            logger.error("Error in submit_node: " + str(e))
            raise
        return {"submitted": True}

    def route_after_build(state: AnalysisState) -> str:
        if state.get("payload") is None:
            logger.info("No answers synthesized, nothing to submit")
            return END
        return "submit"

    workflow = StateGraph(AnalysisState)

    workflow.add_node("analyze", analyze_node)
    workflow.add_node("build_payload", build_payload_node)
    workflow.add_node("submit", submit_node)

    workflow.add_edge(START, "analyze")
    workflow.add_edge("analyze", "build_payload")
    workflow.add_conditional_edges(
        "build_payload",
        route_after_build,
        {
            "submit": "submit",
            END: END
        }
    )
    workflow.add_edge("submit", END)

    return workflow.compile()


def run_analysis(workflow, session: Dict[str, Any], connection: ProjectConnection) -> AnalysisState:
    state = AnalysisState(
        session=session,
        connection=connection,
        raw_analysis=None,
        scores=None,
        payload=None,
        submitted=False
    )
    return workflow.invoke(state)
