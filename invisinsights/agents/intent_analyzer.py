# invisinsights/agents/intent_analyzer.py

import json
import logging
from typing import Any, Dict, Iterable, List

from langchain_core.exceptions import OutputParserException
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import ChatPromptTemplate

from invisinsights.errors import AnalysisError
from invisinsights.models.intents import Intent
from invisinsights.models.state import IntentScores

logger = logging.getLogger(__name__)

# Template for session analysis
ANALYSIS_TEMPLATE = """You are a UX analytics assistant. Interpret the session summary as behavioral signals.
Return ONLY valid JSON with the specified fields.
Do not assume any survey wording or scale. Use only normalized intent scores.
Use probabilistic language (likely, suggests, indicates). Avoid absolute claims.
If evidence is weak, use 0.5 with low confidence.

INTENTS:
{intent_list}

Session summary JSON:
{session_json}

Required JSON output schema:
{{
  "intent_scores": {{
{intent_fields}
  }},
  "confidence": {{
{confidence_fields}
  }},
  "open_feedback": string[]
}}"""


def unique_intents(intents: Iterable[Intent]) -> List[Intent]:
    seen = []
    for intent in intents:
        intent = Intent.parse(intent)
        if intent not in seen:
            seen.append(intent)
    return seen


class IntentAnalyzer:
    """Asks the reasoning service for per-intent scores of a session"""

    def __init__(self, llm: BaseChatModel):
        self.llm = llm
        self.analysis_prompt = ChatPromptTemplate.from_messages([
            ("user", ANALYSIS_TEMPLATE)
        ])
        self.parser = JsonOutputParser()

    def build_variables(self, session: Dict[str, Any], intents: Iterable[Intent]) -> Dict[str, str]:
        requested = unique_intents(intents)
        if not requested:
            raise ValueError("No intents provided for analysis")

        fields = ",\n".join(f'    "{intent.value}": number (0-1)' for intent in requested)
        return {
            "intent_list": "\n".join(f"- {intent.value}" for intent in requested),
            "session_json": json.dumps(session, indent=2, default=str),
            "intent_fields": fields,
            "confidence_fields": fields,
        }

    def analyze_raw(self, session: Dict[str, Any], intents: Iterable[Intent]) -> Dict[str, Any]:
        """Run the model and return its parsed JSON object"""
        variables = self.build_variables(session, intents)
        chain = self.analysis_prompt | self.llm | self.parser

        try:
            result = chain.invoke(variables)
        except OutputParserException as e:
            logger.error(f"Reasoning service returned non-JSON output: {str(e)}")
            raise AnalysisError("Reasoning service returned non-JSON response") from e

        if not isinstance(result, dict):
            raise AnalysisError(f"Reasoning service returned {type(result).__name__}, expected an object")

        logger.debug(f"Analysis result: {json.dumps(result)[:500]}")
        return result

    def analyze(self, session: Dict[str, Any], intents: Iterable[Intent]) -> IntentScores:
        return IntentScores.from_analysis(self.analyze_raw(session, intents))
