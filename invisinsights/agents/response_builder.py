from typing import Optional
import logging

from invisinsights.agents.answer_synthesizer import AnswerSynthesizer
from invisinsights.agents.page_aggregator import PageAggregator
from invisinsights.models.state import IntentScores, SubmissionPayload, SurveyConfig

logger = logging.getLogger(__name__)


class ResponseBuilder:
    """Builds the full submission payload for one analysed session"""

    def __init__(self,
                 synthesizer: Optional[AnswerSynthesizer] = None,
                 aggregator: Optional[PageAggregator] = None):
        self.synthesizer = synthesizer or AnswerSynthesizer()
        self.aggregator = aggregator or PageAggregator()

    def build(self, scores: IntentScores, config: SurveyConfig) -> Optional[SubmissionPayload]:
        """Return the payload, or None when no question could be answered.

        EncodingError from any question aborts the whole build.
        """
        records = []
        for question in config.questions:
            record = self.synthesizer.synthesize(scores, question)
            if record is not None:
                records.append(record)

        logger.info(f"Synthesized {len(records)} of {len(config.questions)} answers for survey {config.survey_id}")
        pages = self.aggregator.aggregate(records, config.question_pages(), config.page_id)
        if not pages:
            return None
        return SubmissionPayload(pages=pages)
