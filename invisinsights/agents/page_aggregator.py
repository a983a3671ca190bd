from typing import Dict, Iterable, List, Mapping, Optional
import logging

from invisinsights.models.state import AnswerRecord, PagePayload

logger = logging.getLogger(__name__)


class PageAggregator:
    def aggregate(self,
                  records: Iterable[AnswerRecord],
                  question_to_page: Mapping[str, Optional[str]],
                  default_page_id: Optional[str]) -> List[PagePayload]:
        """Group answer records by page.

        Pages appear in first-seen order, questions keep their input order and
        pages without records are never emitted.
        """
        pages: Dict[str, List[AnswerRecord]] = {}
        for record in records:
            page_id = question_to_page.get(record.question_id) or default_page_id
            if not page_id:
                logger.warning(f"No page for question {record.question_id}, dropping answer")
                continue
            pages.setdefault(page_id, []).append(record)

        return [PagePayload(page_id=page_id, questions=questions) for page_id, questions in pages.items()]
