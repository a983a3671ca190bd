from typing import Callable, Optional
import logging

from invisinsights.agents.schema_mapper import SchemaAutoMapper
from invisinsights.errors import ConnectError
from invisinsights.models.project_store import ProjectStore
from invisinsights.models.state import ProjectConnection

logger = logging.getLogger(__name__)


class SurveyConnector:
    """Associates a project with an auto-mapped survey"""

    def __init__(self,
                 client_factory: Callable,
                 store: ProjectStore,
                 mapper: Optional[SchemaAutoMapper] = None):
        self.client_factory = client_factory
        self.store = store
        self.mapper = mapper or SchemaAutoMapper()

    def connect(self, project_id: str, access_token: str, survey_id: str) -> ProjectConnection:
        """Fetch, map and store a survey for a project.

        Nothing is stored unless every step succeeds.
        """
        client = self.client_factory(access_token)

        surveys = client.list_surveys()
        if not any(str(survey.get("id")) == str(survey_id) for survey in surveys):
            raise ConnectError("survey_id not found for token")

        details = client.get_survey_details(survey_id)
        collectors = client.list_collectors(survey_id)
        if not collectors:
            raise ConnectError("no collectors found for survey")

        config = self.mapper.auto_map(survey_id, collectors[0].get("id"), details)
        connection = self.store.save(project_id, config, access_token)
        logger.info(f"Project {project_id} connected to survey {survey_id} ({len(config.questions)} questions)")
        return connection
