import json
import logging
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

from fastapi import Body, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict

from invisinsights.agents.intent_analyzer import IntentAnalyzer
from invisinsights.agents.schema_validator import SchemaValidator
from invisinsights.agents.survey_connector import SurveyConnector
from invisinsights.clients.surveymonkey import SurveyMonkeyClient
from invisinsights.config import Settings
from invisinsights.connect_page import render_connect_page
from invisinsights.errors import ConnectError, SchemaValidationError
from invisinsights.graphs.workflow import build_workflow, run_analysis
from invisinsights.models.llm_factory import LLMFactory
from invisinsights.models.project_store import ProjectStore, SessionBuffer
from invisinsights.models.state import ProjectConnection

logger = logging.getLogger(__name__)

SETUP_REQUIRED = {"surveymonkey_connected": False, "setup_required": True}
CONNECTED = {"surveymonkey_connected": True, "setup_required": False}


class TokenRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)
    access_token: Optional[str] = None


class ConnectRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)
    project_id: Optional[str] = None
    access_token: Optional[str] = None
    survey_id: Optional[str] = None


def _project_id(session: Dict[str, Any]) -> Optional[str]:
    return session.get("project_id") or session.get("projectId") or session.get("project")


def _error(status_code: int, error: str, detail: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if detail is not None:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


def create_app(settings: Optional[Settings] = None,
               store: Optional[ProjectStore] = None,
               analyzer: Optional[IntentAnalyzer] = None,
               client_factory: Optional[Callable] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    store = store or ProjectStore()
    sessions = SessionBuffer(settings.session_buffer_size)
    validator = SchemaValidator()

    if client_factory is None:
        def client_factory(token: str) -> SurveyMonkeyClient:
            return SurveyMonkeyClient(token, settings.surveymonkey_base_url, settings.http_timeout_seconds)

    connector = SurveyConnector(client_factory, store)
    workflow_cache = {}

    def get_workflow():
        # Built lazily so a missing reasoning-service key only fails analysis requests.
        if "workflow" not in workflow_cache:
            active_analyzer = analyzer or IntentAnalyzer(LLMFactory().from_settings(settings))
            workflow_cache["workflow"] = build_workflow(
                active_analyzer,
                client_factory,
                default_access_token=settings.surveymonkey_access_token
            )
        return workflow_cache["workflow"]

    def resolve_connection(project_id: Optional[str], body: Optional[Dict[str, Any]] = None) -> Optional[ProjectConnection]:
        inline_config = body.get("surveymonkey_config") if body else None
        if inline_config:
            config = validator.normalize(inline_config)
            return ProjectConnection(config=config, access_token=None) if config else None
        return store.get(project_id)

    app = FastAPI(title="InvisInsights")

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.state.store = store
    app.state.sessions = sessions

    @app.get("/project-status")
    def project_status(project_id: Optional[str] = None):
        if not project_id:
            return _error(400, "missing project_id")
        connected = store.is_connected(project_id)
        return {
            "surveymonkey_connected": connected,
            "setup_url": None if connected else "/connect-surveymonkey?project_id=" + quote(project_id, safe="")
        }

    @app.get("/connect-surveymonkey", response_class=HTMLResponse)
    def connect_page(project_id: str = ""):
        return HTMLResponse(render_connect_page(project_id))

    @app.post("/surveymonkey/surveys")
    def list_surveys(request: TokenRequest):
        if not request.access_token:
            return _error(400, "missing access_token")
        try:
            surveys = client_factory(request.access_token).list_surveys()
        except Exception as e:
            logger.error(f"Survey list failed: {str(e)}")
            return _error(500, "survey_list_failed", str(e))
        return {"surveys": surveys}

    @app.post("/connect-surveymonkey")
    def connect_surveymonkey(request: ConnectRequest):
        if not request.project_id or not request.access_token or not request.survey_id:
            return _error(400, "missing project_id, access_token, or survey_id")
        try:
            connector.connect(request.project_id, request.access_token, request.survey_id)
        except ConnectError as e:
            return _error(400, str(e))
        except SchemaValidationError as e:
            logger.warning(f"Survey mapping failed: {e.problems}")
            return _error(400, "survey_mapping_failed")
        except Exception as e:
            logger.error(f"Connect failed: {str(e)}")
            return _error(500, "connect_failed", str(e))
        return {"ok": True, "surveymonkey_connected": True}

    @app.post("/collect")
    def collect(session: Optional[Dict[str, Any]] = Body(default=None)):
        if not session or not session.get("session_id"):
            return _error(400, "missing session_id")

        sessions.append(session)
        logger.info(f"[collect] session summary: {json.dumps(session, indent=2, default=str)}")

        connection = resolve_connection(_project_id(session))
        if connection is None:
            logger.info("[survey] skipped: missing SurveyMonkey config")
            return {"ok": True, "survey_status": SETUP_REQUIRED}

        survey_status = SETUP_REQUIRED
        try:
            run_analysis(get_workflow(), session, connection)
            survey_status = CONNECTED
        except Exception as e:
            logger.error(f"[analyze] error: {str(e)}")
        return {"ok": True, "survey_status": survey_status}

    @app.post("/analyze")
    def analyze(session: Optional[Dict[str, Any]] = Body(default=None)):
        if not session or not session.get("session_id"):
            return _error(400, "missing session_id")

        try:
            connection = resolve_connection(_project_id(session), session)
            if connection is None:
                return {"survey_status": SETUP_REQUIRED}
            result = run_analysis(get_workflow(), session, connection)
        except Exception as e:
            logger.error(f"Analysis failed: {str(e)}")
            return _error(500, "analysis_failed", str(e))

        return {"analysis": result.get("raw_analysis"), "survey_status": CONNECTED}

    return app
