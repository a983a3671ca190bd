from typing import Any, Dict, List
import logging

import requests

from invisinsights.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.surveymonkey.com/v3"


class SurveyMonkeyClient:
    """Thin wrapper over the SurveyMonkey v3 REST API"""

    def __init__(self, access_token: str, base_url: str = DEFAULT_BASE_URL, timeout: int = 30):
        if not access_token:
            raise ValueError("SurveyMonkey access token is required")
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.access_token}"
        }

    def _request(self, method: str, path: str, label: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = requests.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"SurveyMonkey {label} request failed: {str(e)}")
            raise UpstreamError(f"SurveyMonkey {label} error: {str(e)}") from e

        if not resp.ok:
            logger.error(f"SurveyMonkey {label} error: {resp.status_code} {resp.text}")
            raise UpstreamError(f"SurveyMonkey {label} error: {resp.text}", status_code=resp.status_code)
        return resp

    def list_surveys(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/surveys", "list").json()
        return data.get("data", []) if isinstance(data, dict) and isinstance(data.get("data"), list) else []

    def get_survey_details(self, survey_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/surveys/{survey_id}/details", "details").json()

    def list_collectors(self, survey_id: str) -> List[Dict[str, Any]]:
        data = self._request("GET", f"/surveys/{survey_id}/collectors", "collectors").json()
        return data.get("data", []) if isinstance(data, dict) and isinstance(data.get("data"), list) else []

    def submit_response(self, collector_id: str, body: Dict[str, Any]) -> int:
        """POST a completed response to a collector and return the HTTP status"""
        resp = self._request("POST", f"/collectors/{collector_id}/responses", "submit", json=body)
        logger.info(f"SurveyMonkey response submitted, status {resp.status_code}")
        return resp.status_code
