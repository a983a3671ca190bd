import os
from dataclasses import dataclass
from typing import Optional

from langchain_core.globals import set_debug, set_verbose
import logging


def _env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is None:
        return default
    value = value.strip()
    return value if value else default


def _env_int(key: str, default: int) -> int:
    value = _env_str(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(key: str, default: float) -> float:
    value = _env_str(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = _env_str(key)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    # Reasoning service
    llm_provider: str = "openrouter"
    openrouter_api_key: Optional[str] = None
    openrouter_model: str = "@preset/invisinsights"
    openrouter_http_referer: str = "http://localhost"
    openrouter_app_title: str = "InvisInsights"
    llm_temperature: float = 0.2
    llm_top_p: float = 0.8

    # Survey platform
    surveymonkey_access_token: Optional[str] = None
    surveymonkey_base_url: str = "https://api.surveymonkey.com/v3"
    http_timeout_seconds: int = 30

    # Server
    port: int = 3000
    session_buffer_size: int = 100
    debug: bool = False

    @staticmethod
    def from_env() -> "Settings":
        """Read configuration from environment variables, keeping defaults for malformed values"""
        return Settings(
            llm_provider=_env_str("LLM_PROVIDER", "openrouter"),
            openrouter_api_key=_env_str("OPENROUTER_API_KEY"),
            openrouter_model=_env_str("OPENROUTER_MODEL", "@preset/invisinsights"),
            openrouter_http_referer=_env_str("OPENROUTER_HTTP_REFERER", "http://localhost"),
            openrouter_app_title=_env_str("OPENROUTER_APP_TITLE", "InvisInsights"),
            llm_temperature=_env_float("LLM_TEMPERATURE", 0.2),
            llm_top_p=_env_float("LLM_TOP_P", 0.8),
            surveymonkey_access_token=_env_str("SURVEYMONKEY_ACCESS_TOKEN"),
            surveymonkey_base_url=_env_str("SURVEYMONKEY_BASE_URL", "https://api.surveymonkey.com/v3"),
            http_timeout_seconds=_env_int("HTTP_TIMEOUT_SECONDS", 30),
            port=_env_int("PORT", 3000),
            session_buffer_size=_env_int("SESSION_BUFFER_SIZE", 100),
            debug=_env_bool("DEBUG", False),
        )


def setup_logging(debug: bool = False):
    """Setup logging and LangChain debug flags"""
    # Configure LangChain
    set_debug(debug)
    set_verbose(debug)

    # Configure logging
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Configure specific loggers
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('langchain').setLevel(log_level)
