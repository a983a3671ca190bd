import threading
import time
from collections import deque
from typing import Any, Dict, List, Optional

from invisinsights.models.state import ProjectConnection, SurveyConfig


class ProjectStore:
    """Process-lifetime map of project id -> survey connection"""

    def __init__(self):
        self._lock = threading.Lock()
        self._connections: Dict[str, ProjectConnection] = {}

    def save(self, project_id: str, config: SurveyConfig, access_token: Optional[str]) -> ProjectConnection:
        connection = ProjectConnection(config=config, access_token=access_token)
        with self._lock:
            self._connections[project_id] = connection
        return connection

    def get(self, project_id: Optional[str]) -> Optional[ProjectConnection]:
        if not project_id:
            return None
        with self._lock:
            return self._connections.get(project_id)

    def is_connected(self, project_id: Optional[str]) -> bool:
        return self.get(project_id) is not None


class SessionBuffer:
    """Most recent collected sessions, oldest dropped first"""

    def __init__(self, max_size: int = 100):
        self._lock = threading.Lock()
        self._sessions = deque(maxlen=max_size)

    def append(self, session: Dict[str, Any]):
        with self._lock:
            self._sessions.append({"session": session, "received_at_ms": int(time.time() * 1000)})

    def snapshot(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
