"""
In-memory store of analyzed projects, keyed by project id.

Handlers receive a ProjectStore instance instead of sharing a module-level
"last project". Access is lock-guarded so one store can be shared across
threads. Nothing is persisted.
"""

import logging
import threading
from typing import Dict, List, Optional

from xer_evm.pipeline import ProjectAnalysis

logger = logging.getLogger(__name__)


class ProjectStore:
    """Thread-safe mapping of project id to ProjectAnalysis."""

    def __init__(self):
        self._projects: Dict[str, ProjectAnalysis] = {}
        self._latest_key: Optional[str] = None
        self._lock = threading.Lock()

    def put(self, analysis: ProjectAnalysis) -> str:
        """
        Store an analysis, replacing any earlier one with the same id.

        Args:
            analysis: Result of analyze()

        Returns:
            The key the analysis is stored under
        """
        key = analysis.project_id
        with self._lock:
            # Re-insert so dict order tracks recency
            if self._projects.pop(key, None) is not None:
                logger.info(f"Replacing stored project {key}")
            self._projects[key] = analysis
            self._latest_key = key
        return key

    def get(self, key: str) -> Optional[ProjectAnalysis]:
        with self._lock:
            return self._projects.get(key)

    def latest(self) -> Optional[ProjectAnalysis]:
        """Most recently stored analysis, if any."""
        with self._lock:
            if self._latest_key is None:
                return None
            return self._projects.get(self._latest_key)

    def remove(self, key: str) -> bool:
        """
        Drop a stored analysis.

        Returns:
            True if something was removed
        """
        with self._lock:
            removed = self._projects.pop(key, None) is not None
            if key == self._latest_key:
                self._latest_key = next(reversed(self._projects), None)
            return removed

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._projects)

    def clear(self) -> None:
        with self._lock:
            self._projects.clear()
            self._latest_key = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._projects)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._projects
