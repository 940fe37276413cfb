from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

import pandas as pd

from core.dashboard import compute_dashboard
from core.data import DatasetError, load_companies, resolve_dataset_location
from core.filters import DashboardFilters


logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load data"


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class SessionNotReady(RuntimeError):
    pass


class DashboardSession:
    """Owns the row set for one dashboard session.

    ``load`` runs at most once: a failed load is terminal and a new session is
    needed to retry. ``view`` recomputes the whole page synchronously.
    """

    def __init__(self, location: Optional[str] = None, loader: Callable[[str], pd.DataFrame] = load_companies):
        self.location = location or resolve_dataset_location()
        self._loader = loader
        self.status = LoadStatus.IDLE
        self.rows: Optional[pd.DataFrame] = None
        self.error: Optional[str] = None

    @property
    def ready(self) -> bool:
        return self.status == LoadStatus.READY

    def load(self) -> LoadStatus:
        if self.status != LoadStatus.IDLE:
            return self.status
        self.status = LoadStatus.LOADING
        try:
            rows = self._loader(self.location)
        except DatasetError:
            logger.exception("Loading %s failed", self.location)
            self.error = LOAD_ERROR_MESSAGE
            self.status = LoadStatus.FAILED
            return self.status
        except Exception:
            self.error = LOAD_ERROR_MESSAGE
            self.status = LoadStatus.FAILED
            raise
        self.rows = rows
        self.status = LoadStatus.READY
        return self.status

    def require_rows(self) -> pd.DataFrame:
        if not self.ready or self.rows is None:
            raise SessionNotReady(self.error or f"Dataset is {self.status.value}")
        return self.rows

    def view(self, filters: DashboardFilters, *, dedupe_links: bool = False) -> Dict[str, Any]:
        return compute_dashboard(filters, self.require_rows(), dedupe_links=dedupe_links)
