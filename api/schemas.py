from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class DashboardFiltersModel(BaseModel):
    search_term: str = ""
    filter_state: Dict[str, Union[List[int], str, None]] = Field(default_factory=dict)


class MetaColumnsResponse(BaseModel):
    columns: List[str]


class MetaOptionsResponse(BaseModel):
    options: Dict[str, List[str]]
    year_bounds: Optional[List[int]] = None
    unparseable_years: int = 0
