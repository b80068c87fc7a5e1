from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class DashboardFiltersModel(BaseModel):
    search_name: str = ""
    selected_groups: List[str] = Field(default_factory=list)
    selected_positions: List[str] = Field(default_factory=list)
    selected_start_months: List[str] = Field(default_factory=list)
    selected_dev_types: List[str] = Field(default_factory=list)
    selected_topics: List[str] = Field(default_factory=list)


class MetaOptionsResponse(BaseModel):
    options: Dict[str, List[str]]
    last_updated: Optional[str] = None


class RefreshResponse(BaseModel):
    refreshed: bool
    busy: bool = False
    record_count: int
    last_updated: Optional[str] = None
