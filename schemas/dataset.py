# studio/schemas/dataset.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal

from pydantic import BaseModel, Field

from schemas.chart_spec import Record


class DataPreview(BaseModel):
    columns: List[str]
    rows: List[List[Any]]
    total_rows: int = 0
    truncated: bool = False


class DatasetSource(BaseModel):
    source_type: Literal["csv", "excel", "json", "sample"]
    label: str
    reference: str
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LoadedDataset(BaseModel):
    records: List[Record]
    source: DatasetSource

    def __len__(self) -> int:
        return len(self.records)
