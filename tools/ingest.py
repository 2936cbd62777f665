# studio/tools/ingest.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

import numpy as np
import pandas as pd

from schemas.chart_spec import Record
from schemas.dataset import DatasetSource, LoadedDataset

logger = logging.getLogger(__name__)

CSV_SUFFIXES = (".csv",)
EXCEL_SUFFIXES = (".xlsx", ".xls")

SAMPLE_ROWS: List[Record] = [
    {"month": "Jan", "sales": 12, "revenue": 8},
    {"month": "Feb", "sales": 19, "revenue": 15},
    {"month": "Mar", "sales": 3, "revenue": 7},
    {"month": "Apr", "sales": 5, "revenue": 12},
    {"month": "May", "sales": 2, "revenue": 9},
    {"month": "Jun", "sales": 3, "revenue": 14},
]


class IngestError(ValueError):
    """
    Raised when user-supplied data cannot become a row dataset.
    """


def _json_safe(v: Any) -> Any:
    # pandas Timestamp / datetime64
    if isinstance(v, pd.Timestamp):
        return v.date().isoformat() if v == v.normalize() else v.isoformat()

    # pandas missing datetime
    if v is pd.NaT:
        return None

    # numpy scalars
    if isinstance(v, np.bool_):
        return bool(v)
    if isinstance(v, np.integer):
        return int(v)
    if isinstance(v, np.floating):
        x = float(v)
        if np.isnan(x) or np.isinf(x):
            return None
        return x

    # python float NaN/inf
    if isinstance(v, float) and (np.isnan(v) or np.isinf(v)):
        return None

    return v


class DatasetLoader:
    """
    Thin adapter around pandas / json for the three ways data arrives.

    Responsibilities:
      - Parse the file or text
      - Normalize cells to plain Python scalars (None for missing)
      - Attach provenance (DatasetSource)
    Any failure surfaces as IngestError; callers keep their previous dataset.
    """

    # ----------------------------
    # Public methods (app calls these)
    # ----------------------------

    def load_upload(
        self, path: str | Path, *, name: str | None = None
    ) -> LoadedDataset:
        """
        Dispatch on file suffix. `name` is the user-facing file name when the
        upload was stored under a temporary path.
        """
        path = Path(path)
        display = name or path.name
        suffix = Path(display).suffix.lower() or path.suffix.lower()

        if suffix in CSV_SUFFIXES:
            return self.load_csv(path, name=display)
        if suffix in EXCEL_SUFFIXES:
            return self.load_excel(path, name=display)

        raise IngestError(
            f"Unsupported file type '{suffix or display}'. Supports .csv, .xlsx, .xls"
        )

    def load_csv(
        self, path: str | Path, *, name: str | None = None
    ) -> LoadedDataset:
        path = Path(path)
        try:
            df = pd.read_csv(path)
        except Exception as e:
            logger.warning("CSV parsing failed for %s: %s", path, e)
            raise IngestError("Error parsing CSV file") from e

        records = self._records_from_df(df)
        src = self._make_source(
            source_type="csv", label=name or path.name, reference=str(path)
        )
        logger.info("Loaded %d rows from CSV %s", len(records), src.label)
        return LoadedDataset(records=records, source=src)

    def load_excel(
        self, path: str | Path, *, name: str | None = None
    ) -> LoadedDataset:
        """
        First worksheet only.
        """
        path = Path(path)
        try:
            df = pd.read_excel(path, sheet_name=0)
        except Exception as e:
            logger.warning("Excel parsing failed for %s: %s", path, e)
            raise IngestError("Error reading file") from e

        records = self._records_from_df(df)
        src = self._make_source(
            source_type="excel", label=name or path.name, reference=str(path)
        )
        logger.info("Loaded %d rows from workbook %s", len(records), src.label)
        return LoadedDataset(records=records, source=src)

    def load_json_text(self, text: str) -> LoadedDataset:
        try:
            parsed = json.loads(text)
        except (TypeError, ValueError) as e:
            raise IngestError("Invalid JSON format") from e

        if not isinstance(parsed, list) or not all(
            isinstance(row, dict) for row in parsed
        ):
            raise IngestError("Data must be an array of objects")

        records = [{str(k): v for k, v in row.items()} for row in parsed]
        src = self._make_source(
            source_type="json", label="Manual data", reference="manual-entry"
        )
        logger.info("Loaded %d rows from manual JSON", len(records))
        return LoadedDataset(records=records, source=src)

    def sample(self) -> LoadedDataset:
        return LoadedDataset(
            records=[dict(row) for row in SAMPLE_ROWS],
            source=self._make_source(
                source_type="sample", label="Sample data", reference="builtin:monthly"
            ),
        )

    # ----------------------------
    # Normalization helpers
    # ----------------------------

    def _records_from_df(self, df: pd.DataFrame) -> List[Record]:
        """
        Column order of the frame becomes key order of every record.
        """
        columns = [str(c) for c in df.columns]
        rows = df.to_numpy(dtype=object).tolist()
        return [
            {col: _json_safe(v) for col, v in zip(columns, row)} for row in rows
        ]

    def _make_source(
        self, *, source_type: str, label: str, reference: str
    ) -> DatasetSource:
        return DatasetSource(source_type=source_type, label=label, reference=reference)


def sample_dataset() -> List[Record]:
    return DatasetLoader().sample().records