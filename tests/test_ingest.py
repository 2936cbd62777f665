"""Tests for the dataset loaders (CSV, Excel, JSON, sample)."""

from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from charts.series_inference import infer
from tools.ingest import DatasetLoader, IngestError, _json_safe, sample_dataset


@pytest.fixture
def loader() -> DatasetLoader:
    return DatasetLoader()


@pytest.mark.unit
def test_json_array_of_objects_loads_in_order(loader) -> None:
    """Manual JSON keeps row order and key order."""

    loaded = loader.load_json_text('[{"b": "x", "a": 1}, {"b": "y", "a": 2}]')

    assert loaded.source.source_type == "json"
    assert [list(r.keys()) for r in loaded.records] == [["b", "a"], ["b", "a"]]
    assert [r["a"] for r in loaded.records] == [1, 2]


@pytest.mark.unit
def test_json_empty_array_is_a_valid_dataset(loader) -> None:
    """`[]` is an empty dataset, not an error."""

    assert loader.load_json_text("[]").records == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, message",
    [
        ("{broken", "Invalid JSON format"),
        ('{"a": 1}', "Data must be an array of objects"),
        ("[1, 2, 3]", "Data must be an array of objects"),
        ("42", "Data must be an array of objects"),
    ],
)
def test_json_rejections(loader, text: str, message: str) -> None:
    """Invalid or non-array payloads raise IngestError."""

    with pytest.raises(IngestError, match=message):
        loader.load_json_text(text)


@pytest.mark.unit
def test_sample_matches_monthly_rows() -> None:
    """The builtin sample is six months of sales and revenue."""

    rows = sample_dataset()
    assert len(rows) == 6
    assert rows[0] == {"month": "Jan", "sales": 12, "revenue": 8}


@pytest.mark.unit
def test_sample_returns_independent_copies(loader) -> None:
    """Mutating a loaded sample does not change the next one."""

    first = loader.sample()
    first.records[0]["sales"] = 999
    assert loader.sample().records[0]["sales"] == 12


@pytest.mark.unit
def test_json_safe_normalizes_numpy_and_missing() -> None:
    """Parsed cells become plain Python values, missing becomes None."""

    assert _json_safe(np.int64(3)) == 3
    assert type(_json_safe(np.int64(3))) is int
    assert _json_safe(np.float64(1.5)) == 1.5
    assert _json_safe(np.float64("nan")) is None
    assert _json_safe(float("inf")) is None
    assert _json_safe(np.bool_(True)) is True
    assert _json_safe(pd.NaT) is None
    assert _json_safe(pd.Timestamp("2024-01-05")) == "2024-01-05"
    assert _json_safe("text") == "text"


@pytest.mark.integration
def test_csv_upload_round_trips_to_series(loader, tmp_path) -> None:
    """A CSV upload infers series just like manual data."""

    path = tmp_path / "upload.csv"
    path.write_text("region,units,price\nNorth,10,2.5\nSouth,,3\nEast,7,x\n")

    loaded = loader.load_upload(path)
    assert loaded.source.source_type == "csv"
    assert loaded.records[1]["units"] is None

    labels, series = infer(loaded.records)
    assert labels == ["North", "South", "East"]
    assert [s.name for s in series] == ["units", "price"]
    assert series[0].values == [10, 0, 7]
    assert series[1].values[:2] == [2.5, 3.0]
    assert series[1].values[2] == 0


@pytest.mark.integration
def test_upload_uses_display_name_for_dispatch(loader, tmp_path) -> None:
    """Uploads stored under temp names dispatch on the original file name."""

    path = tmp_path / "tmp1234"
    path.write_text("a,b\nx,1\n")

    loaded = loader.load_upload(path, name="data.CSV")
    assert loaded.source.label == "data.CSV"
    assert loaded.records == [{"a": "x", "b": 1}]


@pytest.mark.integration
def test_excel_upload_reads_first_sheet(loader, tmp_path) -> None:
    """The first worksheet of a workbook becomes the dataset."""

    pytest.importorskip("openpyxl")
    path = tmp_path / "book.xlsx"
    pd.DataFrame({"name": ["a", "b"], "score": [1.0, math.nan]}).to_excel(
        path, index=False
    )

    loaded = loader.load_upload(path)
    assert loaded.source.source_type == "excel"
    assert loaded.records == [{"name": "a", "score": 1.0}, {"name": "b", "score": None}]


@pytest.mark.integration
def test_unsupported_suffix_is_rejected(loader, tmp_path) -> None:
    """Only csv/xlsx/xls uploads are accepted."""

    path = tmp_path / "notes.txt"
    path.write_text("hello")

    with pytest.raises(IngestError, match="Unsupported file type"):
        loader.load_upload(path)


@pytest.mark.integration
def test_unreadable_csv_raises_ingest_error(loader, tmp_path) -> None:
    """Parser failures surface as IngestError."""

    path = tmp_path / "empty.csv"
    path.write_text("")

    with pytest.raises(IngestError, match="Error parsing CSV file"):
        loader.load_csv(path)
