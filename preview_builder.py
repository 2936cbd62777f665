# studio/preview_builder.py
from __future__ import annotations

from typing import Any, List, Sequence

from schemas.chart_spec import Record
from schemas.dataset import DataPreview

DEFAULT_PREVIEW_ROWS = 10


def _cell(v: Any) -> Any:
    # missing keys in ragged rows show as empty cells
    return "" if v is None else v


def build_preview(
    records: Sequence[Record], n: int = DEFAULT_PREVIEW_ROWS
) -> DataPreview:
    """
    First `n` rows, aligned to the first record's columns.
    """
    if not records:
        return DataPreview(columns=[], rows=[], total_rows=0, truncated=False)

    columns = list(records[0].keys())
    head = records[:n]
    rows = [[_cell(row.get(c)) for c in columns] for row in head]

    return DataPreview(
        columns=columns,
        rows=rows,
        total_rows=len(records),
        truncated=len(records) > n,
    )


def preview_markdown(preview: DataPreview) -> str:
    if not preview.columns:
        return "No data available. Upload a file or enter data manually."

    cols = preview.columns
    header = "| " + " | ".join(cols) + " |"
    sep = "| " + " | ".join(["---"] * len(cols)) + " |"
    body: List[str] = [
        "| " + " | ".join(str(x) for x in r) + " |" for r in preview.rows
    ]
    table_md = "\n".join([header, sep, *body])

    if preview.truncated:
        table_md += (
            f"\n\nShowing first {len(preview.rows)} rows of "
            f"{preview.total_rows} total rows"
        )
    return table_md
