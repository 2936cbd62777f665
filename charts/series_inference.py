from __future__ import annotations

import logging
import math
import re
from numbers import Real
from typing import Any, List, Optional, Sequence, Tuple

from schemas.chart_spec import Record, SeriesSpec

logger = logging.getLogger(__name__)

GOLDEN_ANGLE = 137.5

# longest leading decimal literal, e.g. "12px" -> 12, " -3.5e2 units" -> -350
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_number(value: Any) -> Optional[float]:
    """
    Lenient numeric parse. Returns None when the value does not start with
    a finite decimal literal. Booleans and None never parse.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Real):
        try:
            x = float(value)
        except OverflowError:
            # ints wider than a double, e.g. a 400-digit JSON literal
            return None
        return x if math.isfinite(x) else None

    m = _LEADING_NUMBER.match(str(value))
    if not m:
        return None

    x = float(m.group(1))
    return x if math.isfinite(x) else None


def coerce_value(value: Any) -> float:
    # anything unparsable or out of float range becomes 0
    parsed = parse_number(value)
    return parsed if parsed is not None else 0.0


def series_hue(index: int) -> float:
    return (index * GOLDEN_ANGLE) % 360


def _fmt_hue(hue: float) -> str:
    return f"{hue:g}"


def series_color(index: int) -> Tuple[str, str]:
    """
    (fill, border) colors for the series at `index`.
    """
    hue = _fmt_hue(series_hue(index))
    return f"hsl({hue}, 70%, 50%)", f"hsl({hue}, 70%, 40%)"


def _label_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def select_label_field(first: Record) -> Optional[str]:
    keys = list(first.keys())
    if not keys:
        return None
    for key in keys:
        if parse_number(first[key]) is None:
            return key
    return keys[0]


def select_numeric_fields(first: Record) -> List[str]:
    return [
        key
        for key, value in first.items()
        if key.lower() != "id" and parse_number(value) is not None
    ]


def derive_labels(dataset: Sequence[Record]) -> List[str]:
    """
    One label per record, taken from the label field elected on the first
    record. Missing or empty values fall back to "Item {n}".
    """
    if not dataset:
        return []

    label_field = select_label_field(dataset[0])

    labels: List[str] = []
    for i, row in enumerate(dataset):
        value = row.get(label_field) if label_field is not None else None
        text = _label_text(value) if value is not None else ""
        labels.append(text or f"Item {i + 1}")
    return labels


def build_series(name: str, index: int, dataset: Sequence[Record]) -> SeriesSpec:
    fill, border = series_color(index)
    return SeriesSpec(
        name=name,
        values=[coerce_value(row.get(name)) for row in dataset],
        hue=series_hue(index),
        color=fill,
        border_color=border,
    )


def infer(dataset: Sequence[Record]) -> Tuple[List[str], List[SeriesSpec]]:
    """
    Derive (labels, series) from a row dataset.

    The schema is sampled from the first record only: its key order fixes the
    label field and the numeric fields, and later records are read through
    that classification even if their values have a different type.
    """
    if not dataset:
        return [], []

    first = dataset[0]
    numeric_fields = select_numeric_fields(first)

    logger.debug(
        "Inferred label field %r and numeric fields %s from %d records",
        select_label_field(first),
        numeric_fields,
        len(dataset),
    )

    labels = derive_labels(dataset)
    series = [build_series(name, i, dataset) for i, name in enumerate(numeric_fields)]
    return labels, series
