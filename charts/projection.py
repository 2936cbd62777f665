from __future__ import annotations

from typing import AbstractSet, Optional, Sequence

from charts.series_inference import derive_labels
from schemas.chart_spec import ChartModel, Record, SeriesSpec


def project(
    dataset: Sequence[Record],
    series: Sequence[SeriesSpec],
    labels: Optional[Sequence[str]],
    active: AbstractSet[str],
) -> ChartModel:
    """
    Combine the dataset, the full inferred series list and the active set
    into the model handed to the renderer.

    An empty dataset always yields an empty model, whatever stale series or
    labels are passed in. Labels are re-derived from `dataset`; the `labels`
    argument is accepted for call-site symmetry but never trusted. Series
    keep inference order, not activation order.
    """
    if not dataset:
        return ChartModel(labels=[], series=[])

    return ChartModel(
        labels=derive_labels(dataset),
        series=[s for s in series if s.name in active],
    )
