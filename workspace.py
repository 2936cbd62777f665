from __future__ import annotations

import enum
import logging
from threading import RLock
from typing import Callable, List, Optional, Union

import plotly.graph_objects as go

from charts.activation import ActiveSeriesSet, SeriesActivationState
from charts.config_store import ChartConfigStore, PatchLike
from charts.plotly_renderer import render_plotly
from charts.projection import project
from charts.series_inference import infer
from charts.theme import DEFAULT_THEME, toggle_theme
from preview_builder import DEFAULT_PREVIEW_ROWS, build_preview
from schemas.chart_spec import ChartConfig, ChartModel, ChartType, Record, SeriesSpec
from schemas.dataset import DataPreview, DatasetSource, LoadedDataset
from schemas.theme import Theme
from tools.ingest import IngestError
from utils.preferences import ThemePreferenceStore

logger = logging.getLogger(__name__)

ThemeHandle = Union[ThemePreferenceStore, Theme]


class SessionState(str, enum.Enum):
    EMPTY = "empty"
    INFERRED = "inferred"
    PROJECTED = "projected"


class ChartWorkspace:
    """
    One chart-building session.

    Owns the row dataset, the inferred series, the active set and the
    display config. Every event (new dataset, toggle, config patch) runs to
    completion under one lock, after which the chart model is recomputed
    by calling `project` explicitly.

    The theme is an explicit handle: either a ThemePreferenceStore (theme
    changes are persisted) or a plain Theme (kept in memory).
    """

    def __init__(
        self,
        *,
        theme: Optional[ThemeHandle] = None,
        config: Optional[ChartConfig] = None,
        preview_rows: int = DEFAULT_PREVIEW_ROWS,
    ):
        self._lock = RLock()
        self._dataset: List[Record] = []
        self._labels: List[str] = []
        self._series: List[SeriesSpec] = []
        self._activation = SeriesActivationState()
        self._model = ChartModel()
        self._source: Optional[DatasetSource] = None
        self._state = SessionState.EMPTY

        self._config_store = ChartConfigStore(config)
        self._theme_handle: ThemeHandle = theme if theme is not None else DEFAULT_THEME
        self.preview_rows = preview_rows

    # -------------------------
    # Read surface
    # -------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def dataset(self) -> List[Record]:
        return list(self._dataset)

    @property
    def source(self) -> Optional[DatasetSource]:
        return self._source

    @property
    def all_series(self) -> List[SeriesSpec]:
        return list(self._series)

    @property
    def active(self) -> ActiveSeriesSet:
        return self._activation.active

    @property
    def model(self) -> ChartModel:
        return self._model

    @property
    def config(self) -> ChartConfig:
        return self._config_store.config

    @property
    def theme(self) -> Theme:
        if isinstance(self._theme_handle, ThemePreferenceStore):
            return self._theme_handle.theme
        return self._theme_handle

    # -------------------------
    # Events
    # -------------------------

    def load_dataset(
        self, records: List[Record], source: Optional[DatasetSource] = None
    ) -> ChartModel:
        """
        New dataset: re-infer and reset activation to the first series.
        Allowed from any state.
        """
        with self._lock:
            dataset = list(records)
            labels, series = infer(dataset)

            self._dataset = dataset
            self._labels = labels
            self._series = series
            self._activation.reset(series)
            self._source = source
            self._state = SessionState.INFERRED if dataset else SessionState.EMPTY
            self._refresh()

            logger.info(
                "Dataset loaded: %d rows, %d series (%s), source=%s",
                len(dataset),
                len(series),
                ", ".join(s.name for s in series) or "none",
                source.label if source else "unknown",
            )
            return self._model

    def load_from(self, loader: Callable[[], LoadedDataset]) -> ChartModel:
        """
        Run an ingestion callable. On IngestError nothing changes and the
        error propagates to the caller for reporting.
        """
        try:
            loaded = loader()
        except IngestError as e:
            logger.warning("Ingestion rejected, keeping current dataset: %s", e)
            raise
        return self.load_dataset(loaded.records, loaded.source)

    def toggle_series(self, name: str) -> ChartModel:
        with self._lock:
            self._activation.toggle(name)
            if self._state is not SessionState.EMPTY:
                self._state = SessionState.PROJECTED
            self._refresh()
            return self._model

    def select_chart_type(self, chart_type: ChartType) -> ChartConfig:
        with self._lock:
            return self._config_store.sync_chart_type(chart_type)

    def update_config(self, patch: PatchLike) -> ChartConfig:
        with self._lock:
            return self._config_store.merge(patch)

    def set_primary_color(self, color: str) -> ChartConfig:
        with self._lock:
            return self._config_store.set_primary_color(color)

    def toggle_theme(self) -> Theme:
        with self._lock:
            if isinstance(self._theme_handle, ThemePreferenceStore):
                return self._theme_handle.toggle()
            self._theme_handle = toggle_theme(self._theme_handle)
            return self._theme_handle

    # -------------------------
    # Outputs
    # -------------------------

    def preview(self, n: Optional[int] = None) -> DataPreview:
        rows = self.preview_rows if n is None else n
        return build_preview(self._dataset, rows)

    def figure(self) -> go.Figure:
        with self._lock:
            return render_plotly(self._model, self.config, self.theme)

    # -------------------------
    # Internal helpers
    # -------------------------

    def _refresh(self) -> None:
        self._model = project(
            self._dataset, self._series, self._labels, self._activation.active
        )
