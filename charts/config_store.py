from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Mapping, Optional, Union

from schemas.chart_spec import ChartConfig, ChartConfigPatch, ChartType

logger = logging.getLogger(__name__)

PatchLike = Union[ChartConfigPatch, Mapping[str, Any]]


def _as_patch(patch: PatchLike) -> ChartConfigPatch:
    if isinstance(patch, ChartConfigPatch):
        return patch
    return ChartConfigPatch.model_validate(dict(patch))


def merge(current: ChartConfig, patch: PatchLike) -> ChartConfig:
    """
    Shallow merge: every field set on `patch` replaces the current value,
    everything else is kept. A `colors` patch replaces the whole list.
    Raises ValidationError when the merged config is invalid.
    """
    update = _as_patch(patch).model_dump(exclude_unset=True)
    if not update:
        return current
    # revalidate so a None on a required field is rejected, not stored
    return ChartConfig.model_validate({**current.model_dump(), **update})


def with_primary_color(current: ChartConfig, color: str) -> ChartConfig:
    # only slot 0 is user-editable; the rest of the palette is carried over
    return merge(current, {"colors": [color, *current.colors[1:]]})


class ChartConfigStore:
    """
    Owns the ChartConfig of one session. Each operation is a single locked
    read-modify-write so back-to-back updates never clobber each other.
    """

    def __init__(self, initial: Optional[ChartConfig] = None):
        self._config = initial or ChartConfig()
        self._lock = Lock()

    @property
    def config(self) -> ChartConfig:
        return self._config

    def merge(self, patch: PatchLike) -> ChartConfig:
        with self._lock:
            self._config = merge(self._config, patch)
            return self._config

    def sync_chart_type(self, selected: ChartType) -> ChartConfig:
        """
        Follow the externally selected chart type. Changing
        `config.chart_type` through `merge` does not flow back.
        """
        with self._lock:
            if self._config.chart_type != selected:
                logger.debug(
                    "Chart type %s -> %s", self._config.chart_type, selected
                )
                self._config = merge(self._config, {"chart_type": selected})
            return self._config

    def set_primary_color(self, color: str) -> ChartConfig:
        with self._lock:
            self._config = with_primary_color(self._config, color)
            return self._config
