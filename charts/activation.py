from __future__ import annotations

import logging
from threading import Lock
from typing import FrozenSet, Iterable, Sequence

from schemas.chart_spec import SeriesSpec

logger = logging.getLogger(__name__)

ActiveSeriesSet = FrozenSet[str]


def on_new_inference(series: Sequence[SeriesSpec]) -> ActiveSeriesSet:
    """
    Activation after a new dataset: only the first series is visible.
    Toggles made against a previous dataset are discarded.
    """
    if not series:
        return frozenset()
    return frozenset({series[0].name})


def toggle(name: str, current: Iterable[str]) -> ActiveSeriesSet:
    """
    Symmetric add/remove. Names that match no series are accepted and
    simply never match in the projection.
    """
    active = set(current)
    if name in active:
        active.remove(name)
    else:
        active.add(name)
    return frozenset(active)


class SeriesActivationState:
    def __init__(self) -> None:
        self._active: ActiveSeriesSet = frozenset()
        self._lock = Lock()

    @property
    def active(self) -> ActiveSeriesSet:
        return self._active

    def reset(self, series: Sequence[SeriesSpec]) -> ActiveSeriesSet:
        with self._lock:
            self._active = on_new_inference(series)
            return self._active

    def toggle(self, name: str) -> ActiveSeriesSet:
        with self._lock:
            self._active = toggle(name, self._active)
            logger.debug("Toggled series %r, active=%s", name, sorted(self._active))
            return self._active
