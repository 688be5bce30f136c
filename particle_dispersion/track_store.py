"""
Track Store: holds one simulation run as {timestamp key: [snapshot, ...]}.

Snapshots are fixed-arity tuples read through a SnapshotLayout, e.g. with the
default layout

    {"2020-01-01": [[1, 10.0, -20.0, 0.0, 0]],
     "2020-01-02": [[1, 10.5, -20.5, 0.0, 1]]}

The series belongs to the caller; the store never mutates it and replaces it
wholesale on every set_series().
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import SnapshotLayout
from .errors import FrameIndexError, NoDataError

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["time", "pid", "lat", "lon", "depth", "age"]


def parse_frame_key(key) -> Optional[pd.Timestamp]:
    """Parse a frame key as a (naive UTC) timestamp; None when it is not a date."""
    try:
        ts = pd.to_datetime(key, errors="coerce")
    except (TypeError, ValueError):
        return None
    if not isinstance(ts, pd.Timestamp) or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def sort_frame_keys(keys: Sequence) -> List:
    """
    Ascending by parsed date. Keys that do not parse go last, in the order
    they were given; equal dates keep their given order too.
    """
    ranked = []
    for pos, key in enumerate(keys):
        ts = parse_frame_key(key)
        if ts is None:
            ranked.append((1, 0, pos, key))
        else:
            ranked.append((0, ts.value, pos, key))
    ranked.sort(key=lambda r: r[:3])
    return [r[3] for r in ranked]


class TrackStore:
    def __init__(self, series: Optional[Mapping] = None, layout: Optional[SnapshotLayout] = None):
        self.layout = layout or SnapshotLayout()
        self._series: Dict = {}
        self._sorted_keys: Optional[List] = None
        self.set_series(series)

    def set_series(self, series) -> None:
        """Replace the whole series. Anything that is not a mapping counts as no data."""
        self._sorted_keys = None
        if series is None:
            self._series = {}
            return
        if not isinstance(series, Mapping):
            logger.warning("Ignoring track series of type %s; expected a mapping of frames",
                           type(series).__name__)
            self._series = {}
            return
        self._series = series

    @property
    def series(self) -> Mapping:
        return self._series

    @property
    def is_empty(self) -> bool:
        return self.snapshot_count == 0

    @property
    def frame_count(self) -> int:
        return len(self._series)

    @property
    def snapshot_count(self) -> int:
        return sum(len(frame) for frame in self.frames())

    def frame_keys(self, chronological: bool = True) -> List:
        if not chronological:
            return list(self._series.keys())
        if self._sorted_keys is None:
            self._sorted_keys = sort_frame_keys(list(self._series.keys()))
        return list(self._sorted_keys)

    def frame(self, key) -> Sequence:
        frame = self._series.get(key)
        return [] if frame is None else frame

    def frame_at(self, index: int, chronological: bool = True) -> Tuple[object, Sequence]:
        """Return (key, frame) for the index-th frame."""
        keys = self.frame_keys(chronological)
        if not keys:
            raise NoDataError("track series has no frames")
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)) \
                or not 0 <= index < len(keys):
            raise FrameIndexError(f"frame index {index!r} outside [0, {len(keys) - 1}]")
        key = keys[int(index)]
        return key, self.frame(key)

    def frames(self, chronological: bool = False) -> Iterator[Sequence]:
        for key in self.frame_keys(chronological):
            yield self.frame(key)

    def particle_ids(self) -> set:
        pid = self.layout.particle_id
        return {pid(s) for frame in self.frames() for s in frame}

    def to_dataframe(self) -> pd.DataFrame:
        """Long table, one row per snapshot, frames in chronological order."""
        lay = self.layout
        rows = []
        for key in self.frame_keys():
            for s in self.frame(key):
                rows.append((key, s[lay.pid], s[lay.lat], s[lay.lon], s[lay.depth], s[lay.age]))
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def series_from_dataframe(df: pd.DataFrame, time_col: str = "time", pid_col: str = "pid",
                          lat_col: str = "lat", lon_col: str = "lon",
                          depth_col: str = "depth", age_col: str = "age",
                          layout: Optional[SnapshotLayout] = None) -> Dict[str, list]:
    """
    Build a track series from a long table with one row per snapshot.
    Frames come out in chronological order; keys are the time values as strings.
    Missing depth/age columns are filled with 0.
    """
    layout = layout or SnapshotLayout()
    for c in (time_col, pid_col, lat_col, lon_col):
        if c not in df.columns:
            raise ValueError(f"missing column {c!r}")

    d = df.copy()
    for c in (depth_col, age_col):
        if c not in d.columns:
            d[c] = 0
    d[lat_col] = pd.to_numeric(d[lat_col], errors="coerce")
    d[lon_col] = pd.to_numeric(d[lon_col], errors="coerce")
    d = d.dropna(subset=[time_col, lat_col, lon_col])

    series: Dict[str, list] = {}
    for key, g in d.groupby(d[time_col].astype(str), sort=False):
        frame = []
        for pid, lat, lon, depth, age in zip(g[pid_col], g[lat_col], g[lon_col],
                                             g[depth_col], g[age_col]):
            s = [None] * layout.arity
            s[layout.pid] = _plain(pid)
            s[layout.lat] = float(lat)
            s[layout.lon] = float(lon)
            s[layout.depth] = _plain(depth)
            s[layout.age] = _plain(age)
            frame.append(s)
        series[key] = frame

    return {k: series[k] for k in sort_frame_keys(list(series.keys()))}


def _plain(v):
    # numpy scalars -> python scalars
    return v.item() if isinstance(v, np.generic) else v
