"""
Pure reductions from a TrackStore to display data.

Heat output follows the folium/leaflet.heat convention, a list of
[lat, lon, intensity]; keyframe output is one marker per snapshot.
"""
from __future__ import annotations

from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .track_store import TrackStore

Normalizer = Callable[[float, float], Tuple[float, float]]


class HeatPoint(NamedTuple):
    lat: float
    lon: float
    intensity: float


class KeyframeMarker(NamedTuple):
    lat: float
    lon: float
    color: str
    snapshot: Sequence


def _identity(lat, lon):
    return lat, lon


def final_positions(store: TrackStore, intensity: float,
                    normalize: Optional[Normalizer] = None) -> List[HeatPoint]:
    """
    One point per particle, at the chronologically last frame it appears in.
    A particle seen twice in that frame contributes its first occurrence only.
    """
    normalize = normalize or _identity
    lay = store.layout
    keys = store.frame_keys(chronological=True)

    pending = store.particle_ids()
    out: List[HeatPoint] = []

    # step backwards from the end of the run
    for key in reversed(keys):
        if not pending:
            break
        for s in store.frame(key):
            pid = s[lay.pid]
            if pid in pending:
                lat, lon = normalize(s[lay.lat], s[lay.lon])
                out.append(HeatPoint(lat, lon, intensity))
                pending.discard(pid)
    return out


def exposure_points(store: TrackStore, intensity: float,
                    normalize: Optional[Normalizer] = None) -> List[HeatPoint]:
    """Every snapshot of every frame, all at the same intensity."""
    normalize = normalize or _identity
    lay = store.layout
    out: List[HeatPoint] = []
    for frame in store.frames():
        for s in frame:
            lat, lon = normalize(s[lay.lat], s[lay.lon])
            out.append(HeatPoint(lat, lon, intensity))
    return out


def keyframe_markers(store: TrackStore, index: int, color_for: Callable[[float], str],
                     normalize: Optional[Normalizer] = None,
                     chronological: bool = True) -> List[KeyframeMarker]:
    """
    Markers for the index-th frame. Raises NoDataError on an empty series and
    FrameIndexError when index is outside it.
    """
    normalize = normalize or _identity
    lay = store.layout
    _, frame = store.frame_at(index, chronological=chronological)
    out = []
    for s in frame:
        lat, lon = normalize(s[lay.lat], s[lay.lon])
        out.append(KeyframeMarker(lat, lon, color_for(s[lay.age]), s))
    return out


def keyframe_timeline(store: TrackStore, intensity: float,
                      normalize: Optional[Normalizer] = None) -> Tuple[List[List[list]], List[str]]:
    """
    All frames in chronological order as heat frames, with their keys as labels.
    HeatMapWithTime drops empty frames, so an empty frame gets one zero-weight
    point at the previous frame's first position (or 0, 0).
    """
    normalize = normalize or _identity
    lay = store.layout
    frames: List[List[list]] = []
    labels: List[str] = []
    anchor = (0.0, 0.0)
    for key in store.frame_keys(chronological=True):
        pts = []
        for s in store.frame(key):
            lat, lon = normalize(s[lay.lat], s[lay.lon])
            pts.append([float(lat), float(lon), float(intensity)])
        if pts:
            anchor = (pts[0][0], pts[0][1])
        else:
            pts = [[anchor[0], anchor[1], 0.0]]
        frames.append(pts)
        labels.append(str(key))
    return frames, labels


def exposure_grid(store: TrackStore, bbox: Sequence[float], nx: int = 120, ny: int = 120):
    """
    bbox = (minlon, minlat, maxlon, maxlat)
    returns (P, lon_edges, lat_edges); P[i, j] is the share of all in-box
    snapshots falling in lon bin i, lat bin j
    """
    minlon, minlat, maxlon, maxlat = bbox
    lay = store.layout

    xs = []
    ys = []
    for frame in store.frames():
        for s in frame:
            xs.append(s[lay.lon])
            ys.append(s[lay.lat])

    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)

    # keep inside bbox
    m = (xs >= minlon) & (xs <= maxlon) & (ys >= minlat) & (ys <= maxlat)
    xs = xs[m]; ys = ys[m]

    H, xedges, yedges = np.histogram2d(xs, ys, bins=[nx, ny],
                                       range=[[minlon, maxlon], [minlat, maxlat]])
    P = H / (H.sum() + 1e-12)
    return P, xedges, yedges
