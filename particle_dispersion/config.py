from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from typing import Mapping, Optional, Tuple

from branca.colormap import LinearColormap

from .modes import DisplayMode

DEFAULT_COLOR_STOPS = ("green", "yellow", "red")

# camelCase option names accepted by from_options()
OPTION_ALIASES = {
    "ageColorScale": "color_stops",
    "ageDomain": "color_domain",
    "startFrameIndex": "start_frame_index",
    "displayMode": "display_mode",
}


@dataclass(frozen=True)
class SnapshotLayout:
    """Positional indices of the fields inside one snapshot tuple."""
    pid: int = 0
    lat: int = 1
    lon: int = 2
    depth: int = 3
    age: int = 4

    def __post_init__(self):
        idx = (self.pid, self.lat, self.lon, self.depth, self.age)
        if any((not isinstance(i, int)) or i < 0 for i in idx):
            raise ValueError(f"snapshot indices must be non-negative ints, got {idx}")
        if len(set(idx)) != len(idx):
            raise ValueError(f"snapshot indices must be distinct, got {idx}")

    @property
    def arity(self) -> int:
        return max(self.pid, self.lat, self.lon, self.depth, self.age) + 1

    def particle_id(self, snapshot):
        return snapshot[self.pid]

    def position(self, snapshot) -> Tuple[float, float]:
        return snapshot[self.lat], snapshot[self.lon]

    def age_of(self, snapshot):
        return snapshot[self.age]

    def depth_of(self, snapshot):
        return snapshot[self.depth]


@dataclass(frozen=True)
class LayerConfig:
    color_stops: Tuple[str, ...] = DEFAULT_COLOR_STOPS
    color_domain: Optional[Tuple[float, float]] = None   # None -> [0, frame count]
    start_frame_index: int = 0

    final_intensity: float = 0.9
    exposure_intensity: float = 0.2
    heat_radius: int = 15

    marker_radius: int = 8
    marker_fill_opacity: float = 0.3
    marker_tooltip: str = "I love to parti-cle.."

    chronological_keyframes: bool = True
    layout: SnapshotLayout = field(default_factory=SnapshotLayout)
    display_mode: Optional[DisplayMode] = None

    def __post_init__(self):
        stops = _as_stops(self.color_stops) if self.color_stops else DEFAULT_COLOR_STOPS
        try:
            LinearColormap(list(stops) * (2 if len(stops) == 1 else 1))
        except (TypeError, ValueError) as e:
            raise ValueError(f"bad color_stops {stops!r}: {e}") from e
        object.__setattr__(self, "color_stops", stops)

        if self.color_domain is not None:
            if len(self.color_domain) != 2:
                raise ValueError(f"color_domain must be (min, max), got {self.color_domain!r}")
            lo, hi = (float(v) for v in self.color_domain)
            if not (math.isfinite(lo) and math.isfinite(hi)) or lo >= hi:
                raise ValueError(f"color_domain needs finite min < max, got {self.color_domain!r}")
            object.__setattr__(self, "color_domain", (lo, hi))

        if isinstance(self.start_frame_index, bool) or not isinstance(self.start_frame_index, int) \
                or self.start_frame_index < 0:
            raise ValueError(f"start_frame_index must be an int >= 0, got {self.start_frame_index!r}")

        for name in ("final_intensity", "exposure_intensity"):
            v = getattr(self, name)
            if not (0.0 < float(v) <= 1.0):
                raise ValueError(f"{name} must be in (0, 1], got {v!r}")
        if not (0.0 <= float(self.marker_fill_opacity) <= 1.0):
            raise ValueError(f"marker_fill_opacity must be in [0, 1], got {self.marker_fill_opacity!r}")
        for name in ("heat_radius", "marker_radius"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")

        if not isinstance(self.layout, SnapshotLayout):
            raise ValueError(f"layout must be a SnapshotLayout, got {type(self.layout).__name__}")
        if self.display_mode is not None:
            object.__setattr__(self, "display_mode", DisplayMode.parse(self.display_mode))

    @classmethod
    def from_options(cls, options: Mapping) -> "LayerConfig":
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"unknown option: {key!r}")
            kwargs[name] = value
        if isinstance(kwargs.get("layout"), Mapping):
            kwargs["layout"] = SnapshotLayout(**kwargs["layout"])
        if kwargs.get("color_stops") is not None:
            kwargs["color_stops"] = _as_stops(kwargs["color_stops"])
        if kwargs.get("color_domain") is not None:
            kwargs["color_domain"] = tuple(kwargs["color_domain"])
        return cls(**kwargs)

    def with_options(self, **changes) -> "LayerConfig":
        return replace(self, **changes)


def _as_stops(stops) -> Tuple[str, ...]:
    if isinstance(stops, str):
        return (stops,)
    return tuple(stops)
