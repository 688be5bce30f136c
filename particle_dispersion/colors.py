from __future__ import annotations

import math
from typing import Callable, Optional, Sequence, Tuple

from branca.colormap import LinearColormap

from .config import DEFAULT_COLOR_STOPS

AGE_CAPTION = "Particle age"


def resolve_domain(domain: Optional[Sequence[float]], frame_count: int) -> Tuple[float, float]:
    """Explicit domain wins; otherwise [0, frame_count], widened to [0, 1] when there are no frames."""
    if domain is not None:
        lo, hi = float(domain[0]), float(domain[1])
        if lo >= hi:
            raise ValueError(f"color domain needs min < max, got {domain!r}")
        return lo, hi
    return 0.0, float(max(1, frame_count))


def build_colormap(color_stops: Optional[Sequence[str]], domain: Optional[Sequence[float]],
                   frame_count: int, caption: str = AGE_CAPTION) -> LinearColormap:
    stops = list(color_stops or DEFAULT_COLOR_STOPS)
    if len(stops) == 1:
        # constant scale
        stops = stops * 2
    vmin, vmax = resolve_domain(domain, frame_count)
    return LinearColormap(stops, vmin=vmin, vmax=vmax, caption=caption)


def build_scale(color_stops: Optional[Sequence[str]], domain: Optional[Sequence[float]],
                frame_count: int) -> Callable[[float], str]:
    """
    Return colorFor(age) -> "#rrggbb", linear across the stops over the domain.
    Ages outside the domain take the nearest end colour; a non-numeric age
    takes the first stop.
    """
    cmap = build_colormap(color_stops, domain, frame_count)
    first = cmap.rgb_hex_str(cmap.vmin)

    def color_for(age) -> str:
        try:
            a = float(age)
        except (TypeError, ValueError):
            return first
        if math.isnan(a):
            return first
        return cmap.rgb_hex_str(a)

    color_for.colormap = cmap
    return color_for
