"""
Rendering collaborators for ParticleDispersionLayer.

A sink shows one thing at a time: every show_* call replaces whatever the
sink displayed before, and clear() leaves it empty.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
from matplotlib.figure import Figure
import folium
from folium.plugins import HeatMap, HeatMapWithTime

logger = logging.getLogger(__name__)

PANE_NAME = "particle-dispersion"


class RenderSink:
    supports_timeline = False

    def show_heat(self, points: Sequence, radius: int) -> None:
        raise NotImplementedError

    def show_markers(self, markers: Sequence, style: Dict) -> None:
        raise NotImplementedError

    def show_timeline(self, frames: List[List[list]], labels: List[str], radius: int) -> None:
        raise NotImplementedError(f"{type(self).__name__} cannot show a timeline")

    def clear(self) -> None:
        raise NotImplementedError


class MemorySink(RenderSink):
    """Keeps the current display in memory."""
    supports_timeline = True

    def __init__(self):
        self.kind: Optional[str] = None
        self.heat: List = []
        self.markers: List = []
        self.timeline = None
        self.radius: Optional[int] = None
        self.style: Dict = {}
        self.replacements = 0

    def clear(self) -> None:
        self.kind = None
        self.heat = []
        self.markers = []
        self.timeline = None
        self.radius = None
        self.style = {}

    def show_heat(self, points, radius):
        self.clear()
        self.kind = "heat"
        self.heat = list(points)
        self.radius = radius
        self.replacements += 1

    def show_markers(self, markers, style):
        self.clear()
        self.kind = "markers"
        self.markers = list(markers)
        self.style = dict(style)
        self.replacements += 1

    def show_timeline(self, frames, labels, radius):
        self.clear()
        self.kind = "timeline"
        self.timeline = (frames, labels)
        self.radius = radius
        self.replacements += 1


class FoliumSink(RenderSink):
    """
    Draws into a folium.Map. Everything lives in one FeatureGroup (our pane),
    which is dropped from the map and rebuilt on each show_*.
    """
    supports_timeline = True

    def __init__(self, m: Optional[folium.Map] = None, location=(0.0, 0.0), zoom_start: int = 3,
                 tiles: str = "OpenStreetMap", name: str = PANE_NAME):
        if m is None:
            m = folium.Map(location=location, zoom_start=zoom_start, tiles=tiles, control_scale=True)
        self.map = m
        self.name = name
        self.layer = None
        self.legend = None

    def _detach(self, element):
        if element is not None:
            self.map._children.pop(element.get_name(), None)

    def _new_group(self) -> folium.FeatureGroup:
        self.clear()
        self.layer = folium.FeatureGroup(name=self.name)
        self.layer.add_to(self.map)
        return self.layer

    def clear(self) -> None:
        self._detach(self.layer)
        self._detach(self.legend)
        self.layer = None
        self.legend = None

    def show_heat(self, points, radius):
        group = self._new_group()
        data = [[float(p[0]), float(p[1]), float(p[2])] for p in points]
        if data:
            HeatMap(data, radius=int(radius)).add_to(group)

    def show_markers(self, markers, style):
        group = self._new_group()
        tooltip = style.get("tooltip")
        for mk in markers:
            folium.CircleMarker(
                (float(mk.lat), float(mk.lon)),
                radius=style.get("radius", 8),
                stroke=False,
                fill=True,
                fill_color=mk.color,
                fill_opacity=style.get("fill_opacity", 0.3),
                tooltip=folium.Tooltip(tooltip, sticky=True) if tooltip else None,
            ).add_to(group)

    def show_timeline(self, frames, labels, radius):
        self.clear()
        # HeatMapWithTime drives its own time control, so it sits on the map itself
        self.layer = HeatMapWithTime(
            frames,
            index=labels,
            radius=int(radius),
            min_opacity=0.35,
            max_opacity=0.95,
            auto_play=False,
            name=self.name,
        )
        self.layer.add_to(self.map)

    def add_legend(self, colormap) -> None:
        self._detach(self.legend)
        self.legend = colormap
        colormap.add_to(self.map)

    def save(self, out_html: str) -> str:
        self.map.save(out_html)
        logger.info("Saved: %s", out_html)
        return out_html


class MatplotlibSink(RenderSink):
    """Static rendering: heat as a weighted hexbin, markers as a coloured scatter."""

    def __init__(self, figsize=(8, 6), gridsize: Optional[int] = None, cmap: str = "hot_r"):
        # pyplot-free figure so the host backend is left alone
        self.fig = Figure(figsize=figsize)
        self.ax = self.fig.add_subplot()
        self.gridsize = gridsize
        self.cmap = cmap
        self.kind: Optional[str] = None

    def _reset_axes(self, title: str):
        self.ax.clear()
        self.ax.set_title(title)
        self.ax.set_xlabel("Longitude")
        self.ax.set_ylabel("Latitude")

    def clear(self) -> None:
        self.ax.clear()
        self.kind = None

    def show_heat(self, points, radius):
        self._reset_axes("Particle density")
        self.kind = "heat"
        pts = np.asarray([[p[0], p[1], p[2]] for p in points], dtype=float).reshape(-1, 3)
        if not len(pts):
            return
        gridsize = self.gridsize or max(5, int(round(600.0 / max(1, radius))))
        self.ax.hexbin(pts[:, 1], pts[:, 0], C=pts[:, 2], reduce_C_function=np.sum,
                       gridsize=gridsize, cmap=self.cmap, mincnt=1)

    def show_markers(self, markers, style):
        self._reset_axes("Particles")
        self.kind = "markers"
        if not markers:
            return
        radius = float(style.get("radius", 8))
        self.ax.scatter([m.lon for m in markers], [m.lat for m in markers],
                        c=[m.color for m in markers], s=(2 * radius) ** 2,
                        alpha=style.get("fill_opacity", 0.3), edgecolors="none")

    def save(self, out_png: str, dpi: int = 200) -> str:
        self.fig.tight_layout()
        self.fig.savefig(out_png, dpi=dpi)
        logger.info("Saved: %s", out_png)
        return out_png
