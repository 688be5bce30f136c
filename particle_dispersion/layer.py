"""
ParticleDispersionLayer: the display controller.

The host owns the lifecycle:

    layer = ParticleDispersionLayer(LayerConfig(display_mode="FINAL"), data=series)
    layer.activate(FoliumSink(m))
    layer.set_display_mode("KEYFRAME")
    layer.set_frame_index(3)
    layer.deactivate()

Display problems (bad mode, no data, bad frame index) are logged and reported
by a False return; they never raise into the host.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Union

from .colors import build_scale
from .config import LayerConfig
from .errors import ParticleDispersionError
from .geo import wrap_latlng
from .modes import DisplayMode
from .reducers import (exposure_points, final_positions, keyframe_markers,
                       keyframe_timeline, Normalizer)
from .sinks import RenderSink
from .track_store import TrackStore

logger = logging.getLogger(__name__)


class ParticleDispersionLayer:
    def __init__(self, config: Optional[LayerConfig] = None, data=None):
        self._config = config or LayerConfig()
        self._store = TrackStore(data, layout=self._config.layout)

        self._mode: Optional[DisplayMode] = self._config.display_mode
        self._frame_index: int = self._config.start_frame_index
        self._output: Optional[List] = None

        self._sink: Optional[RenderSink] = None
        self._normalize: Normalizer = wrap_latlng
        self._color_for = None

    # ---------------------------
    # Lifecycle
    # ---------------------------

    def activate(self, sink: RenderSink, normalize: Optional[Normalizer] = None) -> None:
        """Attach to a sink and draw the configured (or last) mode, if any."""
        if self._sink is not None:
            self.deactivate()
        self._sink = sink
        self._normalize = normalize or wrap_latlng
        self._frame_index = self._config.start_frame_index
        self._output = None
        if self._mode is not None:
            self.set_display_mode(self._mode)

    def deactivate(self) -> None:
        if self._sink is None:
            return
        self._sink.clear()
        self._sink = None
        self._output = None
        self._color_for = None

    def is_active(self) -> bool:
        return self._sink is not None

    # ---------------------------
    # Public operations
    # ---------------------------

    def set_data(self, series) -> bool:
        """
        Replace the track series. While active with a mode set, the display
        is recomputed from the new data straight away.
        """
        self._store.set_series(series)
        if self._sink is None or self._mode is None:
            return False

        if self._mode is DisplayMode.KEYFRAME:
            n = self._store.frame_count
            if n and self._frame_index >= n:
                logger.warning("Frame index %d beyond new data (%d frames); showing last frame",
                               self._frame_index, n)
                self._frame_index = n - 1
        return self.set_display_mode(self._mode)

    def set_display_mode(self, mode: Union[str, DisplayMode]) -> bool:
        if self._sink is None:
            logger.debug("set_display_mode(%r) ignored: layer inactive", mode)
            return False
        try:
            mode = DisplayMode.parse(mode)
        except ParticleDispersionError:
            logger.error("Attempted to initialise with invalid displayMode: %r", mode)
            return False

        logger.debug("setDisplayMode: %s", mode.value)
        self._mode = mode
        self._clear_display()

        if mode is DisplayMode.KEYFRAME:
            return self._init_keyframe()
        return self._init_heat(mode)

    def set_frame_index(self, index: int) -> bool:
        if self._sink is None:
            logger.debug("set_frame_index(%r) ignored: layer inactive", index)
            return False
        if self._mode is not DisplayMode.KEYFRAME:
            logger.warning("set_frame_index(%r) ignored: display mode is %s, not KEYFRAME",
                           index, self._mode.value if self._mode else None)
            return False
        if self._store.frame_count == 0:
            logger.debug("set_frame_index(%r) ignored: no data", index)
            return False
        return self._show_frame(index)

    def render_timeline(self) -> bool:
        """Push every frame, in order, to a sink that can play them back."""
        if self._sink is None:
            return False
        if not self._sink.supports_timeline:
            logger.error("%s cannot show a timeline", type(self._sink).__name__)
            return False
        if self._store.frame_count == 0:
            logger.error("Attempted to display a timeline but there is no data.")
            return False
        frames, labels = keyframe_timeline(self._store, self._config.exposure_intensity,
                                           self._normalize)
        self._sink.show_timeline(frames, labels, self._config.heat_radius)
        self._output = frames
        return True

    # ---------------------------
    # State
    # ---------------------------

    @property
    def config(self) -> LayerConfig:
        return self._config

    @property
    def store(self) -> TrackStore:
        return self._store

    @property
    def display_mode(self) -> Optional[DisplayMode]:
        return self._mode

    @property
    def frame_index(self) -> int:
        return self._frame_index

    @property
    def output(self) -> Optional[List]:
        return self._output

    @property
    def color_for(self):
        return self._color_for

    # ---------------------------
    # Internals
    # ---------------------------

    def _clear_display(self) -> None:
        self._sink.clear()
        self._output = None

    def _create_colors(self):
        # domain default follows the current frame count, so rebuild every time
        cfg = self._config
        self._color_for = build_scale(cfg.color_stops, cfg.color_domain, self._store.frame_count)
        return self._color_for

    def _init_heat(self, mode: DisplayMode) -> bool:
        cfg = self._config
        if self._store.is_empty:
            logger.warning("No particle data to display in %s mode", mode.value)
            self._output = []
            return False

        if mode is DisplayMode.FINAL:
            points = final_positions(self._store, cfg.final_intensity, self._normalize)
        else:
            points = exposure_points(self._store, cfg.exposure_intensity, self._normalize)

        self._sink.show_heat(points, cfg.heat_radius)
        self._output = points
        return True

    def _init_keyframe(self) -> bool:
        if self._store.frame_count == 0:
            logger.error("Attempted to display keyframes but there is no data.")
            self._output = []
            return False
        self._create_colors()
        return self._show_frame(self._frame_index)

    def _show_frame(self, index: int) -> bool:
        logger.debug("setFrameIndex: %r", index)
        try:
            markers = keyframe_markers(self._store, index, self._color_for or self._create_colors(),
                                       self._normalize,
                                       chronological=self._config.chronological_keyframes)
        except ParticleDispersionError as e:
            logger.error("Cannot show frame %r: %s", index, e)
            return False

        self._frame_index = int(index)
        cfg = self._config
        self._sink.show_markers(markers, {
            "radius": cfg.marker_radius,
            "fill_opacity": cfg.marker_fill_opacity,
            "tooltip": cfg.marker_tooltip,
        })
        if hasattr(self._sink, "add_legend") and self._color_for is not None:
            self._sink.add_legend(self._color_for.colormap)
        self._output = markers
        return True
