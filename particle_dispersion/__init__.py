"""Render particle-tracking simulation output as final, exposure or keyframe displays."""

from .colors import build_colormap, build_scale
from .config import LayerConfig, SnapshotLayout
from .errors import (FrameIndexError, InvalidDisplayModeError, NoDataError,
                     ParticleDispersionError)
from .geo import wrap_latlng, wrap_lon
from .layer import ParticleDispersionLayer
from .modes import DisplayMode
from .reducers import (HeatPoint, KeyframeMarker, exposure_grid, exposure_points,
                       final_positions, keyframe_markers, keyframe_timeline)
from .sinks import FoliumSink, MatplotlibSink, MemorySink, RenderSink
from .track_store import TrackStore, series_from_dataframe, sort_frame_keys

__version__ = "0.1.0"
