"""Tests for LayerConfig / SnapshotLayout."""
import pytest

from particle_dispersion import DisplayMode, LayerConfig, SnapshotLayout
from particle_dispersion.config import DEFAULT_COLOR_STOPS


class TestLayerConfigDefaults:
    def test_defaults(self):
        cfg = LayerConfig()
        assert cfg.color_stops == DEFAULT_COLOR_STOPS
        assert cfg.color_domain is None
        assert cfg.start_frame_index == 0
        assert cfg.final_intensity == 0.9
        assert cfg.exposure_intensity == 0.2
        assert cfg.heat_radius == 15
        assert cfg.display_mode is None
        assert cfg.chronological_keyframes is True

    def test_empty_stops_fall_back(self):
        assert LayerConfig(color_stops=()).color_stops == DEFAULT_COLOR_STOPS
        assert LayerConfig(color_stops=None).color_stops == DEFAULT_COLOR_STOPS

    def test_mode_string_parsed(self):
        assert LayerConfig(display_mode="keyframe").display_mode is DisplayMode.KEYFRAME


class TestLayerConfigValidation:
    @pytest.mark.parametrize("domain", [(5, 5), (3, 1), (0,), (0, float("inf"))])
    def test_bad_domain(self, domain):
        with pytest.raises(ValueError):
            LayerConfig(color_domain=domain)

    @pytest.mark.parametrize("kwargs", [
        {"start_frame_index": -1},
        {"start_frame_index": 1.5},
        {"final_intensity": 0},
        {"exposure_intensity": 1.5},
        {"heat_radius": 0},
        {"marker_fill_opacity": 2},
        {"display_mode": "BOGUS"},
        {"layout": (0, 1, 2, 3, 4)},
    ])
    def test_rejected(self, kwargs):
        with pytest.raises(ValueError):
            LayerConfig(**kwargs)

    def test_domain_normalised_to_floats(self):
        assert LayerConfig(color_domain=[0, 10]).color_domain == (0.0, 10.0)


class TestFromOptions:
    def test_camel_case_aliases(self):
        cfg = LayerConfig.from_options({
            "ageColorScale": ["#000000", "#ffffff"],
            "ageDomain": [0, 4],
            "startFrameIndex": 2,
            "displayMode": "EXPOSURE",
        })
        assert cfg.color_stops == ("#000000", "#ffffff")
        assert cfg.color_domain == (0.0, 4.0)
        assert cfg.start_frame_index == 2
        assert cfg.display_mode is DisplayMode.EXPOSURE

    def test_layout_from_dict(self):
        cfg = LayerConfig.from_options({"layout": {"pid": 0, "lon": 1, "lat": 2, "depth": 3, "age": 4}})
        assert cfg.layout.lon == 1 and cfg.layout.lat == 2

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="unknown option"):
            LayerConfig.from_options({"radius": 3})

    def test_with_options_revalidates(self):
        cfg = LayerConfig().with_options(heat_radius=30)
        assert cfg.heat_radius == 30
        with pytest.raises(ValueError):
            cfg.with_options(heat_radius=-1)


class TestSnapshotLayout:
    def test_accessors(self):
        lay = SnapshotLayout()
        s = [7, 1.5, 2.5, 10.0, 3]
        assert lay.particle_id(s) == 7
        assert lay.position(s) == (1.5, 2.5)
        assert lay.depth_of(s) == 10.0
        assert lay.age_of(s) == 3
        assert lay.arity == 5

    def test_duplicate_indices(self):
        with pytest.raises(ValueError):
            SnapshotLayout(lat=1, lon=1)

    def test_negative_index(self):
        with pytest.raises(ValueError):
            SnapshotLayout(age=-1)


class TestColorStops:
    def test_single_string_stop(self):
        assert LayerConfig(color_stops="red").color_stops == ("red",)

    def test_unknown_colour_rejected_at_construction(self):
        with pytest.raises(ValueError, match="color_stops"):
            LayerConfig(color_stops=("green", "not-a-colour"))
