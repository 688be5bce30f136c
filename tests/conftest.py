import pytest

from particle_dispersion import LayerConfig, MemorySink, ParticleDispersionLayer


@pytest.fixture
def two_day_series():
    # fields: pid, lat, lon, depth, age
    return {
        "2020-01-01": [[1, 10, -20, 0, 0]],
        "2020-01-02": [[1, 10.5, -20.5, 0, 1]],
    }


@pytest.fixture
def drift_series():
    # particle 3 drops out after the first day, particle 2 after the second
    return {
        "2020-01-03": [[1, 12.0, -22.0, 5.0, 2]],
        "2020-01-01": [[1, 10.0, -20.0, 0.0, 0], [2, 30.0, 40.0, 0.0, 0], [3, -5.0, 100.0, 1.0, 0]],
        "2020-01-02": [[1, 11.0, -21.0, 2.0, 1], [2, 31.0, 41.0, 1.0, 1]],
    }


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def active_layer(sink, two_day_series):
    layer = ParticleDispersionLayer(LayerConfig(), data=two_day_series)
    layer.activate(sink)
    return layer
