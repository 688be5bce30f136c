"""Tests for the track store."""
import logging

import pandas as pd
import pytest

from particle_dispersion import TrackStore, series_from_dataframe, sort_frame_keys
from particle_dispersion.errors import FrameIndexError, NoDataError
from particle_dispersion.track_store import parse_frame_key


class TestFrameKeys:
    def test_sorted_by_date(self, drift_series):
        store = TrackStore(drift_series)
        assert store.frame_keys() == ["2020-01-01", "2020-01-02", "2020-01-03"]

    def test_insertion_order(self, drift_series):
        store = TrackStore(drift_series)
        assert store.frame_keys(chronological=False) == ["2020-01-03", "2020-01-01", "2020-01-02"]

    def test_dates_not_lexical(self):
        keys = ["2020-01-10T00:00:00Z", "2020-01-09T23:00:00Z", "2020-01-09T01:00:00+02:00"]
        assert sort_frame_keys(keys) == [
            "2020-01-09T01:00:00+02:00", "2020-01-09T23:00:00Z", "2020-01-10T00:00:00Z",
        ]

    def test_undated_keys_last_in_given_order(self):
        keys = ["foo", "2020-01-02", "bar", "2020-01-01"]
        assert sort_frame_keys(keys) == ["2020-01-01", "2020-01-02", "foo", "bar"]

    def test_parse_frame_key(self):
        assert parse_frame_key("2020-01-01") == pd.Timestamp("2020-01-01")
        assert parse_frame_key("foo") is None
        assert parse_frame_key(None) is None


class TestStoreContents:
    def test_counts(self, drift_series):
        store = TrackStore(drift_series)
        assert store.frame_count == 3
        assert store.snapshot_count == 6
        assert store.particle_ids() == {1, 2, 3}
        assert not store.is_empty

    def test_empty(self):
        store = TrackStore()
        assert store.is_empty
        assert store.frame_count == 0
        assert store.frame_keys() == []

    def test_frames_without_snapshots_are_empty(self):
        store = TrackStore({"2020-01-01": [], "2020-01-02": None})
        assert store.frame_count == 2
        assert store.is_empty
        assert list(store.frame("2020-01-02")) == []

    @pytest.mark.parametrize("bad", [[[1, 2, 3, 4, 5]], 42, "2020-01-01"])
    def test_non_mapping_is_no_data(self, bad, caplog):
        with caplog.at_level(logging.WARNING):
            store = TrackStore(bad)
        assert store.is_empty and store.frame_count == 0
        assert "Ignoring track series" in caplog.text

    def test_replace_wholesale(self, drift_series, two_day_series):
        store = TrackStore(drift_series)
        store.frame_keys()
        store.set_series(two_day_series)
        assert store.frame_keys() == ["2020-01-01", "2020-01-02"]
        assert store.particle_ids() == {1}


class TestFrameAt:
    def test_chronological_index(self, drift_series):
        key, frame = TrackStore(drift_series).frame_at(0)
        assert key == "2020-01-01"
        assert len(frame) == 3

    def test_insertion_index(self, drift_series):
        key, _ = TrackStore(drift_series).frame_at(0, chronological=False)
        assert key == "2020-01-03"

    @pytest.mark.parametrize("index", [3, -1, "0", 1.0])
    def test_out_of_range(self, drift_series, index):
        with pytest.raises(FrameIndexError):
            TrackStore(drift_series).frame_at(index)

    def test_no_frames(self):
        with pytest.raises(NoDataError):
            TrackStore({}).frame_at(0)


class TestDataFrames:
    def test_to_dataframe(self, drift_series):
        df = TrackStore(drift_series).to_dataframe()
        assert list(df.columns) == ["time", "pid", "lat", "lon", "depth", "age"]
        assert len(df) == 6
        assert df["time"].iloc[0] == "2020-01-01"
        assert df["time"].iloc[-1] == "2020-01-03"

    def test_series_from_dataframe(self):
        df = pd.DataFrame({
            "time": ["2020-01-02", "2020-01-01", "2020-01-02"],
            "pid": [1, 1, 2],
            "lat": [10.5, 10.0, 30.0],
            "lon": [-20.5, -20.0, 40.0],
        })
        series = series_from_dataframe(df)
        assert list(series.keys()) == ["2020-01-01", "2020-01-02"]
        assert series["2020-01-01"] == [[1, 10.0, -20.0, 0, 0]]
        assert series["2020-01-02"] == [[1, 10.5, -20.5, 0, 0], [2, 30.0, 40.0, 0, 0]]

    def test_dataframe_round_trip(self, drift_series):
        df = TrackStore(drift_series).to_dataframe()
        rebuilt = TrackStore(series_from_dataframe(df))
        assert rebuilt.frame_keys() == ["2020-01-01", "2020-01-02", "2020-01-03"]
        assert rebuilt.snapshot_count == 6

    def test_missing_column(self):
        with pytest.raises(ValueError, match="lon"):
            series_from_dataframe(pd.DataFrame({"time": [], "pid": [], "lat": []}))
