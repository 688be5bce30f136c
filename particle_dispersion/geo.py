from typing import Tuple


def wrap_lon(lon: float) -> float:
    # keep [-180, 180]; +180 stays as given
    if lon == 180.0:
        return lon
    return (lon + 180.0) % 360.0 - 180.0


def wrap_latlng(lat: float, lon: float) -> Tuple[float, float]:
    """Default coordinate normaliser: latitude untouched, longitude wrapped."""
    return lat, wrap_lon(lon)
