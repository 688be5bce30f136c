from enum import Enum

from .errors import InvalidDisplayModeError


class DisplayMode(Enum):
    FINAL = "FINAL"
    EXPOSURE = "EXPOSURE"
    KEYFRAME = "KEYFRAME"

    @classmethod
    def parse(cls, value) -> "DisplayMode":
        """Accept a member or its name in any case; anything else is rejected."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise InvalidDisplayModeError(f"invalid display mode: {value!r}")
