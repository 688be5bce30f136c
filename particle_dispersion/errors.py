class ParticleDispersionError(Exception):
    """Base class for display errors raised by the pure helpers."""


class InvalidDisplayModeError(ParticleDispersionError, ValueError):
    pass


class NoDataError(ParticleDispersionError):
    pass


class FrameIndexError(ParticleDispersionError, IndexError):
    pass
