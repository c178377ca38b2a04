"""Error kinds raised by the conversion pipeline.

Every error carries a single human-readable message; the CLI prints it and
exits with status 1.
"""

from __future__ import annotations


class Video2GifError(Exception):
    """Base class for all expected conversion failures."""


class InvalidTimeFormat(Video2GifError, ValueError):
    """A time expression could not be parsed."""


class NegativeTime(InvalidTimeFormat):
    """A numeric time value was negative."""


class RangeExhausted(Video2GifError, ValueError):
    """The start offset leaves nothing of the video to sample."""


class UnsupportedFormat(Video2GifError, ValueError):
    """The input file extension is not an accepted video container."""


class InvalidOption(Video2GifError, ValueError):
    """A user option is outside its accepted range."""


class UnknownQualityPreset(InvalidOption):
    """The quality preset name is not one of the known presets."""


class InputNotFound(Video2GifError, FileNotFoundError):
    """The input video does not exist."""


class OutputExists(Video2GifError, FileExistsError):
    """The output GIF already exists and overwriting was not requested."""


class EngineUnavailable(Video2GifError, RuntimeError):
    """ffmpeg or ffprobe cannot be executed."""


class ProbeFailure(Video2GifError, RuntimeError):
    """The input could not be probed or has no video stream."""


class TranscodeFailure(Video2GifError, RuntimeError):
    """ffmpeg reported a failure while producing the GIF."""
