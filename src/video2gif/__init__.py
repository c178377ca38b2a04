"""Convert MP4 or MOV videos to timelapse GIFs."""

__version__ = "1.0.0"
