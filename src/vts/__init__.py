"""Video Transcode Supervisor - drives ffmpeg transcodes to completion."""

__version__ = "0.1.0"
