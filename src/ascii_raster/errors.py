"""Exceptions raised by the conversion pipeline."""


class AsciiRasterError(Exception):
    """Base class for all conversion failures."""


class ConfigError(AsciiRasterError, ValueError):
    """Invalid conversion settings or degenerate source dimensions."""


class ImageLoadError(AsciiRasterError, OSError):
    """The source image could not be opened or decoded."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot load image {path}: {reason}")
