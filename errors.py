"""Exceptions raised by the scanner, cache, session and exporter."""


class SifterError(Exception):
    pass


class ScanError(SifterError):
    """The chosen root directory could not be listed."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Cannot scan '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ReadError(SifterError):
    """A single image file could not be read."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        super().__init__(f"Cannot read '{path}'" + (f": {reason}" if reason else ""))


class PathError(SifterError):
    """A kept path does not live under the working root."""


class ExportIOError(SifterError):
    """Directory creation or file copy failed during export."""


class SessionFinished(SifterError):
    """Every image in the sequence has already been decided."""
