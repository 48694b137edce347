"""Errors raised while generating OpenGraph images."""

from __future__ import annotations

from os import PathLike


class OgImageError(Exception):
    """Base class for all errors that occur when generating OpenGraph images."""


class TypstNotFoundError(OgImageError):
    """The Typst binary could not be found or executed."""

    def __init__(self, source: OSError) -> None:
        self.source = source
        super().__init__(f"Failed to find or execute Typst binary: {source}")


class EnvVarError(OgImageError):
    """An environment variable could not be read."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Environment variable error: {reason}: {key}")


class AvatarDownloadError(OgImageError):
    """An avatar could not be downloaded."""

    def __init__(self, url: str, source: BaseException) -> None:
        self.url = url
        self.source = source
        super().__init__(f"Failed to download avatar from URL '{url}': {source}")


class AvatarWriteError(OgImageError):
    """A downloaded avatar could not be written to disk."""

    def __init__(self, path: str | PathLike[str], source: OSError) -> None:
        self.path = path
        self.source = source
        super().__init__(f"Failed to write avatar to file at {str(path)!r}: {source}")


class JsonSerializationError(OgImageError):
    """Image data could not be serialized to JSON."""

    def __init__(self, source: BaseException) -> None:
        self.source = source
        super().__init__(f"JSON serialization error: {source}")


class TypstCompilationError(OgImageError):
    """The Typst compiler exited unsuccessfully."""

    def __init__(self, stderr: str, stdout: str, exit_code: int | None) -> None:
        self.stderr = stderr
        self.stdout = stdout
        self.exit_code = exit_code
        super().__init__(f"Typst compilation failed: {stderr}")


class OgIoError(OgImageError):
    """A generic I/O failure."""

    def __init__(self, source: OSError) -> None:
        self.source = source
        super().__init__(f"I/O error: {source}")


class TempFileError(OgImageError):
    """A temporary file could not be created."""

    def __init__(self, source: OSError) -> None:
        self.source = source
        super().__init__(f"Failed to create temporary file: {source}")


class TempDirError(OgImageError):
    """A temporary directory could not be created."""

    def __init__(self, source: OSError) -> None:
        self.source = source
        super().__init__(f"Failed to create temporary directory: {source}")