"""Exception types raised while indexing sources and serving lookups."""

from pathlib import Path
from typing import Optional


class DocsliceError(Exception):
    """Base exception for all docslice errors."""

    pass


class ParseError(DocsliceError):
    """Raised when a source file in the scanned directory cannot be parsed."""

    def __init__(self, path: Path, message: str, lineno: Optional[int] = None) -> None:
        self.path = path
        self.lineno = lineno
        self.message = message
        location = f"{path}:{lineno}" if lineno is not None else str(path)
        super().__init__(f"Failed to parse {location}: {message}")


class ConfigError(DocsliceError):
    """Raised when the configuration file or environment cannot be loaded."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Invalid configuration: {message}")


class DuplicateNameError(DocsliceError):
    """Raised when two declarations derive the same key and duplicates are rejected."""

    def __init__(self, key: str, first: str, second: str) -> None:
        self.key = key
        self.first = first
        self.second = second
        super().__init__(f"Duplicate key {key!r} declared in {first} and {second}")


class NotFoundError(DocsliceError):
    """Raised when a doc or example name is not in the index."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} {name} not found.")


class SliceError(DocsliceError):
    """Base exception for invalid slice specifications."""

    def __init__(self, message: str, full_spec: str) -> None:
        self.full_spec = full_spec
        super().__init__(message)


class SpecSyntaxError(SliceError):
    """Raised when a slice token matches none of the accepted forms."""

    def __init__(self, token: str, full_spec: str) -> None:
        self.token = token
        super().__init__(f"Invalid section {token} in {full_spec}", full_spec)


class OutOfRangeError(SliceError):
    """Raised when a slice bound falls outside the sentence list."""

    def __init__(self, index: int, length: int, full_spec: str, bound: str = "start") -> None:
        self.index = index
        self.length = length
        self.bound = bound
        if bound == "end" and index == 0:
            message = f"End must be greater than 0 in {full_spec}"
        else:
            message = f"Index {index} out of range (length {length}) in {full_spec}"
        super().__init__(message, full_spec)


class OrderError(SliceError):
    """Raised when a slice start is not strictly before its end."""

    def __init__(self, start: int, end: int, full_spec: str) -> None:
        self.start = start
        self.end = end
        super().__init__(
            f"Start must be less than end ({start} >= {end}) in {full_spec}", full_spec
        )


class RenderError(DocsliceError):
    """Raised when an example's playground form cannot be formatted."""

    def __init__(self, name: str, cause: object) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Failed to format code for {name}: {cause}")
