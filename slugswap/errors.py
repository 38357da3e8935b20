from __future__ import annotations

from enum import Enum
from pathlib import Path


class SlugSwapError(Exception):
    """Base class for errors that stop a run before any file is touched."""


class ArgumentError(SlugSwapError, ValueError):
    pass


class PolicyError(SlugSwapError, ValueError):
    pass


class DirectoryErrorReason(str, Enum):
    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    NOT_READABLE = "not_readable"


class DirectoryError(SlugSwapError):
    MESSAGES = {
        DirectoryErrorReason.NOT_FOUND: "The directory '{path}' does not exist.",
        DirectoryErrorReason.NOT_A_DIRECTORY: "'{path}' is not a directory.",
        DirectoryErrorReason.NOT_READABLE: "The directory '{path}' is not readable.",
    }

    def __init__(self, path: Path, reason: DirectoryErrorReason) -> None:
        self.path = path
        self.reason = reason
        super().__init__(self.MESSAGES[reason].format(path=path))
