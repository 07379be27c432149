"""Error taxonomy for registry exploration.

Every error is fatal to an exploration run. Each class carries the exit code
the CLI reports when it reaches the top level.
"""
from __future__ import annotations

from typing import Optional

from constants import ExitCodes


class ExplorationError(Exception):
    """Base class for all errors raised while exploring a registry."""

    exit_code = ExitCodes.CONNECTION_ERROR


class NetworkError(ExplorationError):
    """Connection failure or timeout while talking to the registry."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class HttpStatusError(ExplorationError):
    """Registry answered with a non-success HTTP status."""

    def __init__(self, message: str, status_code: int, url: str):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ParseError(ExplorationError):
    """A metadata line from the registry could not be decoded."""

    exit_code = ExitCodes.METADATA_ERROR

    def __init__(self, message: str, package: str, line: str):
        super().__init__(message)
        self.package = package
        self.line = line


class InvalidSemver(ExplorationError):
    """A version string in a fetched record is not valid semver."""

    exit_code = ExitCodes.METADATA_ERROR

    def __init__(self, message: str, value: str):
        super().__init__(message)
        self.value = value


class InvalidVersionRequirement(ExplorationError):
    """A version requirement (seed or dependency edge) could not be parsed."""

    exit_code = ExitCodes.METADATA_ERROR

    def __init__(self, message: str, value: str):
        super().__init__(message)
        self.value = value


class InvalidPackageName(ExplorationError):
    """Package name cannot be mapped to an index location."""

    exit_code = ExitCodes.INPUT_ERROR

    def __init__(self, message: str, value: str):
        super().__init__(message)
        self.value = value


class ChannelError(ExplorationError):
    """A fetch worker terminated without delivering a result."""

    def __init__(self, message: str, package: Optional[str] = None):
        super().__init__(message)
        self.package = package
