"""
draftkit.exceptions - Custom exception classes.

All draftkit-specific exceptions inherit from DraftkitError.
"""

from __future__ import annotations

from typing import Any


class DraftkitError(Exception):
    """Base exception for all draftkit errors."""

    pass


class ConfigError(DraftkitError):
    """Configuration loading or validation error."""

    pass


class MissingAssetError(DraftkitError):
    """Input directory lacks a required audio or image file."""

    pass


class InsufficientAssetsError(MissingAssetError):
    """Timeline construction was given no images."""

    pass


class CaptionError(DraftkitError):
    """Caption file could not be read."""

    pass


class InvalidDurationError(DraftkitError):
    """Audio duration is non-positive or could not be obtained."""

    pass


class ProbeError(InvalidDurationError):
    """ffprobe failed to report a usable duration."""

    pass


class TimelineError(DraftkitError):
    """Segment placement violates a track invariant."""

    pass


class IntegrityError(DraftkitError):
    """Project references an unknown material or breaks a structural invariant."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


class TargetNotFoundError(DraftkitError):
    """Editor draft store could not be located."""

    pass


class InstallError(DraftkitError):
    """Project folder could not be created in the draft store."""

    pass


class PartialCopyError(DraftkitError):
    """One or more media files failed to copy into the installed project."""

    def __init__(self, failures: list[dict[str, Any]]):
        self.failures = failures
        names = ", ".join(str(f.get("source", "?")) for f in failures)
        super().__init__(f"{len(failures)} media file(s) failed to copy: {names}")


class ValidationError(DraftkitError):
    """Environment or input validation error."""

    pass


class DependencyError(DraftkitError):
    """Required dependency missing or misconfigured."""

    def __init__(self, dependency: str, message: str, install_hint: str | None = None):
        self.dependency = dependency
        self.message = message
        self.install_hint = install_hint
        super().__init__(f"{dependency}: {message}")
