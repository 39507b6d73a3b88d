"""
Error and warning types raised while building a hole.

None of these are meant to end the process: assembly catches them per
surface or per obstacle, logs them and carries on with the rest of the hole.
"""


class HoleForgeError(Exception):
    """Base class for all hole generation errors."""


class HoleForgeWarning(UserWarning):
    """Base class for non-fatal hole generation warnings."""


class InvalidGeometryError(HoleForgeError):
    """A polygon has fewer than 3 usable vertices."""


class ResourceLoadError(HoleForgeError):
    """A texture for a surface material could not be loaded."""

    def __init__(self, path: str, cause: object = None):
        self.path = path
        self.cause = cause
        message = f"Failed to load texture '{path}'"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ExclusionRetryExhausted(HoleForgeError):
    """No obstacle position outside the green exclusion zone was found."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No valid obstacle position after {attempts} attempts")


class MissingAnchorWarning(HoleForgeWarning):
    """The hole has no green, so flag/green anchors are unavailable."""
