"""
Exception types raised by the content layer.

Everything derives from PortfolioError and also from the builtin it
refines, so callers can catch either.
"""


class PortfolioError(Exception):
    """Base class for content-layer errors."""


class InvalidEditError(PortfolioError, ValueError):
    """An edit addressed an index, field or work id that does not exist."""


class SessionClosedError(PortfolioError, RuntimeError):
    """A committed or cancelled edit session was used again."""


class PersistenceError(PortfolioError, OSError):
    """The persisted snapshot could not be written or removed."""


class ConfirmationRequiredError(PortfolioError, RuntimeError):
    """An irreversible operation was invoked without confirmation."""


class ImageIngestError(PortfolioError, ValueError):
    """An uploaded file could not be read as an image."""


class GateLockedError(PortfolioError, PermissionError):
    """The editor was requested while the admin gate is not unlocked."""
