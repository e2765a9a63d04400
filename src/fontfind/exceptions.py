"""Exception hierarchy for font lookup and resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:  # pragma: no cover - typing only
    from fontfind.types import ScalableFont


class FontFindError(Exception):
    """Base exception for font lookup failures."""


class ConfigurationError(FontFindError):
    """Raised when configuration data cannot be loaded or validated."""


class InvalidPatternError(FontFindError, ValueError):
    """Raised when a family-name pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str | None = None) -> None:
        self.pattern = pattern
        detail = f": {reason}" if reason else ""
        super().__init__(f"invalid font name pattern {pattern!r}{detail}")


class LocatorError(FontFindError):
    """Raised by a locator that cannot satisfy a descriptor."""


class FontNotFoundError(FontFindError):
    """Every locator declined; ``fallback`` holds the substitute font, if any."""

    def __init__(self, key: str, fallback: ScalableFont | None = None) -> None:
        self.key = key
        self.fallback = fallback
        super().__init__(f"font not found: {key}")


class FallbackUnavailableError(FontFindError):
    """Raised when the fallback font cannot be produced."""


class ResolutionCancelled(FontFindError):
    """Raised when the caller's context was cancelled."""

    def __init__(self, message: str = "context cancelled") -> None:
        super().__init__(message)


class DeadlineExceeded(ResolutionCancelled):
    """Raised when the caller's context deadline passed."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


class PromiseConsumedError(FontFindError):
    """Raised when a font promise is observed after its result was delivered."""


__all__ = [
    "ConfigurationError",
    "DeadlineExceeded",
    "FallbackUnavailableError",
    "FontFindError",
    "FontNotFoundError",
    "InvalidPatternError",
    "LocatorError",
    "PromiseConsumedError",
    "ResolutionCancelled",
]
