"""Thread-safe cache of resolved fonts keyed by normalised font names."""

from __future__ import annotations

from collections.abc import Callable, Iterator
import logging
from threading import Lock

from fontfind.exceptions import FallbackUnavailableError
from fontfind.types import ScalableFont, Style, Weight


logger = logging.getLogger(__name__)

FALLBACK_KEY = "fallback"

FallbackProducer = Callable[[], ScalableFont]

FONT_EXTENSIONS = frozenset({".ttf", ".otf", ".ttc", ".woff", ".woff2"})
"""Suffixes dropped from a name before keying; any other dot is part of the pattern."""

_STYLE_SUFFIXES = {
    Style.NORMAL: "",
    Style.ITALIC: "-italic",
    Style.OBLIQUE: "-oblique",
}


def normalize_fontname(name: str, style: Style, weight: Weight) -> str:
    """Return the registry key for a font name, style and weight.

    >>> normalize_fontname("Noto Sans.ttf", Style.ITALIC, Weight.BOLD)
    'noto_sans-italic-bold'
    >>> normalize_fontname("Noto.*Mono", Style.NORMAL, Weight.NORMAL)
    'noto.*mono'
    """
    key = name.strip().replace(" ", "_")
    stem, _, suffix = key.rpartition(".")
    if stem and f".{suffix.lower()}" in FONT_EXTENSIONS:
        key = stem
    key = key.lower() + _STYLE_SUFFIXES[style]
    if weight is not Weight.NORMAL:
        key += "-" + weight.name.replace("_", "").lower()
    return key


class FontRegistry:
    """Mapping of normalised names to fonts, guarded by a single lock.

    Keys are bound at most once: a second `store_font` for the same key is
    ignored, so concurrent resolutions never replace a published font. The
    reserved key ``"fallback"`` is filled lazily by `fallback_font` from the
    ``fallback`` producer.
    """

    def __init__(self, fallback: FallbackProducer | None = None) -> None:
        self._fonts: dict[str, ScalableFont] = {}
        self._lock = Lock()
        self._fallback_lock = Lock()
        self._produce_fallback = fallback

    def get_font(self, key: str) -> ScalableFont | None:
        """Return the font stored under ``key``, or None."""
        with self._lock:
            font = self._fonts.get(key)
        if font is None:
            logger.debug("registry does not contain font %s", key)
        else:
            logger.debug("registry found font %s", key)
        return font

    def store_font(self, key: str, font: ScalableFont) -> None:
        """Bind ``key`` to ``font`` unless the key is already bound."""
        if font.is_null():
            logger.error("registry cannot store null font under %s", key)
            return
        with self._lock:
            if key in self._fonts:
                return
            self._fonts[key] = font
        logger.debug("registry stores font %s as %s", font.name, key)

    def fallback_font(self) -> ScalableFont:
        """Return the fallback font, producing and caching it on first use.

        The producer runs at most once while it succeeds, even with concurrent
        callers. A failing producer is retried by the next call.

        Raises:
            FallbackUnavailableError: no producer is configured or it failed.
        """
        with self._lock:
            font = self._fonts.get(FALLBACK_KEY)
        if font is not None:
            return font
        with self._fallback_lock:
            with self._lock:
                font = self._fonts.get(FALLBACK_KEY)
            if font is not None:
                return font
            font = self._make_fallback()
            with self._lock:
                self._fonts.setdefault(FALLBACK_KEY, font)
                font = self._fonts[FALLBACK_KEY]
        logger.info("font registry caches fallback font %s", font.name)
        return font

    def _make_fallback(self) -> ScalableFont:
        if self._produce_fallback is None:
            logger.error("font registry has no fallback font producer")
            raise FallbackUnavailableError("no fallback font producer configured")
        try:
            font = self._produce_fallback()
        except Exception as exc:
            logger.error("fallback font producer failed: %s", exc)
            raise FallbackUnavailableError(f"cannot produce fallback font: {exc}") from exc
        if font is None or font.is_null():
            logger.error("fallback font producer returned a null font")
            raise FallbackUnavailableError("fallback font producer returned a null font")
        return font

    def snapshot(self) -> dict[str, ScalableFont]:
        """Return a shallow copy of the registered fonts."""
        with self._lock:
            return dict(self._fonts)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._fonts

    def __len__(self) -> int:  # pragma: no cover - trivial
        with self._lock:
            return len(self._fonts)

    def __iter__(self) -> Iterator[str]:  # pragma: no cover - simple proxy
        yield from sorted(self.snapshot())

    def log_font_list(self, log: logging.Logger | None = None) -> None:
        """Dump the registered fonts at INFO level."""
        log = log or logger
        log.info("--- registered fonts ---")
        for key, font in sorted(self.snapshot().items()):
            log.info("typeface [%s] = %s @ %s", key, font.name, font.path)
        log.info("------------------------")


__all__ = [
    "FALLBACK_KEY",
    "FONT_EXTENSIONS",
    "FallbackProducer",
    "FontRegistry",
    "normalize_fontname",
]
