"""Asynchronous font resolution over an ordered chain of locators.

`ResolverPipeline.resolve` returns at once with a `FontPromise` while a
background thread does the work:

1. stop with the context's error if the context is already cancelled, and
   with `InvalidPatternError` if the pattern is not a valid regex;
2. return the registry entry for the normalised key, if any;
3. try each locator in order, checking the context before each call and again
   after a failed one; the first font found is stored in the registry;
4. when every locator declined, deliver the registry's fallback font together
   with a `FontNotFoundError`. Misses are not cached.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
import logging
from threading import Event, Lock, Thread
from typing import Protocol

from fontfind.context import Context
from fontfind.exceptions import (
    FallbackUnavailableError,
    FontNotFoundError,
    InvalidPatternError,
    PromiseConsumedError,
)
from fontfind.matcher import compile_pattern
from fontfind.registry import normalize_fontname
from fontfind.types import NULL_FONT, Descriptor, ScalableFont


logger = logging.getLogger(__name__)

Locator = Callable[[Context, Descriptor], ScalableFont]
"""Context-aware locator; raises to decline a descriptor."""

SimpleLocator = Callable[[Descriptor], ScalableFont]
"""Locator unaware of cancellation."""


class FontStore(Protocol):
    """Cache contract consumed by `ResolverPipeline`."""

    def get_font(self, key: str) -> ScalableFont | None: ...

    def store_font(self, key: str, font: ScalableFont) -> None: ...

    def fallback_font(self) -> ScalableFont: ...


def adapt_locator(locator: SimpleLocator) -> Locator:
    """Wrap a context-naive locator so it can join a pipeline."""

    def _locate(_ctx: Context, descriptor: Descriptor) -> ScalableFont:
        return locator(descriptor)

    _locate.__name__ = getattr(locator, "__name__", "locator")
    return _locate


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of one resolution: a font, an error, or both when degraded."""

    font: ScalableFont
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def degraded(self) -> bool:
        """True when the font is the fallback delivered with a not-found error."""
        return isinstance(self.error, FontNotFoundError) and not self.font.is_null()

    def unwrap(self) -> ScalableFont:
        """Return the font, or raise the error."""
        if self.error is not None:
            raise self.error
        return self.font


class FontPromise:
    """Single-delivery handle on a background resolution.

    The result can be observed once. Further calls to `result` or `font` raise
    `PromiseConsumedError`. A waiter whose own context fires first gets that
    context's error and leaves the result in place for a later call.
    """

    def __init__(self) -> None:
        self._ready = Event()
        self._lock = Lock()
        self._waiters: list[Event] = []
        self._resolution: Resolution | None = None
        self._consumed = False

    def _deliver(self, resolution: Resolution) -> None:
        with self._lock:
            if self._resolution is not None:
                raise RuntimeError("font promise already completed")
            self._resolution = resolution
            waiters, self._waiters = self._waiters, []
        self._ready.set()
        for waiter in waiters:
            waiter.set()

    def done(self) -> bool:
        """Return True once the background work has delivered its result."""
        return self._ready.is_set()

    def result(self, ctx: Context | None = None) -> Resolution:
        """Wait for the resolution, or for ``ctx`` to be cancelled."""
        if ctx is not None and not self._wait_or_cancel(ctx):
            return Resolution(NULL_FONT, ctx.err())
        self._ready.wait()
        with self._lock:
            if self._consumed:
                raise PromiseConsumedError("font promise result was already received")
            resolution = self._resolution
            if resolution is None:
                raise RuntimeError("font promise completed without a result")
            self._consumed = True
            return resolution

    def _wait_or_cancel(self, ctx: Context) -> bool:
        """Block until delivery or cancellation; return True if delivered."""
        wake = Event()
        with self._lock:
            if self._resolution is not None:
                return True
            self._waiters.append(wake)

        def _wake(_ctx: Context) -> None:
            wake.set()

        ctx.add_done_callback(_wake)
        try:
            wake.wait()
        finally:
            ctx.remove_done_callback(_wake)
            with self._lock:
                if wake in self._waiters:
                    self._waiters.remove(wake)
        return self._ready.is_set()

    def font(self, ctx: Context | None = None) -> ScalableFont:
        """Wait for the font; raise the delivered error instead, if any.

        A `FontNotFoundError` carries the fallback font in its ``fallback``
        attribute.
        """
        return self.result(ctx).unwrap()


class ResolverPipeline:
    """Registry lookup followed by an ordered trial of locators."""

    def __init__(self, registry: FontStore, *locators: Locator) -> None:
        if registry is None:
            raise ValueError("a font registry is required")
        self.registry = registry
        self.locators: tuple[Locator, ...] = tuple(locators)

    @classmethod
    def from_simple(
        cls, registry: FontStore, locators: Iterable[SimpleLocator]
    ) -> ResolverPipeline:
        """Build a pipeline from context-naive locators."""
        return cls(registry, *(adapt_locator(locator) for locator in locators))

    def resolve(self, descriptor: Descriptor, ctx: Context | None = None) -> FontPromise:
        """Start resolving ``descriptor`` in the background."""
        ctx = ctx or Context.background()
        promise = FontPromise()

        def _run() -> None:
            try:
                resolution = self.search(ctx, descriptor)
            except Exception as exc:
                logger.exception("font resolution for %r failed", descriptor.pattern)
                resolution = Resolution(NULL_FONT, exc)
            promise._deliver(resolution)  # noqa: SLF001

        thread = Thread(target=_run, name=f"fontfind-{descriptor.pattern}", daemon=True)
        thread.start()
        return promise

    def search(self, ctx: Context, descriptor: Descriptor) -> Resolution:
        """Resolve ``descriptor`` synchronously in the calling thread."""
        if (error := ctx.err()) is not None:
            return Resolution(NULL_FONT, error)
        try:
            compile_pattern(descriptor.pattern)
        except InvalidPatternError as exc:
            return Resolution(NULL_FONT, exc)
        key = normalize_fontname(descriptor.pattern, descriptor.style, descriptor.weight)
        cached = self.registry.get_font(key)
        if cached is not None:
            return Resolution(cached)
        for locator in self.locators:
            if (error := ctx.err()) is not None:
                return Resolution(NULL_FONT, error)
            name = getattr(locator, "__name__", type(locator).__name__)
            try:
                font = locator(ctx, descriptor)
            except InvalidPatternError as exc:
                return Resolution(NULL_FONT, exc)
            except Exception as exc:
                logger.debug("locator %s declined %s: %s", name, key, exc)
                if (error := ctx.err()) is not None:
                    return Resolution(NULL_FONT, error)
                continue
            if font is None:
                logger.debug("locator %s found nothing for %s", name, key)
                if (error := ctx.err()) is not None:
                    return Resolution(NULL_FONT, error)
                continue
            self.registry.store_font(key, font)
            return Resolution(font)
        try:
            fallback = self.registry.fallback_font()
        except FallbackUnavailableError as exc:
            return Resolution(NULL_FONT, exc)
        return Resolution(fallback, FontNotFoundError(key, fallback))


__all__ = [
    "FontPromise",
    "FontStore",
    "Locator",
    "Resolution",
    "ResolverPipeline",
    "SimpleLocator",
    "adapt_locator",
]
