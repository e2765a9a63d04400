"""Process-wide entry points for font resolution.

>>> from fontfind import Descriptor, Weight, resolve_font
>>> promise = resolve_font(Descriptor("Noto Sans", weight=Weight.BOLD))
>>> font = promise.result().font

All pipelines created here share one registry, so a font found once is served
from memory afterwards.
"""

from __future__ import annotations

from threading import Lock

from fontfind.config import FontFindConfig
from fontfind.context import Context
from fontfind.locators.googlefont import GoogleFontService
from fontfind.locators.packaged import packaged_fallback
from fontfind.locators.systemfont import SystemFontLocator
from fontfind.pipeline import FontPromise, Locator, ResolverPipeline, SimpleLocator
from fontfind.registry import FontRegistry
from fontfind.types import Descriptor


_REGISTRY: FontRegistry | None = None
_LOCK = Lock()


def default_registry() -> FontRegistry:
    """Return the process-wide registry, falling back to the packaged font."""
    global _REGISTRY
    if _REGISTRY is not None:
        return _REGISTRY
    with _LOCK:
        if _REGISTRY is None:
            _REGISTRY = FontRegistry(fallback=packaged_fallback)
        return _REGISTRY


def resolve_font(descriptor: Descriptor, *locators: SimpleLocator) -> FontPromise:
    """Resolve ``descriptor`` against the default registry and ``locators``."""
    return ResolverPipeline.from_simple(default_registry(), locators).resolve(descriptor)


def resolve_font_with_context(
    ctx: Context, descriptor: Descriptor, *locators: Locator
) -> FontPromise:
    """Resolve ``descriptor`` with context-aware ``locators``, observing ``ctx``."""
    return ResolverPipeline(default_registry(), *locators).resolve(descriptor, ctx)


def standard_locators(config: FontFindConfig | None = None) -> list[Locator]:
    """Return the usual backend chain: installed fonts first, then Google Fonts."""
    config = config or FontFindConfig()
    return [SystemFontLocator(config), GoogleFontService(config)]


__all__ = [
    "default_registry",
    "resolve_font",
    "resolve_font_with_context",
    "standard_locators",
]
