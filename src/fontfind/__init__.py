"""Find scalable fonts by family pattern, style and weight.

Architecture
: `Descriptor` states a request. `ResolverPipeline.resolve` answers it in the
  background and hands back a `FontPromise`, consulting a `FontRegistry` first
  and then a chain of locators (packaged fonts, installed fonts, Google Fonts)
  in order.
: The confidence matcher (`closest_match`, `matches`) scores the variant tags
  reported by backends against the requested style and weight.
: A `Context` carries cancellation and deadlines into the background work.
  When every locator declines, the registry's fallback font is delivered along
  with a `FontNotFoundError`.

Goal
: Give typesetting code one reliable call that always yields a usable font,
  while keeping lookups and downloads to a minimum.
"""

from fontfind.api import (
    default_registry,
    resolve_font,
    resolve_font_with_context,
    standard_locators,
)
from fontfind.config import FontFindConfig, load_config
from fontfind.context import Context
from fontfind.exceptions import (
    ConfigurationError,
    DeadlineExceeded,
    FallbackUnavailableError,
    FontFindError,
    FontNotFoundError,
    InvalidPatternError,
    LocatorError,
    PromiseConsumedError,
    ResolutionCancelled,
)
from fontfind.matcher import (
    Confidence,
    closest_match,
    guess_style_and_weight,
    match_style,
    match_weight,
    matches,
)
from fontfind.pipeline import FontPromise, Resolution, ResolverPipeline, adapt_locator
from fontfind.registry import FontRegistry, normalize_fontname
from fontfind.types import NULL_FONT, Descriptor, FontVariantsLocation, ScalableFont, Style, Weight


__all__ = [
    "NULL_FONT",
    "Confidence",
    "ConfigurationError",
    "Context",
    "DeadlineExceeded",
    "Descriptor",
    "FallbackUnavailableError",
    "FontFindConfig",
    "FontFindError",
    "FontNotFoundError",
    "FontPromise",
    "FontRegistry",
    "FontVariantsLocation",
    "InvalidPatternError",
    "LocatorError",
    "PromiseConsumedError",
    "Resolution",
    "ResolutionCancelled",
    "ResolverPipeline",
    "ScalableFont",
    "Style",
    "Weight",
    "adapt_locator",
    "closest_match",
    "default_registry",
    "guess_style_and_weight",
    "load_config",
    "match_style",
    "match_weight",
    "matches",
    "normalize_fontname",
    "resolve_font",
    "resolve_font_with_context",
    "standard_locators",
]
