"""Confidence scoring of font variant tags against a requested style and weight.

Backends describe font families as a list of variant tags, in the vocabulary of
web font services: ``"regular"``, ``"italic"``, ``"700"``, ``"700italic"`` and
so on. Scoring is table driven.

Style
: ``Style.NORMAL`` is satisfied perfectly by ``regular``/``400`` and well by the
  other plain numeric tags. Italic and oblique requests look for the substrings
  ``italic`` and ``obliq`` and accept the other slant with lower confidence.

Weight
: Tags are first classified into a `TagCategory`, then looked up in
  ``_WEIGHT_TABLE``. Only exact, single-purpose tags are classified, so compound
  tags such as ``700italic`` never score on weight.

The combined score of a variant is the floor of the mean of both scores. Among
candidates the first variant reaching a score keeps it until a strictly higher
score shows up.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum, IntEnum
import logging
from pathlib import PurePath
import re
from typing import NamedTuple

from fontfind.exceptions import InvalidPatternError
from fontfind.types import FontVariantsLocation, Style, Weight


logger = logging.getLogger(__name__)


class Confidence(IntEnum):
    """Ordinal quality of a match."""

    NONE = 0
    LOW = 2
    HIGH = 3
    PERFECT = 4


class TagCategory(Enum):
    """Weight class of a variant tag."""

    NEUTRAL = "neutral"
    LIGHT = "light"
    MEDIUM = "medium"
    BOLD = "bold"
    HEAVY = "heavy"
    OTHER = "other"


_TAG_CATEGORIES: Mapping[str, TagCategory] = {
    "regular": TagCategory.NEUTRAL,
    "400": TagCategory.NEUTRAL,
    "italic": TagCategory.NEUTRAL,
    "oblique": TagCategory.NEUTRAL,
    "normal": TagCategory.NEUTRAL,
    "text": TagCategory.NEUTRAL,
    "100": TagCategory.LIGHT,
    "200": TagCategory.LIGHT,
    "300": TagCategory.LIGHT,
    "500": TagCategory.MEDIUM,
    "bold": TagCategory.BOLD,
    "700": TagCategory.BOLD,
    "extrabold": TagCategory.HEAVY,
    "600": TagCategory.HEAVY,
    "800": TagCategory.HEAVY,
    "900": TagCategory.HEAVY,
}

_LIGHT_WEIGHTS = frozenset({Weight.THIN, Weight.EXTRA_LIGHT, Weight.LIGHT})

_WEIGHT_TABLE: Mapping[TagCategory, Mapping[Confidence, frozenset[Weight]]] = {
    TagCategory.NEUTRAL: {
        Confidence.PERFECT: frozenset({Weight.NORMAL, Weight.MEDIUM}),
        Confidence.LOW: _LIGHT_WEIGHTS,
    },
    TagCategory.LIGHT: {
        Confidence.PERFECT: _LIGHT_WEIGHTS,
        Confidence.LOW: frozenset({Weight.NORMAL, Weight.MEDIUM}),
    },
    TagCategory.MEDIUM: {
        Confidence.PERFECT: frozenset({Weight.MEDIUM}),
        Confidence.HIGH: frozenset({Weight.SEMI_BOLD}),
        Confidence.LOW: frozenset({Weight.NORMAL, Weight.BOLD}),
    },
    TagCategory.BOLD: {
        Confidence.PERFECT: frozenset({Weight.BOLD}),
        Confidence.HIGH: frozenset({Weight.SEMI_BOLD, Weight.EXTRA_BOLD}),
    },
    TagCategory.HEAVY: {
        Confidence.HIGH: frozenset({Weight.BOLD}),
        Confidence.LOW: frozenset({Weight.SEMI_BOLD}),
    },
}

_NORMAL_PERFECT_TAGS = frozenset({"regular", "400"})
_NORMAL_HIGH_TAGS = frozenset({"100", "200", "300", "500"})

_SUFFIX_GUESSES: Mapping[str, Weight] = {
    "light": Weight.LIGHT,
    "xlight": Weight.LIGHT,
    "normal": Weight.NORMAL,
    "medium": Weight.NORMAL,
    "regular": Weight.NORMAL,
    "r": Weight.NORMAL,
    "bold": Weight.BOLD,
    "b": Weight.BOLD,
    "xbold": Weight.EXTRA_BOLD,
    "black": Weight.EXTRA_BOLD,
}


class Match(NamedTuple):
    """Best candidate found by `closest_match`."""

    location: FontVariantsLocation | None
    variant: str
    confidence: int


NO_MATCH = Match(None, "", Confidence.NONE)


def tag_category(tag: str) -> TagCategory:
    """Classify a variant tag by the weight it names."""
    return _TAG_CATEGORIES.get(tag.lower(), TagCategory.OTHER)


def match_style(tag: str, style: Style) -> Confidence:
    """Score how well a variant tag matches a requested style."""
    tag = tag.lower()
    if style is Style.NORMAL:
        if tag in _NORMAL_PERFECT_TAGS:
            return Confidence.PERFECT
        if tag in _NORMAL_HIGH_TAGS:
            return Confidence.HIGH
        return Confidence.NONE
    if style is Style.ITALIC:
        if "italic" in tag:
            return Confidence.PERFECT
        if "obliq" in tag:
            return Confidence.HIGH
        return Confidence.NONE
    if style is Style.OBLIQUE:
        if "obliq" in tag:
            return Confidence.PERFECT
        if "italic" in tag:
            return Confidence.HIGH
    return Confidence.NONE


def match_weight(tag: str, weight: Weight) -> Confidence:
    """Score how well a variant tag matches a requested weight."""
    tag = tag.lower()
    # Numeric shortcut: ordinal + 400, so in practice only "400" for NORMAL.
    if tag == str(int(weight) + 400):
        return Confidence.PERFECT
    table = _WEIGHT_TABLE.get(tag_category(tag))
    if table is None:
        return Confidence.NONE
    for confidence, weights in table.items():
        if weight in weights:
            return confidence
    return Confidence.NONE


def match_variant(tag: str, style: Style, weight: Weight) -> int:
    """Return the combined confidence of a variant tag.

    The result is an ordinal on the `Confidence` scale but may fall between two
    named levels: a tag scoring `Confidence.NONE` on style and `Confidence.LOW`
    on weight combines to 1.
    """
    return (match_style(tag, style) + match_weight(tag, weight)) // 2


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a family-name pattern as a case-insensitive regular expression."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.error("invalid font name pattern %r: %s", pattern, exc)
        raise InvalidPatternError(pattern, str(exc)) from exc


def closest_match(
    candidates: Iterable[FontVariantsLocation],
    pattern: str,
    style: Style,
    weight: Weight,
) -> Match:
    """Return the best ``(family, variant, confidence)`` among ``candidates``.

    Only families whose name matches ``pattern`` are scored. Ties keep the
    earliest variant seen. Returns `NO_MATCH` when nothing scores above
    `Confidence.NONE`.

    Raises:
        InvalidPatternError: ``pattern`` does not compile.
    """
    regex = compile_pattern(pattern)
    best = NO_MATCH
    for location in candidates:
        if not regex.search(location.family):
            continue
        for variant in location.variants:
            confidence = match_variant(variant, style, weight)
            if confidence > best.confidence:
                best = Match(location, variant, confidence)
    if best.location is not None:
        logger.debug(
            "closest match for %r: %s|%s (confidence %d)",
            pattern,
            best.location.family,
            best.variant,
            best.confidence,
        )
    return best


def guess_style_and_weight(filename: str) -> tuple[Style, Weight]:
    """Guess a font's style and weight from its file name."""
    stem = PurePath(filename).stem.lower()
    parts = stem.split("-")
    if len(parts) > 1 and parts[-1] in _SUFFIX_GUESSES:
        return Style.NORMAL, _SUFFIX_GUESSES[parts[-1]]
    style, weight = Style.NORMAL, Weight.NORMAL
    if "italic" in stem:
        style = Style.ITALIC
    if "light" in stem:
        weight = Weight.LIGHT
    if "bold" in stem:
        weight = Weight.BOLD
    return style, weight


def matches(filename: str, pattern: str, style: Style, weight: Weight) -> bool:
    """Return True if a font file name contains ``pattern`` and names the style/weight."""
    stem = PurePath(filename).stem.lower()
    if pattern.lower() not in stem:
        return False
    return guess_style_and_weight(stem) == (style, weight)


__all__ = [
    "NO_MATCH",
    "Confidence",
    "Match",
    "TagCategory",
    "closest_match",
    "compile_pattern",
    "guess_style_and_weight",
    "match_style",
    "match_variant",
    "match_weight",
    "matches",
    "tag_category",
]
