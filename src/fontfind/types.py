"""Value types shared by the matcher, the registry, and the locators."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from importlib.resources.abc import Traversable
from typing import BinaryIO


class Style(Enum):
    """Slant of a font face."""

    NORMAL = 0
    ITALIC = 1
    OBLIQUE = 2


class Weight(IntEnum):
    """Ordinal font weight; ``value + 4`` hundred is the CSS weight."""

    THIN = -3
    EXTRA_LIGHT = -2
    LIGHT = -1
    NORMAL = 0
    MEDIUM = 1
    SEMI_BOLD = 2
    BOLD = 3
    EXTRA_BOLD = 4
    BLACK = 5

    @property
    def css_weight(self) -> int:
        return (self.value + 4) * 100


@dataclass(frozen=True, slots=True)
class Descriptor:
    """A font request: family-name pattern plus style and weight."""

    pattern: str
    style: Style = Style.NORMAL
    weight: Weight = Weight.NORMAL


@dataclass(frozen=True, slots=True)
class ScalableFont:
    """Where the bytes of a font live, not the bytes themselves.

    ``fs`` is the root of a (possibly virtual) file system: a directory
    :class:`~pathlib.Path` or a package root from :mod:`importlib.resources`.
    ``path`` is relative to it.
    """

    name: str = ""
    style: Style = Style.NORMAL
    weight: Weight = Weight.NORMAL
    fs: Traversable | None = field(default=None, compare=False)
    path: str = ""

    def is_null(self) -> bool:
        """Return True for the sentinel that stands for "no font"."""
        return not self.name or not self.path

    @property
    def location(self) -> Traversable:
        """Return the traversable entry pointing at the font file."""
        if self.fs is None:
            raise ValueError(f"font {self.name!r} has no file system attached")
        return self.fs.joinpath(*self.path.split("/"))

    def open(self) -> BinaryIO:
        """Open the font file for binary reading."""
        return self.location.open("rb")


NULL_FONT = ScalableFont()


@dataclass(frozen=True, slots=True)
class FontVariantsLocation:
    """Known variants of one font family, as reported by a backend."""

    family: str
    variants: tuple[str, ...] = ()
    path: str = ""


__all__ = [
    "NULL_FONT",
    "Descriptor",
    "FontVariantsLocation",
    "ScalableFont",
    "Style",
    "Weight",
]
