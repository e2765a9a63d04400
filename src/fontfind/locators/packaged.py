"""Fonts shipped inside a package, including the embedded fallback font."""

from __future__ import annotations

from importlib.resources import files
from importlib.resources.abc import Traversable
import logging

from fontfind.exceptions import LocatorError
from fontfind.matcher import matches
from fontfind.types import Descriptor, ScalableFont, Style, Weight


logger = logging.getLogger(__name__)

PACKAGED_FOLDER = "packaged"
FONT_SUFFIXES = frozenset({".ttf", ".otf"})


def _font_names(folder: Traversable) -> list[str]:
    if not folder.is_dir():
        return []
    names = [
        entry.name
        for entry in folder.iterdir()
        if entry.is_file() and entry.name[entry.name.rfind(".") :].lower() in FONT_SUFFIXES
    ]
    return sorted(names)


def find_packaged_font(
    pattern: str,
    style: Style = Style.NORMAL,
    weight: Weight = Weight.NORMAL,
    *,
    root: Traversable | None = None,
    folder: str = PACKAGED_FOLDER,
) -> ScalableFont:
    """Return the packaged font best fitting ``pattern``.

    The first file (by name) whose name carries the pattern, style and weight
    wins. Otherwise the last font file of the folder stands in, so a folder
    holding a single font always answers with it.

    Raises:
        LocatorError: the folder holds no font file.
    """
    root = root if root is not None else files("fontfind")
    fname = ""
    for name in _font_names(root.joinpath(folder)):
        fname = name
        if matches(name, pattern, style, weight):
            logger.debug("found packaged font file %s", name)
            break
    if not fname:
        raise LocatorError(f"no packaged font in '{folder}'")
    return ScalableFont(
        name=fname,
        style=style,
        weight=weight,
        fs=root,
        path=f"{folder}/{fname}",
    )


class PackagedFontLocator:
    """Context-naive locator over a folder of packaged fonts."""

    def __init__(self, root: Traversable | None = None, folder: str = PACKAGED_FOLDER) -> None:
        self.root = root
        self.folder = folder

    def __call__(self, descriptor: Descriptor) -> ScalableFont:
        return find_packaged_font(
            descriptor.pattern,
            descriptor.style,
            descriptor.weight,
            root=self.root,
            folder=self.folder,
        )


def packaged_fallback() -> ScalableFont:
    """Return the font embedded in this package (DejaVu Sans)."""
    return find_packaged_font("dejavu")


__all__ = [
    "FONT_SUFFIXES",
    "PACKAGED_FOLDER",
    "PackagedFontLocator",
    "find_packaged_font",
    "packaged_fallback",
]
