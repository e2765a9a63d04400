"""Locate fonts installed on the host.

Two sources are consulted:

1. A font list in ``fc-list`` format, prepared by the user at
   ``<user config dir>/<app_key>/fontconfig/fontconfig.txt`` (for example with
   ``fc-list > fontconfig.txt``), or produced by the ``fc-list`` binary named by
   the ``fontconfig`` setting. When such a list is available it is
   authoritative: a font missing from it is not searched on disk.
2. Otherwise the platform's font folders, plus any configured ``font_dirs``,
   are scanned for ``.ttf`` and ``.otf`` files.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import logging
import os
from pathlib import Path
import subprocess
import sys
from threading import Lock

from fontfind.config import FontFindConfig
from fontfind.context import Context
from fontfind.exceptions import LocatorError
from fontfind.matcher import Confidence, closest_match, matches
from fontfind.types import Descriptor, FontVariantsLocation, ScalableFont
from fontfind.user_dir import resolve_user_dirs


logger = logging.getLogger(__name__)

FONT_LIST_FILE = "fontconfig.txt"
SCANNED_SUFFIXES = frozenset({".ttf", ".otf"})

# Order matters: the first keyword found in the style text decides the tag.
_STYLE_TAGS: tuple[tuple[str, str], ...] = (
    ("regular", "regular"),
    ("text", "regular"),
    ("light", "light"),
    ("italic", "italic"),
    ("bold", "bold"),
    ("black", "bold"),
)


def _variant_tag(style_text: str) -> str | None:
    lowered = style_text.lower()
    for keyword, tag in _STYLE_TAGS:
        if keyword in lowered:
            return tag
    return None


def parse_font_list(text: str) -> list[FontVariantsLocation]:
    """Parse ``fc-list`` output (``path: family[,alias]:style=...``) into locations.

    Collections (``.ttc``) are skipped. Entries whose style names no known tag
    are kept without variants.
    """
    locations: list[FontVariantsLocation] = []
    collections = 0
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        fields = line.split(":")
        if len(fields) < 3:
            continue
        font_path = fields[0].strip()
        if font_path.lower().endswith(".ttc"):
            collections += 1
            continue
        family = fields[1].strip().split(",")[0].strip().lstrip(".")
        tag = _variant_tag(fields[2])
        locations.append(
            FontVariantsLocation(
                family=family,
                variants=(tag,) if tag else (),
                path=font_path,
            )
        )
    if collections:
        logger.info("skipping %d platform fonts: font collections are not supported", collections)
    return locations


def platform_font_dirs() -> list[Path]:
    """Return the usual font folders of the running platform."""
    home = Path.home()
    if sys.platform == "win32":
        windir = os.environ.get("WINDIR", r"C:\Windows")
        dirs = [Path(windir) / "Fonts"]
        local = os.environ.get("LOCALAPPDATA")
        if local:
            dirs.append(Path(local) / "Microsoft" / "Windows" / "Fonts")
        return dirs
    if sys.platform == "darwin":
        return [
            home / "Library" / "Fonts",
            Path("/Library/Fonts"),
            Path("/System/Library/Fonts"),
            Path("/Network/Library/Fonts"),
        ]
    data_home = os.environ.get("XDG_DATA_HOME") or str(home / ".local" / "share")
    data_dirs = os.environ.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
    dirs = [home / ".fonts", Path(data_home) / "fonts"]
    dirs.extend(Path(entry) / "fonts" for entry in data_dirs.split(os.pathsep) if entry)
    return dirs


def _iter_font_files(folders: Iterable[Path]) -> Iterator[Path]:
    for folder in folders:
        if not folder.is_dir():
            continue
        for path in sorted(folder.rglob("*")):
            if path.suffix.lower() in SCANNED_SUFFIXES and path.is_file():
                yield path


def find_font_file(
    folders: Iterable[Path], pattern: str, descriptor: Descriptor
) -> Path | None:
    """Return the first font file named exactly ``pattern``, else the first matching one."""
    candidates = list(_iter_font_files(folders))
    wanted = pattern.lower()
    for path in candidates:
        if path.stem.lower() == wanted:
            return path
    for path in candidates:
        if matches(path.name, pattern, descriptor.style, descriptor.weight):
            return path
    return None


class SystemFontLocator:
    """Context-aware locator over the fonts installed on the host.

    The font list is read once, on first use, and kept for the lifetime of the
    locator.
    """

    def __init__(
        self,
        config: FontFindConfig | None = None,
        *,
        font_dirs: Iterable[Path] | None = None,
    ) -> None:
        self.config = config or FontFindConfig()
        self._font_dirs = list(font_dirs) if font_dirs is not None else None
        self._lock = Lock()
        self._loaded = False
        self._font_list: list[FontVariantsLocation] | None = None

    @property
    def font_dirs(self) -> list[Path]:
        if self._font_dirs is not None:
            return self._font_dirs
        return [*self.config.font_dirs, *platform_font_dirs()]

    def font_list(self) -> list[FontVariantsLocation] | None:
        """Return the parsed font list, or None when no list is available."""
        with self._lock:
            if not self._loaded:
                text = self._read_font_list()
                self._font_list = parse_font_list(text) if text is not None else None
                self._loaded = True
                if self._font_list is not None:
                    logger.info("loaded font list with %d entries", len(self._font_list))
            return self._font_list

    def _read_font_list(self) -> str | None:
        if self.config.app_key:
            list_path = resolve_user_dirs(self.config.app_key).config_path(
                "fontconfig", FONT_LIST_FILE
            )
            try:
                return list_path.read_text(encoding="utf-8")
            except FileNotFoundError:
                logger.debug("no font list at %s", list_path)
            except OSError as exc:
                logger.warning("cannot read font list %s: %s", list_path, exc)
        if self.config.fontconfig is None:
            logger.debug("fontconfig not configured: 'fontconfig' should point to 'fc-list'")
            return None
        try:
            proc = subprocess.run(
                [str(self.config.fontconfig)],
                check=True,
                capture_output=True,
                text=True,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.warning("cannot run %s: %s", self.config.fontconfig, exc)
            return None
        return proc.stdout

    def __call__(self, ctx: Context, descriptor: Descriptor) -> ScalableFont:
        pattern = descriptor.pattern
        font_list = self.font_list()
        if font_list is not None:
            best = closest_match(font_list, pattern, descriptor.style, descriptor.weight)
            logger.debug("closest font list match for %s: confidence %d", pattern, best.confidence)
            if best.location is None or best.confidence <= Confidence.LOW:
                raise LocatorError(f"no such font: {pattern}")
            return self._font_at(descriptor, Path(best.location.path))
        if (error := ctx.err()) is not None:
            raise error
        found = find_font_file(self.font_dirs, pattern, descriptor)
        if found is None:
            raise LocatorError(f"no such font: {pattern}")
        logger.debug("%s is a system font: %s", pattern, found)
        return self._font_at(descriptor, found)

    @staticmethod
    def _font_at(descriptor: Descriptor, path: Path) -> ScalableFont:
        return ScalableFont(
            name=descriptor.pattern,
            style=descriptor.style,
            weight=descriptor.weight,
            fs=path.parent,
            path=path.name,
        )


__all__ = [
    "FONT_LIST_FILE",
    "SystemFontLocator",
    "find_font_file",
    "parse_font_list",
    "platform_font_dirs",
]
