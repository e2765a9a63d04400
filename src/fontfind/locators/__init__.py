"""Font backends pluggable into a `ResolverPipeline`.

`PackagedFontLocator`
: Fonts shipped as package data. Always answers while its folder holds a
  font file, which makes it the backend of last resort.

`SystemFontLocator`
: Fonts installed on the host, through a prepared ``fc-list`` listing or a
  scan of the platform font folders.

`GoogleFontService`
: Families of the Google Fonts directory, downloaded into the font cache.
"""

from fontfind.locators.googlefont import GoogleFontService, list_google_fonts
from fontfind.locators.packaged import (
    PackagedFontLocator,
    find_packaged_font,
    packaged_fallback,
)
from fontfind.locators.systemfont import SystemFontLocator


__all__ = [
    "GoogleFontService",
    "PackagedFontLocator",
    "SystemFontLocator",
    "find_packaged_font",
    "list_google_fonts",
    "packaged_fallback",
]
