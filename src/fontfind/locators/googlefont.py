"""Locate fonts through the Google Fonts developer API.

A valid API key is required, either as ``google_fonts_api_key`` in the
configuration or as ``GOOGLE_FONTS_API_KEY`` in the environment; see
https://developers.google.com/fonts/docs/developer_api.

Matched font files are downloaded once into the font cache, under
``<cache dir>/<first letter of the family>/<Family>-<variant><ext>``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath
from threading import Lock
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError
import requests

from fontfind.cache import download_cached_file, font_cache_dir
from fontfind.config import FontFindConfig
from fontfind.context import Context
from fontfind.exceptions import LocatorError
from fontfind.matcher import Confidence, closest_match, compile_pattern
from fontfind.types import Descriptor, FontVariantsLocation, ScalableFont


if TYPE_CHECKING:  # pragma: no cover - typing only
    from requests import Session


logger = logging.getLogger(__name__)

GOOGLE_FONTS_API = "https://www.googleapis.com/webfonts/v1/webfonts"
API_KEY_VARIABLE = "GOOGLE_FONTS_API_KEY"


class GoogleFontInfo(BaseModel):
    """One family of the Google Fonts directory."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    family: str
    variants: list[str] = Field(default_factory=list)
    subsets: list[str] = Field(default_factory=list)
    version: str = ""
    files: dict[str, str] = Field(default_factory=dict)

    def location(self) -> FontVariantsLocation:
        return FontVariantsLocation(family=self.family, variants=tuple(self.variants))


class GoogleFontsList(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[GoogleFontInfo] = Field(default_factory=list)


class GoogleFontService:
    """Client of the Google Fonts directory and downloader of its font files.

    The directory is fetched on first use and kept for the lifetime of the
    service. A failed fetch is remembered: later lookups fail with the same
    error instead of querying the API again.
    """

    def __init__(
        self,
        config: FontFindConfig | None = None,
        *,
        session: Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.config = config or FontFindConfig()
        self._timeout = timeout
        self._session_lock = Lock()
        self._session: Session | None = session
        self._directory_lock = Lock()
        self._directory: GoogleFontsList | None = None
        self._directory_error: LocatorError | None = None

    def _ensure_session(self) -> Session:
        if self._session is not None:
            return self._session
        with self._session_lock:
            if self._session is None:
                self._session = requests.Session()
            return self._session

    def _api_key(self) -> str | None:
        return self.config.google_fonts_api_key or os.environ.get(API_KEY_VARIABLE) or None

    def directory(self) -> GoogleFontsList:
        """Return the Google Fonts directory, fetching it on first call.

        Raises:
            LocatorError: the API key is missing or the directory could not be
                fetched or decoded.
        """
        with self._directory_lock:
            if self._directory_error is not None:
                raise self._directory_error
            if self._directory is None:
                try:
                    self._directory = self._fetch_directory()
                except LocatorError as exc:
                    self._directory_error = exc
                    raise
            return self._directory

    def _fetch_directory(self) -> GoogleFontsList:
        logger.info("setting up Google Fonts service directory")
        api_key = self._api_key()
        if not api_key:
            logger.error("Google Fonts API key not set")
            raise LocatorError(
                "Google Fonts API key must be set as 'google_fonts_api_key' or as "
                f"{API_KEY_VARIABLE} in the environment; please refer to "
                "https://developers.google.com/fonts/docs/developer_api"
            )
        client = self._ensure_session()
        try:
            response = client.get(
                GOOGLE_FONTS_API,
                params={"sort": "alpha", "key": api_key},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("Google Fonts API request failed: %s", exc)
            raise LocatorError("could not get fonts directory from Google Fonts service") from exc
        if response.status_code != 200:
            logger.error("Google Fonts API request not OK, status = %d", response.status_code)
            raise LocatorError("could not get fonts directory from Google Fonts service")
        try:
            directory = GoogleFontsList.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise LocatorError("could not decode fonts list from Google Fonts service") from exc
        logger.info("transferred list of %d fonts from Google Fonts service", len(directory.items))
        return directory

    def match(self, descriptor: Descriptor) -> tuple[GoogleFontInfo, str]:
        """Return the first family matching ``descriptor`` and its best variant.

        Raises:
            InvalidPatternError: the pattern does not compile.
            LocatorError: no family matches with more than low confidence.
        """
        regex = compile_pattern(descriptor.pattern)
        directory = self.directory()
        for info in directory.items:
            if not regex.search(info.family):
                continue
            logger.debug("Google font name matches pattern: %s", info.family)
            best = closest_match(
                [info.location()], descriptor.pattern, descriptor.style, descriptor.weight
            )
            if best.confidence > Confidence.LOW:
                return info, best.variant
        raise LocatorError(f"no Google font matches pattern {descriptor.pattern!r}")

    def cache_font(self, info: GoogleFontInfo, variant: str) -> tuple[Path, str]:
        """Download ``variant`` of ``info`` into the font cache, if not already there."""
        url = info.files.get(variant)
        if not url:
            raise LocatorError(f"no variant equals {variant}, cannot cache {info.family}")
        cache_dir = font_cache_dir(self.config, info.family[:1].upper())
        name = f"{info.family}-{variant}{PurePosixPath(urlsplit(url).path).suffix}"
        logger.info("caching font %s as %s", info.family, cache_dir / name)
        download_cached_file(cache_dir / name, url, self._ensure_session(), timeout=self._timeout)
        return cache_dir, name

    def find(self, descriptor: Descriptor, ctx: Context | None = None) -> ScalableFont:
        """Return the cached font file for ``descriptor``, downloading it if needed."""
        info, variant = self.match(descriptor)
        if ctx is not None and (error := ctx.err()) is not None:
            raise error
        cache_dir, name = self.cache_font(info, variant)
        return ScalableFont(
            name=name,
            style=descriptor.style,
            weight=descriptor.weight,
            fs=cache_dir,
            path=name,
        )

    def __call__(self, ctx: Context, descriptor: Descriptor) -> ScalableFont:
        return self.find(descriptor, ctx)

    def list_fonts(self, pattern: str, log: logging.Logger | None = None) -> list[GoogleFontInfo]:
        """Log, at INFO level, the directory entries whose family matches ``pattern``."""
        log = log or logger
        regex = compile_pattern(pattern)
        try:
            directory = self.directory()
        except LocatorError as exc:
            log.error("unable to list Google fonts: %s", exc)
            return []
        found: list[GoogleFontInfo] = []
        log.info("%d fonts in Google font list", len(directory.items))
        log.info("======================================")
        for index, info in enumerate(directory.items):
            if not regex.search(info.family):
                continue
            found.append(info)
            log.info("[%4d] %-20s: %s", index, info.family, info.version)
            log.info("       subsets: %s", ", ".join(info.subsets))
            for variant, url in info.files.items():
                log.info("       - %-18s: %s", variant, url[-4:])
        return found


def list_google_fonts(
    pattern: str, config: FontFindConfig | None = None, *, session: Session | None = None
) -> list[GoogleFontInfo]:
    """Log the Google Fonts families matching ``pattern`` and return them."""
    return GoogleFontService(config, session=session).list_fonts(pattern)


__all__ = [
    "API_KEY_VARIABLE",
    "GOOGLE_FONTS_API",
    "GoogleFontInfo",
    "GoogleFontService",
    "GoogleFontsList",
    "list_google_fonts",
]
