"""Disk cache for downloaded font files."""

from __future__ import annotations

import logging
from pathlib import Path
import tempfile
from typing import TYPE_CHECKING

import requests

from fontfind.config import FontFindConfig
from fontfind.exceptions import ConfigurationError, LocatorError
from fontfind.user_dir import resolve_user_dirs


if TYPE_CHECKING:  # pragma: no cover - typing only
    from requests import Session


logger = logging.getLogger(__name__)

CACHE_DIR_MODE = 0o750
DOWNLOAD_TIMEOUT = 30.0
_CHUNK_SIZE = 64 * 1024


class FontCache:
    """Resolve folders of the font download cache.

    The root is ``fonts_cache_dir`` when configured, otherwise
    ``<user cache dir>/<app_key>/fonts``.
    """

    def __init__(self, config: FontFindConfig) -> None:
        self.config = config

    @property
    def root(self) -> Path:
        if self.config.fonts_cache_dir is not None:
            return Path(self.config.fonts_cache_dir)
        if not self.config.app_key:
            raise ConfigurationError("application key is not set")
        return resolve_user_dirs(self.config.app_key).cache_dir("fonts", create=False)

    def folder(self, subfolder: str = "") -> Path:
        """Return a cache folder, creating it with mode ``0o750`` if missing."""
        target = self.root / subfolder if subfolder else self.root
        logger.debug("caching resource in %s", target)
        target.mkdir(mode=CACHE_DIR_MODE, parents=True, exist_ok=True)
        return target


def font_cache_dir(config: FontFindConfig, subfolder: str = "") -> Path:
    """Return (and create) ``subfolder`` of the font download cache."""
    return FontCache(config).folder(subfolder)


def download_cached_file(
    path: Path,
    url: str,
    session: Session | None = None,
    *,
    timeout: float = DOWNLOAD_TIMEOUT,
) -> Path:
    """Download ``url`` into ``path`` unless the file already exists.

    The payload is written to a temporary sibling first, so an interrupted
    download never leaves a truncated font behind.

    Raises:
        LocatorError: the request failed or returned an error status.
    """
    if path.exists():
        logger.info("font already cached: %s", path)
        return path
    client = session or requests
    logger.info("downloading %s to %s", url, path)
    try:
        response = client.get(url, stream=True, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise LocatorError(f"cannot download '{url}': {exc}") from exc
    path.parent.mkdir(mode=CACHE_DIR_MODE, parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(dir=path.parent, prefix=".part-", delete=False) as handle:
        tmp_path = Path(handle.name)
        try:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                if chunk:
                    handle.write(chunk)
        except (OSError, requests.RequestException) as exc:
            handle.close()
            tmp_path.unlink(missing_ok=True)
            raise LocatorError(f"cannot download '{url}': {exc}") from exc
    tmp_path.replace(path)
    return path


__all__ = ["CACHE_DIR_MODE", "FontCache", "download_cached_file", "font_cache_dir"]
