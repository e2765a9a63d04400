"""Resolution of the per-user configuration and cache roots."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import sys


__all__ = [
    "UserDirs",
    "resolve_user_dirs",
    "user_cache_dir",
    "user_config_dir",
]


def user_config_dir() -> Path:
    """Return the platform's per-user configuration root."""
    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA")
        if not app_data:
            raise OSError("%APPDATA% is not defined")
        return Path(app_data)
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config and Path(xdg_config).is_absolute():
        return Path(xdg_config)
    return Path.home() / ".config"


def user_cache_dir() -> Path:
    """Return the platform's per-user cache root."""
    if sys.platform == "win32":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if not local_app_data:
            raise OSError("%LOCALAPPDATA% is not defined")
        return Path(local_app_data)
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches"
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache and Path(xdg_cache).is_absolute():
        return Path(xdg_cache)
    return Path.home() / ".cache"


@dataclass(slots=True)
class UserDirs:
    """Configuration and cache roots of one application key."""

    app_key: str
    config_root: Path
    cache_root: Path

    def config_path(self, *parts: str | Path) -> Path:
        """Return a path under ``<config root>/<app key>``; nothing is created."""
        return self.config_root.joinpath(self.app_key, *parts)

    def cache_dir(self, *parts: str | Path, create: bool = True) -> Path:
        """Return a directory under ``<cache root>/<app key>``, creating it when requested."""
        target = self.cache_root.joinpath(self.app_key, *parts)
        if create:
            target.mkdir(mode=0o750, parents=True, exist_ok=True)
        return target


def resolve_user_dirs(app_key: str) -> UserDirs:
    """Return the user directories for ``app_key``."""
    if not app_key:
        raise ValueError("application key is not set")
    return UserDirs(
        app_key=app_key,
        config_root=user_config_dir(),
        cache_root=user_cache_dir(),
    )
