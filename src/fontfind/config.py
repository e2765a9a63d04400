"""Configuration consumed by the font locators.

FontFindConfig

`app_key` (`str | None`)
: Application key. Names the per-user folders holding the fontconfig list
  (``<config dir>/<app_key>/fontconfig/fontconfig.txt``) and the default font
  download cache (``<cache dir>/<app_key>/fonts``).

`fonts_cache_dir` (`Path | None`)
: Root of the font download cache. Overrides the app-key based default.

`google_fonts_api_key` (`str | None`)
: Key for the Google Fonts developer API. See
  https://developers.google.com/fonts/docs/developer_api.

`fontconfig` (`Path | None`)
: Path of the ``fc-list`` binary, used to produce the font list when no
  ``fontconfig.txt`` has been prepared.

`font_dirs` (`list[Path]`)
: Extra folders scanned for font files, before the platform's font folders.

Values are read from a YAML file, then from the environment
(``FONTFIND_APP_KEY``, ``FONTFIND_FONTS_CACHE_DIR``, ``GOOGLE_FONTS_API_KEY``),
then from keyword overrides; later sources win.
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
import yaml

from fontfind.exceptions import ConfigurationError


ENV_VARIABLES: Mapping[str, str] = {
    "app_key": "FONTFIND_APP_KEY",
    "fonts_cache_dir": "FONTFIND_FONTS_CACHE_DIR",
    "google_fonts_api_key": "GOOGLE_FONTS_API_KEY",
}


class FontFindConfig(BaseModel):
    """Settings shared by the system-font and web-font locators."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    app_key: str | None = None
    fonts_cache_dir: Path | None = None
    google_fonts_api_key: str | None = Field(default=None, repr=False)
    fontconfig: Path | None = None
    font_dirs: list[Path] = Field(default_factory=list)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot read configuration file '{path}': {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"configuration file '{path}' must contain a mapping")
    return {str(key).replace("-", "_"): value for key, value in data.items()}


def _from_environment() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field_name, variable in ENV_VARIABLES.items():
        value = os.environ.get(variable)
        if value:
            values[field_name] = value
    return values


def load_config(path: str | Path | None = None, **overrides: Any) -> FontFindConfig:
    """Build a configuration from a YAML file, the environment and ``overrides``."""
    payload: dict[str, Any] = {}
    if path is not None:
        payload.update(_read_yaml(Path(path)))
    payload.update(_from_environment())
    payload.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return FontFindConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid configuration: {exc}") from exc


__all__ = ["ENV_VARIABLES", "FontFindConfig", "load_config"]
