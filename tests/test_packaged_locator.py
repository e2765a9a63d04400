from __future__ import annotations

from pathlib import Path

import pytest

from fontfind.exceptions import LocatorError
from fontfind.locators.packaged import (
    PackagedFontLocator,
    find_packaged_font,
    packaged_fallback,
)
from fontfind.types import Descriptor, Style, Weight


def _write_font(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")


def test_packaged_fallback_is_embedded_dejavu():
    font = packaged_fallback()

    assert not font.is_null()
    assert font.name == "DejaVuSans.ttf"
    assert font.path == "packaged/DejaVuSans.ttf"
    with font.open() as handle:
        assert len(handle.read(4)) == 4


def test_matching_file_wins(tmp_path: Path):
    for name in ("DemoSans-Bold.ttf", "DemoSans-Regular.ttf", "Other-Regular.otf"):
        _write_font(tmp_path / "fonts" / name)

    font = find_packaged_font("demosans", Style.NORMAL, Weight.BOLD, root=tmp_path, folder="fonts")

    assert font.name == "DemoSans-Bold.ttf"
    assert font.fs == tmp_path
    assert font.location == tmp_path / "fonts" / "DemoSans-Bold.ttf"
    assert font.weight is Weight.BOLD


def test_last_file_stands_in_without_match(tmp_path: Path):
    for name in ("Alpha.ttf", "Beta.otf", "README.txt"):
        _write_font(tmp_path / "fonts" / name)

    locator = PackagedFontLocator(root=tmp_path, folder="fonts")
    font = locator(Descriptor("Gamma", Style.ITALIC))

    assert font.name == "Beta.otf"
    assert font.style is Style.ITALIC


def test_empty_folder_declines(tmp_path: Path):
    (tmp_path / "fonts").mkdir()

    with pytest.raises(LocatorError):
        find_packaged_font("demo", root=tmp_path, folder="fonts")
    with pytest.raises(LocatorError):
        find_packaged_font("demo", root=tmp_path, folder="missing")
